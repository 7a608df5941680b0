"""Constants for tokentransfer.

This module defines constant values used across the package,
including ABI encoding constants, gas bounds, polling defaults,
and validation bounds.
"""

# ABI Encoding Constants
ABI_SELECTOR_LENGTH = 4
ERC20_TRANSFER_SIGNATURE = "transfer(address,uint256)"

# Ethereum Constants
ADDRESS_LENGTH = 20
ADDRESS_HEX_LENGTH = 40
TX_HASH_HEX_LENGTH = 64
MAX_UINT256 = 2**256 - 1
NONCE_BLOCK_IDENTIFIER = "pending"

# Gas Constants
GAS_ESTIMATION_BUFFER = 1.0  # estimate is used verbatim unless configured
MAX_GAS_LIMIT = 30_000_000  # mainnet block gas limit

# Confirmation Polling
DEFAULT_MAX_ATTEMPTS = 50
DEFAULT_POLL_INTERVAL_SECONDS = 15.0

# Network Constants
PROVIDER_TIMEOUT_SECONDS = 30

# Node error message fragments
ALREADY_KNOWN_MESSAGES = ("already known", "known transaction")
REVERT_MESSAGES = ("execution reverted", "revert")

__all__ = [
    "ABI_SELECTOR_LENGTH",
    "ERC20_TRANSFER_SIGNATURE",
    "ADDRESS_LENGTH",
    "ADDRESS_HEX_LENGTH",
    "TX_HASH_HEX_LENGTH",
    "MAX_UINT256",
    "NONCE_BLOCK_IDENTIFIER",
    "GAS_ESTIMATION_BUFFER",
    "MAX_GAS_LIMIT",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "PROVIDER_TIMEOUT_SECONDS",
    "ALREADY_KNOWN_MESSAGES",
    "REVERT_MESSAGES",
]
