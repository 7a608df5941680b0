"""
Shared fixtures for tokentransfer tests.
"""

from typing import Any, Dict, Optional
from unittest.mock import AsyncMock

import pytest
from eth_account import Account
from eth_utils import keccak, to_checksum_address
from web3.exceptions import TransactionNotFound

from tokentransfer import SecretKey, TransferSettings


# =============================================================================
# Test Constants
# =============================================================================

# Private key for tests (DO NOT USE IN PRODUCTION)
TEST_PRIVATE_KEY = "0x" + "11" * 32
OTHER_PRIVATE_KEY = "0x" + "22" * 32
SENDER = Account.from_key(TEST_PRIVATE_KEY).address

# USDT on mainnet and a counterparty, checksummed
TOKEN = to_checksum_address("0xdac17f958d2ee523a2206206994597c13d831ec7")
RECIPIENT = to_checksum_address("0x27f44b7de8abc05db1b3de48017da84ebc635be9")

CHAIN_ID = 1
TX_HASH = "0x" + "ab" * 32


def receipt_dict(status: int = 1, block_number: int = 100) -> Dict[str, Any]:
    return {
        "status": status,
        "blockNumber": block_number,
        "blockHash": b"\x01" * 32,
        "gasUsed": 51_000,
    }


# =============================================================================
# Web3 stubs
# =============================================================================


class StubEth:
    """Stands in for ``AsyncWeb3.eth``; every RPC method is an AsyncMock."""

    def __init__(self, nonce: int = 5, gas_price: Any = 20, gas_estimate: int = 60_000) -> None:
        self.get_transaction_count = AsyncMock(return_value=nonce)
        self.estimate_gas = AsyncMock(return_value=gas_estimate)
        self.send_raw_transaction = AsyncMock(side_effect=lambda raw: keccak(raw))
        self.get_transaction_receipt = AsyncMock(return_value=receipt_dict())
        self.gas_price_value = gas_price
        self.gas_price_calls = 0

    @property
    def gas_price(self):
        self.gas_price_calls += 1

        async def _fetch():
            if isinstance(self.gas_price_value, BaseException):
                raise self.gas_price_value
            return self.gas_price_value

        return _fetch()

    def receipts(self, *results: Optional[Any]) -> None:
        """Queue receipt results: None means not found, exceptions are raised."""
        side_effects = []
        for result in results:
            side_effects.append(TransactionNotFound("not found") if result is None else result)
        self.get_transaction_receipt.side_effect = side_effects


class StubWeb3:
    def __init__(self, eth: Optional[StubEth] = None) -> None:
        self.eth = eth or StubEth()


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def secret_key() -> SecretKey:
    return SecretKey.from_hex(TEST_PRIVATE_KEY)


@pytest.fixture
def eth() -> StubEth:
    return StubEth()


@pytest.fixture
def w3(eth: StubEth) -> StubWeb3:
    return StubWeb3(eth)


@pytest.fixture
def settings() -> TransferSettings:
    return TransferSettings(
        rpc_url="https://rpc.example.org",
        chain_id=CHAIN_ID,
        sender=SENDER,
        token_address=TOKEN,
        max_attempts=5,
        poll_interval=0,
    )
