"""
Validation utilities for tokentransfer.

Provides input validation functions for:
- Ethereum addresses (EIP-55 checksum)
- Token amounts (uint256)
- Transaction hashes

All checks run locally, before any RPC round-trip.
"""

from __future__ import annotations

import re
from typing import Any

from eth_typing import ChecksumAddress, HexStr
from eth_utils import is_checksum_address, to_checksum_address

from tokentransfer.constants import ADDRESS_HEX_LENGTH, MAX_UINT256, TX_HASH_HEX_LENGTH
from tokentransfer.errors import InvalidAddress, InvalidAmount

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{%d}$" % ADDRESS_HEX_LENGTH)
TX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{%d}$" % TX_HASH_HEX_LENGTH)


def validate_address(address: Any, field_name: str = "address") -> ChecksumAddress:
    """
    Validate an Ethereum address and return its checksummed form.

    Accepts ``0x`` followed by 40 hex characters that are all-lowercase,
    all-uppercase, or mixed case matching the EIP-55 checksum.

    Args:
        address: Address to validate
        field_name: Field name for error messages

    Returns:
        EIP-55 checksummed address

    Raises:
        InvalidAddress: If the format or checksum is wrong
    """
    if not address:
        raise InvalidAddress("", field=field_name, reason=f"{field_name} is required")

    if not isinstance(address, str):
        raise InvalidAddress(str(address), field=field_name, reason="must be a string")

    if not ADDRESS_PATTERN.match(address):
        raise InvalidAddress(
            address,
            field=field_name,
            reason="must be 0x followed by 40 hex characters",
        )

    body = address[2:]
    single_case = body == body.lower() or body == body.upper()
    if not single_case and not is_checksum_address(address):
        raise InvalidAddress(address, field=field_name, reason="EIP-55 checksum mismatch")

    return to_checksum_address(address)


def is_valid_address(address: Any) -> bool:
    try:
        validate_address(address)
    except InvalidAddress:
        return False
    return True


def validate_amount(amount: Any, field_name: str = "amount") -> int:
    """
    Validate a token amount in base units.

    Args:
        amount: Amount as a Python int
        field_name: Field name for error messages

    Returns:
        The amount

    Raises:
        InvalidAmount: If amount is not an int, is negative or exceeds uint256
    """
    # bool is an int subclass; True is never a meaningful amount
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(amount, field=field_name, reason="must be an integer")
    if amount < 0:
        raise InvalidAmount(amount, field=field_name, reason="cannot be negative")
    if amount > MAX_UINT256:
        raise InvalidAmount(amount, field=field_name, reason="exceeds uint256")
    return amount


def validate_tx_hash(tx_hash: Any) -> HexStr:
    """
    Validate a 32-byte transaction hash and return it lowercased.

    Raises:
        ValueError: If the hash is malformed
    """
    if isinstance(tx_hash, (bytes, bytearray)):
        tx_hash = "0x" + bytes(tx_hash).hex()
    if not isinstance(tx_hash, str) or not TX_HASH_PATTERN.match(tx_hash):
        raise ValueError(f"tx_hash must be 0x followed by 64 hex characters, got {tx_hash!r}")
    return HexStr(tx_hash.lower())
