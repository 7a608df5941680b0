"""Transaction assembly.

TransactionBuilder is pure: identical inputs give an identical
UnsignedTransaction. Addresses and amounts are validated here, before
the manager spends any RPC round-trip.
"""

from __future__ import annotations

import dataclasses
from typing import Optional

from eth_typing import ChecksumAddress

from .abi import encode_transfer_call
from .constants import GAS_ESTIMATION_BUFFER, MAX_GAS_LIMIT
from .errors import BuildError, InvalidAmount
from .models import UnsignedTransaction
from .utils.validation import validate_address, validate_amount


class TransactionBuilder:
    """Assembles legacy EIP-155 transaction envelopes.

    With ``token_address`` set, transactions call ``transfer`` on the
    token contract and carry no native value. Without it they move
    ``amount`` wei of native currency directly.

    Example:
        >>> builder = TransactionBuilder(chain_id=1, token_address=USDT)
        >>> draft = builder.build(sender, recipient, 1_000_000, nonce=5, gas_price=20)
        >>> tx = builder.finalize(draft, gas_limit=60_000)
    """

    def __init__(self, chain_id: int, token_address: Optional[str] = None) -> None:
        if chain_id <= 0:
            raise BuildError("chain_id must be positive")
        self.chain_id = chain_id
        self.token_address: Optional[ChecksumAddress] = (
            validate_address(token_address, "token_address") if token_address is not None else None
        )

    def validate_transfer(self, recipient: str, amount: int) -> ChecksumAddress:
        """Check counterparty and amount; returns the checksummed counterparty."""
        counterparty = validate_address(recipient, "recipient")
        validate_amount(amount)
        if self.token_address is None and amount == 0:
            raise InvalidAmount(amount, reason="native transfer must move value")
        return counterparty

    def build(
        self,
        sender: str,
        recipient: str,
        amount: int,
        nonce: int,
        gas_price: int,
        gas_limit: int = 0,
    ) -> UnsignedTransaction:
        """Assemble an unsigned transaction.

        Args:
            sender: Signing account
            recipient: True counterparty of the transfer
            amount: Token base units (or wei in native mode)
            nonce: Sender's next transaction count
            gas_price: Gas price in wei
            gas_limit: Gas limit; 0 marks a draft to be estimated

        Raises:
            InvalidAddress: If sender or recipient is invalid
            InvalidAmount: If amount is not a uint256, or is zero in native mode
            BuildError: If nonce, gas price or gas limit is out of range
        """
        sender = validate_address(sender, "sender")
        counterparty = self.validate_transfer(recipient, amount)
        for name, value in (("nonce", nonce), ("gas_price", gas_price), ("gas_limit", gas_limit)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise BuildError(f"{name} must be a non-negative integer", details={name: value})
        if nonce >= 2**64 - 1:
            raise BuildError("nonce exceeds 2**64 - 2", details={"nonce": nonce})
        if gas_limit > MAX_GAS_LIMIT:
            raise BuildError(
                f"gas limit ({gas_limit}) exceeds maximum ({MAX_GAS_LIMIT})",
                details={"gas_limit": gas_limit},
            )

        if self.token_address is not None:
            to, value, payload = self.token_address, 0, encode_transfer_call(counterparty, amount)
        else:
            to, value, payload = counterparty, amount, b""

        return UnsignedTransaction(
            sender=sender,
            recipient=to,
            nonce=nonce,
            gas_price=gas_price,
            gas_limit=gas_limit,
            payload=payload,
            value=value,
            chain_id=self.chain_id,
        )

    @staticmethod
    def apply_gas_buffer(estimate: int, buffer: float = GAS_ESTIMATION_BUFFER) -> int:
        """Scale a gas estimate by ``buffer``, capped at MAX_GAS_LIMIT."""
        return min(int(estimate * buffer), MAX_GAS_LIMIT)

    @staticmethod
    def finalize(draft: UnsignedTransaction, gas_limit: int) -> UnsignedTransaction:
        """Return ``draft`` with its gas limit set."""
        if isinstance(gas_limit, bool) or not isinstance(gas_limit, int) or gas_limit <= 0:
            raise BuildError("gas limit must be a positive integer", details={"gas_limit": gas_limit})
        if gas_limit > MAX_GAS_LIMIT:
            raise BuildError(
                f"gas limit ({gas_limit}) exceeds maximum ({MAX_GAS_LIMIT})",
                details={"gas_limit": gas_limit},
            )
        return dataclasses.replace(draft, gas_limit=gas_limit)
