"""
Transfer pipeline exceptions.

Raised by the chain state reader, builder, signer, broadcaster and
confirmation watcher. Errors raised before broadcast are safe to retry
with a fresh nonce; errors raised after it are not.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from tokentransfer.errors.base import TransferError
from tokentransfer.models import ConfirmationState

if TYPE_CHECKING:
    from tokentransfer.models import Receipt


class InvalidAddress(TransferError):
    """
    Raised when an address fails format or EIP-55 checksum validation.

    Example:
        >>> raise InvalidAddress("0xabc", field="recipient", reason="too short")
    """

    def __init__(
        self,
        address: str,
        *,
        field: str = "address",
        reason: Optional[str] = None,
    ) -> None:
        message = f"Invalid {field}: {address!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(
            message,
            code="INVALID_ADDRESS",
            details={"address": address, "field": field, "reason": reason},
        )
        self.address = address
        self.field = field
        self.reason = reason


class InvalidAmount(TransferError):
    """Raised when an amount is not a non-negative uint256 integer."""

    def __init__(self, amount: Any, *, field: str = "amount", reason: Optional[str] = None) -> None:
        message = f"Invalid {field}: {amount!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(
            message,
            code="INVALID_AMOUNT",
            details={"amount": str(amount), "field": field, "reason": reason},
        )
        self.amount = amount
        self.field = field
        self.reason = reason


class ChainQueryError(TransferError):
    """
    Raised when a JSON-RPC request fails or returns a malformed result.

    Attributes:
        operation: JSON-RPC method that failed (e.g., "eth_gasPrice").
    """

    def __init__(
        self,
        operation: str,
        message: str,
        *,
        tx_hash: Optional[str] = None,
        broadcast: Optional[bool] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["operation"] = operation
        super().__init__(
            f"{operation} failed: {message}",
            code="CHAIN_QUERY_FAILED",
            tx_hash=tx_hash,
            details=details,
            broadcast=broadcast,
        )
        self.operation = operation


class BuildError(TransferError):
    """Raised when a transaction cannot be assembled."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="BUILD_FAILED", details=details)


class GasEstimationError(BuildError):
    """
    Raised when the node rejects the gas estimate because the call reverts.

    Example: a token transfer larger than the sender's balance.
    """

    def __init__(self, reason: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        details = details or {}
        details["reason"] = reason
        super().__init__(f"Gas estimation reverted: {reason}", details=details)
        self.code = "GAS_ESTIMATION_REVERTED"
        self.operation = "eth_estimateGas"
        self.reason = reason


class SigningError(TransferError):
    """
    Raised when a transaction cannot be signed or its signature recovered.

    Messages never include key material.
    """

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="SIGNING_FAILED", details=details)


class BroadcastRejected(TransferError):
    """Raised when the node refuses a raw transaction (nonce too low, underpriced...)."""

    def __init__(self, reason: str, *, tx_hash: Optional[str] = None) -> None:
        super().__init__(
            f"Node rejected transaction: {reason}",
            code="BROADCAST_REJECTED",
            tx_hash=tx_hash,
            details={"reason": reason},
        )
        self.reason = reason


class TransactionReverted(TransferError):
    """Raised when a mined transaction has a failure status."""

    broadcast = True
    state = ConfirmationState.FAILED

    def __init__(self, tx_hash: str, receipt: "Receipt") -> None:
        super().__init__(
            f"Transaction {tx_hash} reverted in block {receipt.block_number}",
            code="TRANSACTION_REVERTED",
            tx_hash=tx_hash,
            details={"block_number": receipt.block_number, "gas_used": receipt.gas_used},
        )
        self.receipt = receipt


class ConfirmationTimeout(TransferError):
    """
    Raised when no receipt appeared within the polling budget.

    The transaction was broadcast; `tx_hash` lets the caller recheck it later.
    """

    broadcast = True
    state = ConfirmationState.TIMED_OUT

    def __init__(self, tx_hash: str, attempts: int, poll_interval: float) -> None:
        super().__init__(
            f"No receipt for {tx_hash} after {attempts} attempts",
            code="CONFIRMATION_TIMEOUT",
            tx_hash=tx_hash,
            details={"attempts": attempts, "poll_interval": poll_interval},
        )
        self.attempts = attempts


class CancellationRequested(TransferError):
    """Raised when a transfer stops because its cancel event was set."""

    def __init__(self, stage: str, *, tx_hash: Optional[str] = None, broadcast: bool = False) -> None:
        super().__init__(
            f"Transfer cancelled during {stage}",
            code="CANCELLED",
            tx_hash=tx_hash,
            details={"stage": stage},
            broadcast=broadcast,
        )
        self.stage = stage
