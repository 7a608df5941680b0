"""
Base exception class for tokentransfer.

Every transfer failure inherits from TransferError, which carries
structured error information: a machine-readable code, the transaction
hash once one exists, and extra context details.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class TransferError(Exception):
    """
    Base exception for all token transfer errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code (e.g., "BROADCAST_REJECTED").
        tx_hash: Transaction hash, if the transaction was signed.
        details: Dictionary with additional error context.
        broadcast: Whether the transaction may already be on the network.

    Example:
        >>> raise TransferError(
        ...     "Transfer failed",
        ...     code="TRANSFER_FAILED",
        ...     tx_hash="0x123...",
        ...     details={"nonce": 5}
        ... )
    """

    #: Failures raised before eth_sendRawTransaction is attempted are never
    #: broadcast. Subclasses raised after that point override this.
    broadcast: bool = False

    def __init__(
        self,
        message: str,
        *,
        code: str = "TRANSFER_ERROR",
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        broadcast: Optional[bool] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.tx_hash = tx_hash
        self.details = details or {}
        if broadcast is not None:
            self.broadcast = broadcast

    @property
    def retry_safe(self) -> bool:
        """
        True when resubmitting with a fresh nonce cannot double-spend.

        A transaction that may have reached the network must be rechecked
        by hash instead of being resubmitted.
        """
        return not self.broadcast

    def __str__(self) -> str:
        """Return formatted error message."""
        parts = [f"[{self.code}] {self.message}"]
        if self.tx_hash:
            parts.append(f"(tx: {self.tx_hash[:10]}...)")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"tx_hash={self.tx_hash!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary for JSON serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "tx_hash": self.tx_hash,
            "broadcast": self.broadcast,
            "details": self.details,
        }
