"""
Exception hierarchy for tokentransfer.

All errors derive from TransferError. `retry_safe` tells callers whether
the transaction could already be on the network.
"""

from tokentransfer.errors.base import TransferError
from tokentransfer.errors.transfer import (
    BroadcastRejected,
    BuildError,
    CancellationRequested,
    ChainQueryError,
    ConfirmationTimeout,
    GasEstimationError,
    InvalidAddress,
    InvalidAmount,
    SigningError,
    TransactionReverted,
)

__all__ = [
    "TransferError",
    "InvalidAddress",
    "InvalidAmount",
    "ChainQueryError",
    "BuildError",
    "GasEstimationError",
    "SigningError",
    "BroadcastRejected",
    "TransactionReverted",
    "ConfirmationTimeout",
    "CancellationRequested",
]
