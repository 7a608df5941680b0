"""
tokentransfer - ERC-20 transfer lifecycle over JSON-RPC.

Builds, signs, broadcasts and confirms token transfers on EVM chains.

Modules:
- `manager`: TransactionManager, the `transfer(to, amount)` entry point
- `chain_state`: nonce, gas price, gas estimate and receipt queries
- `builder`: unsigned transaction assembly
- `signer`: deterministic signing and raw transaction decoding
- `broadcaster`: raw transaction submission
- `watcher`: bounded receipt polling
- `errors`: exception hierarchy
- `utils`: validation, secret key handle and logging helpers
"""

from .models import (
    ConfirmationState,
    DecodedTransaction,
    OutcomeStatus,
    Receipt,
    ReceiptStatus,
    SignedTransaction,
    TransferOutcome,
    UnsignedTransaction,
)
from .errors import (
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
    TransferError,
)
from .config import NETWORKS, Network, NetworkConfig, TransferSettings, get_network_config
from .broadcaster import Broadcaster
from .builder import TransactionBuilder
from .chain_state import ChainStateReader
from .manager import TransactionManager
from .signer import Signer, decode_raw_transaction
from .utils.keys import SecretKey
from .watcher import ConfirmationWatcher

__version__ = "0.1.0"

__all__ = [
    # Manager
    "TransactionManager",
    # Components
    "ChainStateReader",
    "TransactionBuilder",
    "Signer",
    "Broadcaster",
    "ConfirmationWatcher",
    "decode_raw_transaction",
    "SecretKey",
    # Config
    "Network",
    "NetworkConfig",
    "NETWORKS",
    "TransferSettings",
    "get_network_config",
    # Models
    "UnsignedTransaction",
    "SignedTransaction",
    "DecodedTransaction",
    "Receipt",
    "ReceiptStatus",
    "ConfirmationState",
    "OutcomeStatus",
    "TransferOutcome",
    # Errors
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
