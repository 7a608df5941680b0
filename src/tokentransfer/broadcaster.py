"""Raw transaction submission."""

from __future__ import annotations

from eth_typing import HexStr
from eth_utils import to_hex
from web3 import AsyncWeb3

from .constants import ALREADY_KNOWN_MESSAGES
from .errors import BroadcastRejected, ChainQueryError
from .models import SignedTransaction
from .rpc import is_node_rejection, rpc_error_reason
from .utils.logging import get_logger

_logger = get_logger(__name__)


class Broadcaster:
    """Sends signed transactions with ``eth_sendRawTransaction``.

    Resubmitting byte-identical raw bytes is safe: a node that already
    holds the transaction answers "already known", which is treated as
    success and yields the same hash.
    """

    def __init__(self, w3: AsyncWeb3) -> None:
        self._w3 = w3

    async def submit(self, signed: SignedTransaction) -> HexStr:
        """Broadcast ``signed`` and return its hash.

        Raises:
            BroadcastRejected: If the node refuses the transaction
            ChainQueryError: If the request failed in transit. The node may
                still have received it, so the error is flagged as broadcast.
        """
        tx_hash = signed.tx_hash
        try:
            node_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as e:
            reason = rpc_error_reason(e)
            if is_node_rejection(e):
                if any(fragment in reason.lower() for fragment in ALREADY_KNOWN_MESSAGES):
                    _logger.info("Transaction already known to node", extra={"tx_hash": tx_hash})
                    return tx_hash
                _logger.warning(
                    "Broadcast rejected",
                    extra={"tx_hash": tx_hash, "nonce": signed.unsigned.nonce, "reason": reason},
                )
                raise BroadcastRejected(reason, tx_hash=tx_hash) from e
            raise ChainQueryError(
                "eth_sendRawTransaction", reason, tx_hash=tx_hash, broadcast=True
            ) from e

        if node_hash is not None:
            node_hex = node_hash if isinstance(node_hash, str) else to_hex(node_hash)
            if node_hex.lower() != tx_hash.lower():
                _logger.warning(
                    "Node returned unexpected transaction hash",
                    extra={"tx_hash": tx_hash, "node_hash": node_hex},
                )
        _logger.info(
            "Transaction broadcast",
            extra={"tx_hash": tx_hash, "nonce": signed.unsigned.nonce},
        )
        return tx_hash
