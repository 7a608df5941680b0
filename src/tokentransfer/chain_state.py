"""Chain state queries: nonce, gas price, gas estimate, receipts.

Every call goes to the node; nothing is cached, since a stale nonce
collides with the account's next transaction.
"""

from __future__ import annotations

from typing import Any, Optional

from eth_typing import HexStr
from web3 import AsyncWeb3
from web3.exceptions import TransactionNotFound

from .constants import NONCE_BLOCK_IDENTIFIER
from .errors import ChainQueryError, GasEstimationError
from .models import Receipt, UnsignedTransaction
from .rpc import is_revert, rpc_error_reason
from .utils.logging import get_logger
from .utils.validation import validate_address

_logger = get_logger(__name__)


def _as_quantity(operation: str, value: Any) -> int:
    # bool passes isinstance(int); a node never means True by a quantity
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ChainQueryError(operation, f"malformed result {value!r}")
    return value


class ChainStateReader:
    """Reads account and network state through an AsyncWeb3 client."""

    def __init__(self, w3: AsyncWeb3) -> None:
        self._w3 = w3

    async def get_nonce(self, address: str) -> int:
        """Return the next transaction count for ``address``, pending block included."""
        address = validate_address(address, "address")
        try:
            nonce = await self._w3.eth.get_transaction_count(address, NONCE_BLOCK_IDENTIFIER)
        except Exception as e:
            raise ChainQueryError("eth_getTransactionCount", rpc_error_reason(e)) from e
        return _as_quantity("eth_getTransactionCount", nonce)

    async def get_gas_price(self) -> int:
        try:
            gas_price = await self._w3.eth.gas_price
        except Exception as e:
            raise ChainQueryError("eth_gasPrice", rpc_error_reason(e)) from e
        return _as_quantity("eth_gasPrice", gas_price)

    async def estimate_gas(self, tx: UnsignedTransaction) -> int:
        """Simulate ``tx`` against current state and return its gas usage.

        Raises:
            GasEstimationError: If the call would revert
            ChainQueryError: On transport failures or malformed results
        """
        try:
            estimate = await self._w3.eth.estimate_gas(tx.to_call_params())
        except Exception as e:
            reason = rpc_error_reason(e)
            if is_revert(e):
                _logger.info(
                    "Gas estimation reverted",
                    extra={"sender": tx.sender, "recipient": tx.recipient, "reason": reason},
                )
                raise GasEstimationError(reason) from e
            raise ChainQueryError("eth_estimateGas", reason) from e
        estimate = _as_quantity("eth_estimateGas", estimate)
        if estimate == 0:
            raise ChainQueryError("eth_estimateGas", "node returned zero gas")
        return estimate

    async def get_receipt(self, tx_hash: HexStr) -> Optional[Receipt]:
        """Return the receipt, or None while the transaction is unmined.

        Raises:
            ChainQueryError: On transport failures or malformed receipts
        """
        try:
            raw = await self._w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            return None
        except Exception as e:
            raise ChainQueryError("eth_getTransactionReceipt", rpc_error_reason(e), tx_hash=tx_hash) from e
        if raw is None:
            return None
        try:
            return Receipt.from_rpc(tx_hash, raw)
        except (KeyError, TypeError, ValueError) as e:
            raise ChainQueryError(
                "eth_getTransactionReceipt", f"malformed receipt ({e})", tx_hash=tx_hash
            ) from e
