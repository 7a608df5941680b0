"""
Receipt polling for broadcast transactions.

A watch starts PENDING and ends in one of three terminal states:

- CONFIRMED: a receipt with success status was found (returned)
- FAILED: a receipt with failure status was found (TransactionReverted)
- TIMED_OUT: no receipt within the attempt budget (ConfirmationTimeout)

Receipt lookup errors do not end the watch. A failed lookup counts as
"not found" for that attempt, and only exhausting the budget is reported.
The wait between attempts is a cancellable asyncio wait, so other
transfers on the loop keep running.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from eth_typing import HexStr

from .chain_state import ChainStateReader
from .constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_POLL_INTERVAL_SECONDS
from .errors import (
    CancellationRequested,
    ChainQueryError,
    ConfirmationTimeout,
    TransactionReverted,
)
from .models import ConfirmationState, Receipt
from .utils.logging import get_logger
from .utils.validation import validate_tx_hash

_logger = get_logger(__name__)


class ConfirmationWatcher:
    """Polls ``eth_getTransactionReceipt`` until a terminal state."""

    def __init__(self, reader: ChainStateReader) -> None:
        self._reader = reader

    async def await_confirmation(
        self,
        tx_hash: str,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Receipt:
        """
        Wait for ``tx_hash`` to be mined.

        Makes at most ``max_attempts`` receipt queries, sleeping
        ``poll_interval`` seconds between them (not after the last one).

        Args:
            tx_hash: Hash returned by the broadcaster
            max_attempts: Receipt queries before giving up
            poll_interval: Seconds between queries
            cancel_event: When set, polling stops at the next poll boundary

        Returns:
            The success receipt

        Raises:
            TransactionReverted: If the receipt has failure status
            ConfirmationTimeout: If no receipt was found in time
            CancellationRequested: If ``cancel_event`` was set
        """
        tx_hash = validate_tx_hash(tx_hash)
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if poll_interval < 0:
            raise ValueError("poll_interval cannot be negative")

        for attempt in range(1, max_attempts + 1):
            if cancel_event is not None and cancel_event.is_set():
                raise CancellationRequested("confirmation", tx_hash=tx_hash, broadcast=True)

            receipt = await self._query(tx_hash, attempt)
            if receipt is not None:
                if receipt.state is ConfirmationState.CONFIRMED:
                    _logger.info(
                        "Transaction confirmed",
                        extra={"tx_hash": tx_hash, "attempt": attempt, "block_number": receipt.block_number},
                    )
                    return receipt
                _logger.warning(
                    "Transaction reverted",
                    extra={"tx_hash": tx_hash, "attempt": attempt, "block_number": receipt.block_number},
                )
                raise TransactionReverted(tx_hash, receipt)

            if attempt < max_attempts and await self._wait(poll_interval, cancel_event):
                _logger.info("Confirmation polling cancelled", extra={"tx_hash": tx_hash, "attempt": attempt})
                raise CancellationRequested("confirmation", tx_hash=tx_hash, broadcast=True)

        _logger.warning(
            "Confirmation timed out",
            extra={"tx_hash": tx_hash, "attempts": max_attempts},
        )
        raise ConfirmationTimeout(tx_hash, max_attempts, poll_interval)

    async def check(self, tx_hash: str) -> ConfirmationState:
        """
        Look up ``tx_hash`` once without raising on a missing receipt.

        Meant for rechecking a transaction after ConfirmationTimeout.
        Returns PENDING when the receipt is absent.

        Raises:
            ChainQueryError: If the lookup itself fails
        """
        receipt = await self._reader.get_receipt(validate_tx_hash(tx_hash))
        if receipt is None:
            return ConfirmationState.PENDING
        return receipt.state

    async def _query(self, tx_hash: HexStr, attempt: int) -> Optional[Receipt]:
        try:
            receipt = await self._reader.get_receipt(tx_hash)
        except ChainQueryError as e:
            _logger.warning(
                "Receipt lookup failed, retrying",
                extra={"tx_hash": tx_hash, "attempt": attempt, "error": e.message},
            )
            return None
        if receipt is None:
            _logger.debug("Receipt not found", extra={"tx_hash": tx_hash, "attempt": attempt})
        return receipt

    @staticmethod
    async def _wait(poll_interval: float, cancel_event: Optional[asyncio.Event]) -> bool:
        """Sleep for ``poll_interval``; return True if cancelled meanwhile."""
        if cancel_event is None:
            await asyncio.sleep(poll_interval)
            return False
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=poll_interval)
            return True
        except asyncio.TimeoutError:
            return False
