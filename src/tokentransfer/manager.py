"""Token transfer orchestration.

This module provides the TransactionManager class, which submits a token
transfer through a JSON-RPC node and waits for it to be mined.

Each transfer runs strictly in sequence:

1. validate recipient and amount (no RPC yet)
2. read nonce and gas price
3. build a draft and estimate its gas
4. finalize the gas limit and sign locally
5. broadcast the raw transaction
6. poll for the receipt

Nonces are read fresh from the node for every transfer. Two concurrent
transfers from the same account race for the same nonce; callers must
serialize them.

Example:
    >>> from tokentransfer import Network, TransactionManager, TransferSettings
    >>> settings = TransferSettings.for_network(Network.MAINNET, sender="0x...")
    >>> async with TransactionManager.create(settings, private_key="0x...") as manager:
    ...     tx_hash = await manager.transfer("0x...", 1_000 * 10**6)  # 1000 USDT
"""

from __future__ import annotations

import asyncio
from typing import Optional

from eth_typing import HexStr
from web3 import AsyncWeb3

from .broadcaster import Broadcaster
from .builder import TransactionBuilder
from .chain_state import ChainStateReader
from .config import TransferSettings
from .errors import CancellationRequested, SigningError, TransferError
from .models import ConfirmationState, OutcomeStatus, Receipt, SignedTransaction, TransferOutcome
from .rpc import create_web3
from .signer import Signer
from .utils.keys import SecretKey
from .utils.logging import get_logger
from .watcher import ConfirmationWatcher

_logger = get_logger(__name__)


class TransactionManager:
    """Submits transfers for one account on one network.

    Args:
        settings: Network endpoint, sender, token and polling configuration
        key: Handle for the sender's private key
        web3: Existing AsyncWeb3 client (created from ``settings.rpc_url`` if omitted)

    Raises:
        SigningError: If ``key`` does not control ``settings.sender``
    """

    def __init__(
        self,
        settings: TransferSettings,
        key: SecretKey,
        web3: Optional[AsyncWeb3] = None,
    ) -> None:
        if key.address != settings.sender:
            raise SigningError(
                "signing key does not control the configured sender",
                details={"sender": settings.sender},
            )
        self.settings = settings
        self._key = key
        self.w3 = web3 or create_web3(settings.rpc_url, settings.request_timeout)
        self.reader = ChainStateReader(self.w3)
        self.builder = TransactionBuilder(settings.chain_id, settings.token_address)
        self.signer = Signer(key)
        self.broadcaster = Broadcaster(self.w3)
        self.watcher = ConfirmationWatcher(self.reader)

    @classmethod
    def create(
        cls,
        settings: TransferSettings,
        private_key: str,
        web3: Optional[AsyncWeb3] = None,
    ) -> "TransactionManager":
        """Build a manager from a hex private key."""
        return cls(settings, SecretKey.from_hex(private_key), web3=web3)

    @property
    def address(self) -> str:
        return self.signer.address

    async def transfer(
        self,
        to: str,
        amount: int,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> HexStr:
        """Transfer ``amount`` to ``to`` and wait for confirmation.

        Args:
            to: Counterparty address
            amount: Token base units (wei for native transfers)
            cancel_event: Set it to stop the transfer. Before broadcast the
                transfer aborts between steps; afterwards polling stops at
                the next poll boundary. A broadcast cannot be undone.

        Returns:
            Hash of the confirmed transaction

        Raises:
            InvalidAddress, InvalidAmount: Before any RPC call
            ChainQueryError: If a node query fails
            BuildError: If assembly fails; GasEstimationError if the call reverts
            SigningError: If signing fails
            BroadcastRejected: If the node refuses the transaction
            TransactionReverted: If the mined transaction failed
            ConfirmationTimeout: If no receipt appeared in time (carries tx_hash)
            CancellationRequested: If ``cancel_event`` was set
        """
        signed = await self._prepare(to, amount, cancel_event)
        await self._submit_and_wait(signed, cancel_event)
        return signed.tx_hash

    async def try_transfer(
        self,
        to: str,
        amount: int,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> TransferOutcome:
        """Run ``transfer`` and capture its result as a TransferOutcome.

        NOT_BROADCAST outcomes are safe to retry with a fresh nonce.
        UNCONFIRMED outcomes were (or may have been) broadcast; recheck
        ``outcome.tx_hash`` before sending again.
        """
        signed: Optional[SignedTransaction] = None
        try:
            signed = await self._prepare(to, amount, cancel_event)
            receipt = await self._submit_and_wait(signed, cancel_event)
        except TransferError as e:
            tx_hash = e.tx_hash or (signed.tx_hash if signed is not None else None)
            return TransferOutcome(
                status=OutcomeStatus.UNCONFIRMED if e.broadcast else OutcomeStatus.NOT_BROADCAST,
                tx_hash=HexStr(tx_hash) if tx_hash else None,
                receipt=getattr(e, "receipt", None),
                error=e,
            )
        return TransferOutcome(status=OutcomeStatus.CONFIRMED, tx_hash=signed.tx_hash, receipt=receipt)

    async def recheck(self, tx_hash: str) -> ConfirmationState:
        """Look up a previously broadcast transaction once."""
        return await self.watcher.check(tx_hash)

    async def _prepare(
        self,
        to: str,
        amount: int,
        cancel_event: Optional[asyncio.Event],
    ) -> SignedTransaction:
        recipient = self.builder.validate_transfer(to, amount)
        sender = self.settings.sender

        _check_cancelled(cancel_event, "chain state")
        nonce = await self.reader.get_nonce(sender)
        gas_price = await self.reader.get_gas_price()

        draft = self.builder.build(sender, recipient, amount, nonce, gas_price)
        _check_cancelled(cancel_event, "gas estimation")
        estimate = await self.reader.estimate_gas(draft)
        tx = self.builder.finalize(draft, self.builder.apply_gas_buffer(estimate, self.settings.gas_buffer))

        _check_cancelled(cancel_event, "signing")
        signed = self.signer.sign(tx)
        _logger.info(
            "Prepared transfer",
            extra={
                "tx_hash": signed.tx_hash,
                "recipient": recipient,
                "amount": amount,
                "nonce": nonce,
                "gas_price": gas_price,
                "gas_limit": tx.gas_limit,
            },
        )
        return signed

    async def _submit_and_wait(
        self,
        signed: SignedTransaction,
        cancel_event: Optional[asyncio.Event],
    ) -> Receipt:
        _check_cancelled(cancel_event, "broadcast", tx_hash=signed.tx_hash)
        tx_hash = await self.broadcaster.submit(signed)
        return await self.watcher.await_confirmation(
            tx_hash,
            max_attempts=self.settings.max_attempts,
            poll_interval=self.settings.poll_interval,
            cancel_event=cancel_event,
        )

    def close(self) -> None:
        """Wipe the signing key. The manager cannot sign afterwards."""
        self._key.wipe()

    async def __aenter__(self) -> "TransactionManager":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()


def _check_cancelled(
    cancel_event: Optional[asyncio.Event],
    stage: str,
    tx_hash: Optional[str] = None,
) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise CancellationRequested(stage, tx_hash=tx_hash, broadcast=False)
