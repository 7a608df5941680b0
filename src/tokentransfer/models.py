"""Data types for the token transfer pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

import rlp
from eth_typing import ChecksumAddress, HexStr
from eth_utils import keccak, to_canonical_address, to_hex

if TYPE_CHECKING:
    from tokentransfer.errors import TransferError

__all__ = [
    "ConfirmationState",
    "ReceiptStatus",
    "OutcomeStatus",
    "UnsignedTransaction",
    "SignedTransaction",
    "DecodedTransaction",
    "Receipt",
    "TransferOutcome",
]


class ConfirmationState(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class ReceiptStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class OutcomeStatus(str, Enum):
    CONFIRMED = "confirmed"
    NOT_BROADCAST = "not_broadcast"
    UNCONFIRMED = "unconfirmed"


@dataclass(frozen=True)
class UnsignedTransaction:
    """Legacy (EIP-155) transaction envelope before signing.

    Attributes:
        sender: Account that signs and pays gas
        recipient: Token contract for token transfers, counterparty for native transfers
        nonce: Sender's next transaction count
        gas_price: Gas price in wei
        gas_limit: Gas limit (0 while the transaction is a draft awaiting estimation)
        payload: ABI-encoded call data (empty for native transfers)
        value: Native value in wei (0 for token transfers)
        chain_id: EIP-155 chain id
    """
    sender: ChecksumAddress
    recipient: ChecksumAddress
    nonce: int
    gas_price: int
    gas_limit: int
    payload: bytes
    value: int
    chain_id: int

    @property
    def is_contract_call(self) -> bool:
        return bool(self.payload)

    def encode(self) -> bytes:
        """Return the RLP signing preimage: fields followed by chainId, 0, 0."""
        return rlp.encode([
            self.nonce,
            self.gas_price,
            self.gas_limit,
            to_canonical_address(self.recipient),
            self.value,
            self.payload,
            self.chain_id,
            0,
            0,
        ])

    def signing_hash(self) -> bytes:
        return keccak(self.encode())

    def to_tx_params(self) -> Dict[str, Any]:
        """Dict form accepted by ``eth_account.Account.sign_transaction``."""
        return {
            "nonce": self.nonce,
            "gasPrice": self.gas_price,
            "gas": self.gas_limit,
            "to": self.recipient,
            "value": self.value,
            "data": to_hex(self.payload),
            "chainId": self.chain_id,
        }

    def to_call_params(self) -> Dict[str, Any]:
        """Params for ``eth_estimateGas``; gas fields are left to the node."""
        return {
            "from": self.sender,
            "to": self.recipient,
            "value": self.value,
            "data": to_hex(self.payload),
        }


@dataclass(frozen=True)
class SignedTransaction:
    unsigned: UnsignedTransaction
    v: int
    r: int
    s: int
    raw_transaction: bytes = field(repr=False)
    tx_hash: HexStr

    def compute_hash(self) -> HexStr:
        return HexStr(to_hex(keccak(self.raw_transaction)))


@dataclass(frozen=True)
class DecodedTransaction:
    """Fields recovered from raw signed bytes."""
    transaction: UnsignedTransaction
    v: int
    r: int
    s: int
    tx_hash: HexStr


@dataclass(frozen=True)
class Receipt:
    tx_hash: HexStr
    status: ReceiptStatus
    block_number: int
    block_hash: Optional[HexStr] = None
    gas_used: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.status is ReceiptStatus.SUCCESS

    @property
    def state(self) -> ConfirmationState:
        return ConfirmationState.CONFIRMED if self.succeeded else ConfirmationState.FAILED

    @classmethod
    def from_rpc(cls, tx_hash: str, raw: Mapping[str, Any]) -> "Receipt":
        """Map an ``eth_getTransactionReceipt`` result.

        Raises:
            KeyError, TypeError, ValueError: If the result is malformed
        """
        status = raw["status"]
        if status not in (0, 1):
            raise ValueError(f"unexpected receipt status {status!r}")
        block_hash = raw.get("blockHash")
        return cls(
            tx_hash=HexStr(tx_hash),
            status=ReceiptStatus.SUCCESS if status == 1 else ReceiptStatus.FAILURE,
            block_number=int(raw["blockNumber"]),
            block_hash=HexStr(to_hex(block_hash)) if block_hash is not None else None,
            gas_used=raw.get("gasUsed"),
        )


@dataclass
class TransferOutcome:
    """Tagged result of ``TransactionManager.try_transfer``.

    Attributes:
        status: CONFIRMED, NOT_BROADCAST (safe to retry with a fresh nonce)
            or UNCONFIRMED (broadcast; recheck ``tx_hash`` before resubmitting)
        tx_hash: Hash of the signed transaction, when signing got that far
        receipt: Receipt for confirmed (or reverted) transactions
        error: The typed error for non-confirmed outcomes
    """
    status: OutcomeStatus
    tx_hash: Optional[HexStr] = None
    receipt: Optional[Receipt] = None
    error: Optional["TransferError"] = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.CONFIRMED

    @property
    def retry_safe(self) -> bool:
        return self.status is OutcomeStatus.NOT_BROADCAST
