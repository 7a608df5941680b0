"""Transaction signing and raw transaction decoding.

Signatures come from ``eth_account``, whose secp256k1 backend derives k
per RFC 6979. Signing the same transaction with the same key therefore
always yields the same bytes and hash.
"""

from __future__ import annotations

import rlp
from eth_account import Account
from eth_typing import ChecksumAddress, HexStr
from eth_utils import big_endian_to_int, keccak, to_checksum_address, to_hex

from .constants import ADDRESS_LENGTH
from .errors import SigningError
from .models import DecodedTransaction, SignedTransaction, UnsignedTransaction
from .utils.keys import SecretKey
from .utils.logging import get_logger

_logger = get_logger(__name__)

LEGACY_FIELD_COUNT = 9
EIP155_V_OFFSET = 35


class Signer:
    """Signs transactions for the account behind a SecretKey.

    Args:
        key: Handle that owns the private key. The signer never copies the
            key outside a single ``sign`` call.
    """

    def __init__(self, key: SecretKey) -> None:
        self._key = key

    @property
    def address(self) -> ChecksumAddress:
        return self._key.address

    def sign(self, unsigned: UnsignedTransaction) -> SignedTransaction:
        """Sign ``unsigned`` and check the signature recovers to the sender.

        Raises:
            SigningError: If the sender is not this key's account, the
                library cannot sign, or the signature does not recover
        """
        if unsigned.sender != self.address:
            raise SigningError(
                "transaction sender does not match signing key",
                details={"sender": unsigned.sender, "signer": self.address},
            )
        if unsigned.gas_limit <= 0:
            raise SigningError("refusing to sign a draft without a gas limit")

        try:
            with self._key.unlocked() as private_key:
                signed = Account.sign_transaction(unsigned.to_tx_params(), private_key)
        except SigningError:
            raise
        except Exception as e:
            raise SigningError(f"could not sign transaction ({type(e).__name__})") from None

        raw = bytes(signed.raw_transaction)
        tx_hash = HexStr(to_hex(keccak(raw)))

        try:
            recovered = Account.recover_transaction(raw)
        except Exception:
            raise SigningError("signature is not recoverable", details={"tx_hash": tx_hash}) from None
        if recovered != self.address:
            raise SigningError(
                "signature recovers to a different address",
                details={"tx_hash": tx_hash, "recovered": recovered},
            )

        _logger.debug(
            "Signed transaction",
            extra={"tx_hash": tx_hash, "nonce": unsigned.nonce, "sender": unsigned.sender},
        )
        return SignedTransaction(
            unsigned=unsigned,
            v=signed.v,
            r=signed.r,
            s=signed.s,
            raw_transaction=raw,
            tx_hash=tx_hash,
        )


def decode_raw_transaction(raw: bytes) -> DecodedTransaction:
    """Decode a signed legacy EIP-155 transaction and recover its sender.

    Raises:
        SigningError: If ``raw`` is not a well-formed, recoverable legacy transaction
    """
    try:
        fields = rlp.decode(bytes(raw))
    except Exception:
        raise SigningError("raw transaction is not valid RLP") from None
    if not isinstance(fields, list) or len(fields) != LEGACY_FIELD_COUNT:
        raise SigningError("raw transaction is not a legacy transaction")
    if not all(isinstance(field, bytes) for field in fields):
        raise SigningError("raw transaction has a nested list in a scalar field")

    nonce, gas_price, gas_limit, to, value, data, v, r, s = fields
    if len(to) != ADDRESS_LENGTH:
        raise SigningError(f"raw transaction has no {ADDRESS_LENGTH}-byte recipient")
    v_int = big_endian_to_int(v)
    if v_int < EIP155_V_OFFSET:
        raise SigningError("raw transaction is not EIP-155 replay protected")

    try:
        sender = Account.recover_transaction(bytes(raw))
    except Exception:
        raise SigningError("signature is not recoverable") from None

    return DecodedTransaction(
        transaction=UnsignedTransaction(
            sender=sender,
            recipient=to_checksum_address(to),
            nonce=big_endian_to_int(nonce),
            gas_price=big_endian_to_int(gas_price),
            gas_limit=big_endian_to_int(gas_limit),
            payload=bytes(data),
            value=big_endian_to_int(value),
            chain_id=(v_int - EIP155_V_OFFSET) // 2,
        ),
        v=v_int,
        r=big_endian_to_int(r),
        s=big_endian_to_int(s),
        tx_hash=HexStr(to_hex(keccak(bytes(raw)))),
    )
