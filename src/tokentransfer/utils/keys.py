"""
Scoped secret key handle.

SecretKey keeps private key bytes in a mutable buffer that is zeroed on
``wipe()``, on context-manager exit and on garbage collection. The key
never appears in ``repr``/``str`` or in exception messages.

Zeroing is best-effort: ``eth_keys`` builds its own immutable copy of the
key for the duration of each signature.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Union

from eth_account import Account
from eth_typing import ChecksumAddress

from tokentransfer.errors import SigningError

PRIVATE_KEY_LENGTH = 32


class SecretKey:
    """
    Holder for a secp256k1 private key.

    Example:
        >>> with SecretKey.from_hex(os.environ["PRIVATE_KEY"]) as key:
        ...     signer = Signer(key)
    """

    __slots__ = ("_buffer", "_address", "_lock", "__weakref__")

    def __init__(self, key: Union[bytes, bytearray]) -> None:
        if not isinstance(key, (bytes, bytearray)):
            raise SigningError("Private key must be bytes (key not shown for security)")
        if len(key) != PRIVATE_KEY_LENGTH:
            raise SigningError("Invalid private key length (key not shown for security)")
        self._buffer = bytearray(key)
        self._lock = threading.Lock()
        try:
            self._address: ChecksumAddress = Account.from_key(bytes(self._buffer)).address
        except Exception:
            self.wipe()
            raise SigningError("Invalid private key format (key not shown for security)") from None

    @classmethod
    def from_hex(cls, private_key: str) -> "SecretKey":
        """Build a handle from a hex string, with or without ``0x``."""
        if not isinstance(private_key, str):
            raise SigningError("Private key must be a hex string (key not shown for security)")
        hex_key = private_key[2:] if private_key.startswith(("0x", "0X")) else private_key
        try:
            raw = bytearray.fromhex(hex_key)
        except ValueError:
            raise SigningError("Invalid private key format (key not shown for security)") from None
        try:
            return cls(raw)
        finally:
            raw[:] = b"\x00" * len(raw)

    @classmethod
    def from_keystore(cls, keystore: Union[str, Dict[str, Any]], password: str) -> "SecretKey":
        """Decrypt a V3 keystore (JSON text or parsed dict)."""
        try:
            raw = bytearray(Account.decrypt(keystore, password))
        except Exception:
            raise SigningError("Could not decrypt keystore") from None
        try:
            return cls(raw)
        finally:
            raw[:] = b"\x00" * len(raw)

    @property
    def address(self) -> ChecksumAddress:
        return self._address

    @property
    def wiped(self) -> bool:
        return not any(self._buffer)

    @contextmanager
    def unlocked(self) -> Iterator[bytes]:
        """Yield the key bytes for the duration of one signing operation."""
        with self._lock:
            if self.wiped:
                raise SigningError("Secret key has been wiped")
            yield bytes(self._buffer)

    def wipe(self) -> None:
        with self._lock:
            for i in range(len(self._buffer)):
                self._buffer[i] = 0

    def __enter__(self) -> "SecretKey":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.wipe()

    def __del__(self) -> None:
        buffer = getattr(self, "_buffer", None)
        if buffer is not None:
            buffer[:] = b"\x00" * len(buffer)

    def __repr__(self) -> str:
        return f"SecretKey(address={self._address!r}, key=<redacted>)"

    __str__ = __repr__

    def __reduce__(self) -> Any:
        raise TypeError("SecretKey cannot be pickled")
