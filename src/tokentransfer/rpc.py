"""JSON-RPC transport helpers.

Builds the ``AsyncWeb3`` client and turns node errors into readable
reasons. web3 surfaces node-side rejections as ``Web3RPCError`` (or a
``ValueError`` carrying the JSON-RPC error dict); everything else is a
transport failure.
"""

from typing import Any, Optional

from eth_abi import decode
from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError, Web3RPCError

from .constants import PROVIDER_TIMEOUT_SECONDS, REVERT_MESSAGES

REVERT_SELECTOR = bytes.fromhex("08c379a0")  # Error(string)

__all__ = ["create_web3", "rpc_error_reason", "is_node_rejection", "is_revert", "decode_revert_reason"]


def create_web3(rpc_url: str, timeout: int = PROVIDER_TIMEOUT_SECONDS) -> AsyncWeb3:
    """Create an AsyncWeb3 client with a request timeout."""
    return AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))


def decode_revert_reason(data: Any) -> Optional[str]:
    """Decode ``Error(string)`` revert data, if that is what it is."""
    if isinstance(data, str):
        try:
            data = bytes.fromhex(data[2:] if data.startswith("0x") else data)
        except ValueError:
            return None
    if not isinstance(data, (bytes, bytearray)) or data[:4] != REVERT_SELECTOR:
        return None
    try:
        (reason,) = decode(["string"], bytes(data[4:]))
    except Exception:
        return None
    return reason


def is_node_rejection(exc: BaseException) -> bool:
    """True when the node answered with a JSON-RPC error object."""
    if isinstance(exc, Web3RPCError):
        return True
    return isinstance(exc, ValueError) and bool(exc.args) and isinstance(exc.args[0], dict)


def is_revert(exc: BaseException) -> bool:
    if isinstance(exc, ContractLogicError):
        return True
    if not is_node_rejection(exc):
        return False
    reason = (rpc_error_reason(exc) or "").lower()
    return any(fragment in reason for fragment in REVERT_MESSAGES)


def rpc_error_reason(exc: BaseException) -> str:
    """Extract the node's message from a web3 exception."""
    payload = None
    if isinstance(exc, Web3RPCError):
        payload = (getattr(exc, "rpc_response", None) or {}).get("error")
    elif exc.args and isinstance(exc.args[0], dict):
        payload = exc.args[0]

    reason: Optional[str] = None
    if isinstance(payload, dict):
        reason = payload.get("message") or payload.get("reason")
        decoded = decode_revert_reason(payload.get("data"))
        if decoded:
            reason = f"{reason}: {decoded}" if reason else decoded
    if not reason:
        reason = getattr(exc, "message", None) or str(exc)
    return str(reason)
