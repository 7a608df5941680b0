"""ERC-20 call data encoding.

Only the ``transfer(address,uint256)`` call is needed; the encoding itself
is delegated to ``eth_abi``.
"""

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from .constants import ABI_SELECTOR_LENGTH, ERC20_TRANSFER_SIGNATURE

TRANSFER_SELECTOR: bytes = function_signature_to_4byte_selector(ERC20_TRANSFER_SIGNATURE)


def encode_transfer_call(recipient: str, amount: int) -> bytes:
    """Return selector + ABI-encoded (recipient, amount).

    Args:
        recipient: Checksummed counterparty address
        amount: Token amount in base units

    Returns:
        68 bytes of call data
    """
    return TRANSFER_SELECTOR + encode(["address", "uint256"], [recipient, amount])


def decode_transfer_call(data: bytes) -> tuple:
    """Inverse of :func:`encode_transfer_call`; returns (recipient, amount).

    Raises:
        ValueError: If data is not a transfer call
    """
    if data[:ABI_SELECTOR_LENGTH] != TRANSFER_SELECTOR:
        raise ValueError("call data is not an ERC-20 transfer")
    recipient, amount = decode(["address", "uint256"], data[ABI_SELECTOR_LENGTH:])
    return to_checksum_address(recipient), amount
