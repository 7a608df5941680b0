"""
tokentransfer utilities.

This module provides validation, secret key handling and logging helpers.
"""

from tokentransfer.utils.keys import SecretKey
from tokentransfer.utils.logging import configure_logging, get_logger, set_level
from tokentransfer.utils.validation import (
    is_valid_address,
    validate_address,
    validate_amount,
    validate_tx_hash,
)

__all__ = [
    # Validation
    "validate_address",
    "is_valid_address",
    "validate_amount",
    "validate_tx_hash",
    # Keys
    "SecretKey",
    # Logging
    "get_logger",
    "configure_logging",
    "set_level",
]
