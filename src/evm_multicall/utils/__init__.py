"""
Multicall SDK Utilities.

This module provides utility functions and classes for the SDK.
"""

from evm_multicall.utils.logging import (
    configure_logging,
    disable_logging,
    enable_debug,
    get_logger,
    set_level,
)
from evm_multicall.utils.retry import RetryConfig, calculate_delay, retry_async
from evm_multicall.utils.validation import (
    decode_revert_reason,
    is_byte_like,
    to_bytes,
    validate_address,
)

__all__ = [
    # Structured logging
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
    "enable_debug",
    # Retry
    "RetryConfig",
    "calculate_delay",
    "retry_async",
    # Validation
    "validate_address",
    "is_byte_like",
    "to_bytes",
    "decode_revert_reason",
]
