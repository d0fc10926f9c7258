"""
Validation utilities for the multicall SDK.

Provides input validation and normalization for:
- Contract addresses
- Byte-like call arguments (the overload shape check)
- Revert payloads returned by failing calls
"""

from __future__ import annotations

import re
from typing import Any, Optional, Union

from eth_abi import decode
from eth_abi.exceptions import DecodingError as AbiDecodingError
from eth_utils import is_address, to_checksum_address

from evm_multicall.constants import (
    ABI_SELECTOR_LENGTH,
    ERROR_STRING_SELECTOR,
    PANIC_SELECTOR,
)
from evm_multicall.errors import ConfigurationError

HEX_PATTERN = re.compile(r"^0x([0-9a-fA-F]{2})*$")

# Solidity Panic(uint256) codes
PANIC_REASONS = {
    0x01: "assertion failed",
    0x11: "arithmetic overflow or underflow",
    0x12: "division or modulo by zero",
    0x21: "invalid enum value",
    0x22: "invalid storage byte array encoding",
    0x31: "pop on empty array",
    0x32: "array index out of bounds",
    0x41: "out of memory",
    0x51: "call to zero-initialized function",
}


def validate_address(address: Any, field_name: str = "address") -> str:
    """
    Validate a contract address.

    Args:
        address: Address to validate
        field_name: Field name for error messages

    Returns:
        EIP-55 checksummed address

    Raises:
        ConfigurationError: If address is missing or malformed
    """
    if not address:
        raise ConfigurationError(f"{field_name} is required", field=field_name)

    if not isinstance(address, str) or not is_address(address):
        raise ConfigurationError(
            f"{field_name} must be a valid Ethereum address, got {address!r}",
            field=field_name,
        )

    return to_checksum_address(address)


def is_byte_like(value: Any) -> bool:
    """
    Shape check used to choose between overloads.

    Byte-like means ``bytes``, ``bytearray``, ``memoryview`` or an
    even-length ``0x``-prefixed hex string. Nothing else qualifies.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return True
    return isinstance(value, str) and bool(HEX_PATTERN.match(value))


def to_bytes(value: Union[str, bytes, bytearray, memoryview]) -> bytes:
    """Convert a byte-like value to ``bytes``."""
    if isinstance(value, str):
        if not HEX_PATTERN.match(value):
            raise ValueError(f"not a 0x-prefixed hex string: {value!r}")
        return bytes.fromhex(value[2:])
    return bytes(value)


def decode_revert_reason(data: Optional[Union[str, bytes]]) -> Optional[str]:
    """Decode a Solidity revert payload.

    Handles ``Error(string)`` and ``Panic(uint256)``; anything else
    (custom errors, empty data) yields None.

    Args:
        data: Raw revert data as bytes or 0x-hex string

    Returns:
        Decoded revert reason string, or None if decoding fails
    """
    if not data:
        return None
    try:
        raw = to_bytes(data)
    except ValueError:
        return None
    if len(raw) < ABI_SELECTOR_LENGTH:
        return None

    selector = "0x" + raw[:ABI_SELECTOR_LENGTH].hex()
    payload = raw[ABI_SELECTOR_LENGTH:]
    try:
        if selector == ERROR_STRING_SELECTOR:
            (reason,) = decode(["string"], payload)
            return reason
        if selector == PANIC_SELECTOR:
            (code,) = decode(["uint256"], payload)
            return f"panic: {PANIC_REASONS.get(code, hex(code))}"
    except (AbiDecodingError, UnicodeDecodeError):
        return None
    return None
