"""
Base exception class for the multicall SDK.

All multicall-specific exceptions inherit from MulticallError, which
provides structured error information including error codes, the batch
key the error is attributed to, and additional context details.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Optional


class MulticallError(Exception):
    """
    Base exception for all multicall errors.

    Provides structured error information that can be serialized and logged.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code (e.g., "UNKNOWN_METHOD").
        key: Batch key of the call that triggered the error, if any.
        details: Optional dictionary with additional error context.

    Example:
        >>> raise MulticallError(
        ...     "Aggregator call failed",
        ...     code="TRANSPORT_ERROR",
        ...     details={"chunk": 2}
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "MULTICALL_ERROR",
        key: Optional[Hashable] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize MulticallError.

        Args:
            message: Human-readable error description.
            code: Machine-readable error code.
            key: Batch key of the call that triggered the error.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.key = key
        self.details = details or {}

    def attribute_to(self, key: Hashable) -> "MulticallError":
        """Attach the batch key this error originated from and return self."""
        self.key = key
        self.details["key"] = key
        return self

    def __str__(self) -> str:
        """Return formatted error message."""
        parts = [f"[{self.code}] {self.message}"]
        if self.key is not None:
            parts.append(f"(key: {self.key!r})")
        return " ".join(parts)

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"key={self.key!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary for JSON serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "key": self.key,
            "details": self.details,
        }
