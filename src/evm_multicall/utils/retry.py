"""
Backoff for transient transport failures.

The aggregation engine never retries. A network adapter given a
RetryConfig wraps each ``eth_call`` in ``retry_async``; a contract revert
is an answer, not a failure, and is raised on the first attempt.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from evm_multicall.errors import ConfigurationError, TransportError
from evm_multicall.utils.logging import get_logger

T = TypeVar("T")

_logger = get_logger(__name__)


@dataclass
class RetryConfig:
    """
    How often and how patiently a failed dispatch is sent again.

    Example:
        ```python
        adapter = Web3NetworkAdapter(
            w3, chain_id=1, retry=RetryConfig(max_attempts=5, base_delay_ms=250)
        )
        ```
    """

    max_attempts: int = 3
    """Attempts including the first one."""

    base_delay_ms: int = 500
    """Delay before the first retry."""

    max_delay_ms: int = 10000
    """Upper bound for any single delay."""

    jitter: bool = True
    """Draw each delay uniformly from [0, computed delay]."""

    exponential_base: float = 2.0

    retryable_errors: Tuple[Type[Exception], ...] = field(
        default_factory=lambda: (TransportError,)
    )

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1", field="max_attempts")
        if self.base_delay_ms < 0 or self.max_delay_ms < 0:
            raise ConfigurationError("retry delays must not be negative", field="retry")

    def should_retry(self, error: BaseException, attempt: int) -> bool:
        """Whether ``error`` raised by zero-based ``attempt`` earns another try."""
        return isinstance(error, self.retryable_errors) and attempt < self.max_attempts - 1


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """Seconds to wait before retry number ``attempt`` (zero-based)."""
    delay_ms = min(
        config.base_delay_ms * config.exponential_base ** attempt,
        config.max_delay_ms,
    )
    if config.jitter:
        delay_ms = random.uniform(0, delay_ms)
    return delay_ms / 1000


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    config: Optional[RetryConfig] = None,
    *,
    operation: str = "dispatch",
) -> T:
    """
    Await ``fn()`` until it succeeds or ``config`` gives up.

    Args:
        fn: Zero-argument coroutine factory, called once per attempt
        config: Retry policy (defaults if None)
        operation: Label for the retry log records

    Raises:
        The last error, once it is not retryable or attempts run out
    """
    config = config or RetryConfig()
    attempt = 0
    while True:
        try:
            return await fn()
        except config.retryable_errors as e:
            if not config.should_retry(e, attempt):
                raise
            delay = calculate_delay(attempt, config)
            _logger.warning(
                "Retrying after transient failure",
                extra={
                    "operation": operation,
                    "attempt": attempt + 1,
                    "max_attempts": config.max_attempts,
                    "delay_s": round(delay, 3),
                    "error": str(e),
                },
            )
            await asyncio.sleep(delay)
            attempt += 1
