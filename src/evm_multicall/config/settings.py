"""
Configuration models for the multicall SDK.

ExecuteOptions travels with every batch; MulticallSettings configures a
MulticallProvider and can be loaded from the environment (``.env`` files
are honoured through python-dotenv).
"""

from __future__ import annotations

import os
from typing import Any, Mapping, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from evm_multicall.constants import (
    DEFAULT_BLOCK_TAG,
    DEFAULT_MAX_BATCH_SIZE,
    DEFAULT_MAX_CONCURRENCY,
    PROVIDER_TIMEOUT_SECONDS,
)
from evm_multicall.errors import ConfigurationError

BlockTag = Union[int, str]

ENV_PREFIX = "MULTICALL_"


# ============================================================================
# Per-batch options
# ============================================================================

class ExecuteOptions(BaseModel):
    """
    Options accepted by ``AggregationEngine.execute``.

    Example:
        ```python
        options = ExecuteOptions(require_success=False, block_tag=19_000_000)
        ```
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    require_success: bool = Field(
        default=True,
        description="Strict aggregate() when True, tolerant tryBlockAndAggregate() when False",
    )
    block_tag: BlockTag = Field(
        default=DEFAULT_BLOCK_TAG,
        description="Block number or tag ('latest', 'pending', 'safe', 'finalized', ...)",
    )
    max_batch_size: Optional[int] = Field(
        default=None,
        ge=1,
        description="Per-batch override of the engine's chunk size",
    )

    @classmethod
    def coerce(
        cls, options: Optional[Union["ExecuteOptions", Mapping[str, Any]]]
    ) -> "ExecuteOptions":
        """Accept an ExecuteOptions, a plain mapping, or None."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        try:
            return cls(**dict(options))
        except PydanticValidationError as e:
            raise ConfigurationError(
                f"Invalid execute options: {e}", field="options"
            ) from e


# ============================================================================
# Provider settings
# ============================================================================

class MulticallSettings(BaseModel):
    """
    Settings for building a MulticallProvider.

    Example:
        ```python
        settings = MulticallSettings.from_env()
        provider = MulticallProvider.from_settings(settings)
        ```
    """

    model_config = ConfigDict(frozen=True)

    chain_id: int = Field(
        ...,
        ge=1,
        description="Chain id of the target network",
    )
    rpc_url: Optional[str] = Field(
        default=None,
        description="JSON-RPC endpoint; required unless a Web3 instance is supplied",
    )
    aggregator_address: Optional[str] = Field(
        default=None,
        description="Custom aggregator deployment; overrides the chain registry",
    )
    max_batch_size: int = Field(
        default=DEFAULT_MAX_BATCH_SIZE,
        ge=1,
        description="Maximum calls per aggregator invocation",
    )
    max_concurrency: int = Field(
        default=DEFAULT_MAX_CONCURRENCY,
        ge=1,
        description="Maximum chunk dispatches in flight per batch",
    )
    timeout: int = Field(
        default=PROVIDER_TIMEOUT_SECONDS,
        ge=1,
        description="HTTP provider request timeout in seconds",
    )

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        dotenv: bool = True,
    ) -> "MulticallSettings":
        """Load settings from ``MULTICALL_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``
            dotenv: Load a ``.env`` file first (ignored when environ is given)

        Raises:
            ConfigurationError: If a variable is missing or invalid
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        fields = (
            "chain_id",
            "rpc_url",
            "aggregator_address",
            "max_batch_size",
            "max_concurrency",
            "timeout",
        )
        values = {}
        for name in fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw not in (None, ""):
                values[name] = raw

        if "chain_id" not in values:
            raise ConfigurationError(
                f"{ENV_PREFIX}CHAIN_ID is not set", field="chain_id"
            )
        try:
            return cls(**values)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid multicall settings: {e}") from e
