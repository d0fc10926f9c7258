"""Network registry and configuration models."""

from evm_multicall.config.networks import (
    AGGREGATOR_OVERRIDES,
    Networks,
    get_aggregator_address,
    is_supported_network,
)
from evm_multicall.config.settings import BlockTag, ExecuteOptions, MulticallSettings

__all__ = [
    "Networks",
    "AGGREGATOR_OVERRIDES",
    "get_aggregator_address",
    "is_supported_network",
    "BlockTag",
    "ExecuteOptions",
    "MulticallSettings",
]
