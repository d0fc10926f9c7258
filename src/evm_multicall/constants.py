"""Constants for the multicall SDK.

This module defines constant values used across the SDK,
including ABI encoding constants, revert payload selectors,
batching limits and network settings.
"""

# ABI Encoding Constants
ABI_SELECTOR_LENGTH = 4
ERROR_STRING_SELECTOR = "0x08c379a0"  # Error(string)
PANIC_SELECTOR = "0x4e487b71"  # Panic(uint256)

# Multicall3 is deployed at the same address on most EVM chains
MULTICALL3_ADDRESS = "0xcA11bde05977b3631167028862bE2a173976CA11"

# Batching Constants
DEFAULT_MAX_BATCH_SIZE = 250  # Calls per aggregator invocation
DEFAULT_MAX_CONCURRENCY = 4  # Chunk dispatches in flight per batch
DEFAULT_BLOCK_TAG = "latest"

# Network Constants
PROVIDER_TIMEOUT_SECONDS = 30

__all__ = [
    "ABI_SELECTOR_LENGTH",
    "ERROR_STRING_SELECTOR",
    "PANIC_SELECTOR",
    "MULTICALL3_ADDRESS",
    "DEFAULT_MAX_BATCH_SIZE",
    "DEFAULT_MAX_CONCURRENCY",
    "DEFAULT_BLOCK_TAG",
    "PROVIDER_TIMEOUT_SECONDS",
]
