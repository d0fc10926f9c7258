"""
EVM Multicall SDK - batched contract reads through an aggregator contract.

Many read-only calls, possibly across many contracts, are packed into as few
``eth_call`` round-trips as possible and handed back keyed the way you asked.

Quick Start:
    >>> from evm_multicall import MulticallProvider, erc20
    >>> import asyncio
    >>>
    >>> async def main():
    ...     provider = MulticallProvider(1, "https://eth.llamarpc.com")
    ...     dai = erc20("0x6B175474E89094C44Da98b954EedeAC495271d0F")
    ...     batch = await provider.call({
    ...         "symbol": dai.call("symbol"),
    ...         "supply": dai.call("totalSupply"),
    ...     })
    ...     print(batch.block_number, batch["symbol"], batch["supply"])
    ...
    >>> asyncio.run(main())

Modules:
- `provider`: MulticallProvider, the chain-bound entry point
- `contracts`: ContractBinding, CallDescriptor and the token standards
- `multicall`: AggregationEngine, chunking and the aggregator wire codec
- `network`: NetworkAdapter, the web3 and in-memory adapters
- `config`: chain registry and settings
- `errors`: Exception hierarchy
- `utils`: Logging, retry and validation helpers
"""

from evm_multicall.version import __version__, __version_info__

# Provider
from evm_multicall.provider import MulticallProvider, NetworkInfo

# Contracts
from evm_multicall.contracts import (
    AbiFunction,
    CallDescriptor,
    ContractBinding,
    ContractStandard,
    ERC20,
    ERC721,
    ERC777,
    WRAPPED,
    build_call,
    erc20,
    erc721,
    erc777,
    wrapped,
)

# Engine
from evm_multicall.multicall import AggregationEngine

# Network
from evm_multicall.network import (
    InMemoryNetworkAdapter,
    NetworkAdapter,
    Web3NetworkAdapter,
)

# Configuration
from evm_multicall.config import (
    ExecuteOptions,
    MulticallSettings,
    Networks,
    get_aggregator_address,
    is_supported_network,
)

# Types
from evm_multicall.types import (
    BatchResult,
    CallFailure,
    OriginContext,
    ProtocolVariant,
)

# Errors
from evm_multicall.errors import (
    AmbiguousOverloadError,
    ConfigurationError,
    ContractRevertError,
    DecodingError,
    EncodingError,
    MulticallError,
    TransportError,
    UnknownMethodError,
    UnsupportedNetworkError,
)

from evm_multicall.abis import load_abi
from evm_multicall.utils.logging import configure_logging, get_logger
from evm_multicall.utils.retry import RetryConfig

__all__ = [
    "__version__",
    "__version_info__",
    # Provider
    "MulticallProvider",
    "NetworkInfo",
    # Contracts
    "AbiFunction",
    "CallDescriptor",
    "ContractBinding",
    "ContractStandard",
    "ERC20",
    "ERC721",
    "ERC777",
    "WRAPPED",
    "build_call",
    "erc20",
    "erc721",
    "erc777",
    "wrapped",
    # Engine
    "AggregationEngine",
    # Network
    "NetworkAdapter",
    "Web3NetworkAdapter",
    "InMemoryNetworkAdapter",
    # Configuration
    "ExecuteOptions",
    "MulticallSettings",
    "Networks",
    "get_aggregator_address",
    "is_supported_network",
    # Types
    "BatchResult",
    "CallFailure",
    "OriginContext",
    "ProtocolVariant",
    # Errors
    "MulticallError",
    "ConfigurationError",
    "UnsupportedNetworkError",
    "EncodingError",
    "DecodingError",
    "UnknownMethodError",
    "AmbiguousOverloadError",
    "TransportError",
    "ContractRevertError",
    # Utilities
    "load_abi",
    "configure_logging",
    "get_logger",
    "RetryConfig",
]
