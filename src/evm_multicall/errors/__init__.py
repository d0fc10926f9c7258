"""
Exception hierarchy for the multicall SDK.

MulticallError
├── ConfigurationError
│   ├── UnsupportedNetworkError
│   └── EncodingError
├── DecodingError
├── UnknownMethodError
├── AmbiguousOverloadError
├── TransportError
└── ContractRevertError
"""

from evm_multicall.errors.base import MulticallError
from evm_multicall.errors.multicall import (
    AmbiguousOverloadError,
    ConfigurationError,
    ContractRevertError,
    DecodingError,
    EncodingError,
    TransportError,
    UnknownMethodError,
    UnsupportedNetworkError,
)

__all__ = [
    "MulticallError",
    "ConfigurationError",
    "UnsupportedNetworkError",
    "EncodingError",
    "DecodingError",
    "UnknownMethodError",
    "AmbiguousOverloadError",
    "TransportError",
    "ContractRevertError",
]
