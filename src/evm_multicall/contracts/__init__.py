"""Contract bindings, call descriptors and token-standard presets."""

from evm_multicall.contracts.binding import AbiFunction, ContractBinding, parse_types, split_signature
from evm_multicall.contracts.descriptor import CallDescriptor, build_call
from evm_multicall.contracts.standards import (
    ERC20,
    ERC721,
    ERC777,
    WRAPPED,
    ContractStandard,
    erc20,
    erc721,
    erc777,
    wrapped,
)

__all__ = [
    "AbiFunction",
    "ContractBinding",
    "CallDescriptor",
    "build_call",
    "parse_types",
    "split_signature",
    "ContractStandard",
    "ERC20",
    "ERC721",
    "ERC777",
    "WRAPPED",
    "erc20",
    "erc721",
    "erc777",
    "wrapped",
]
