"""
Presets for common token standards.

Each preset is an ABI plus its default method map; the helpers return an
ordinary ContractBinding, so token contracts take part in batches exactly
like any other contract. Pass ``methods`` to point a logical name at a
non-standard function, and ``abi`` to use a richer ABI.

Example:
    >>> usdc = erc20("0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913")
    >>> nft = erc721(nft_address, methods={"ownerOf": "getOwnerOf"}, abi=custom_abi)
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence

from evm_multicall.abis import load_abi
from evm_multicall.contracts.binding import ContractBinding

__all__ = [
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


@dataclass(frozen=True)
class ContractStandard:
    """ABI file and default logical -> wire method map for a standard."""

    name: str
    abi_file: str

    @property
    def abi(self) -> List[Dict[str, Any]]:
        return load_abi(self.abi_file)

    @property
    def default_methods(self) -> Mapping[str, str]:
        names = [e["name"] for e in self.abi if e.get("type") == "function"]
        return MappingProxyType({n: n for n in names})

    def bind(
        self,
        address: str,
        methods: Optional[Mapping[str, str]] = None,
        abi: Optional[Sequence[Mapping[str, Any]]] = None,
    ) -> ContractBinding:
        # Every ABI function is bound under its own name; methods only overrides.
        return ContractBinding(address, abi if abi is not None else self.abi, methods)


ERC20 = ContractStandard("erc20", "erc20.json")
ERC721 = ContractStandard("erc721", "erc721.json")
ERC777 = ContractStandard("erc777", "erc777.json")
WRAPPED = ContractStandard("wrapped", "wrapped.json")


def erc20(
    address: str,
    methods: Optional[Mapping[str, str]] = None,
    abi: Optional[Sequence[Mapping[str, Any]]] = None,
) -> ContractBinding:
    """Bind an ERC-20 token."""
    return ERC20.bind(address, methods, abi)


def erc721(
    address: str,
    methods: Optional[Mapping[str, str]] = None,
    abi: Optional[Sequence[Mapping[str, Any]]] = None,
) -> ContractBinding:
    """Bind an ERC-721 collection. ``safeTransferFrom`` has two overloads."""
    return ERC721.bind(address, methods, abi)


def erc777(
    address: str,
    methods: Optional[Mapping[str, str]] = None,
    abi: Optional[Sequence[Mapping[str, Any]]] = None,
) -> ContractBinding:
    """Bind an ERC-777 token."""
    return ERC777.bind(address, methods, abi)


def wrapped(
    address: str,
    methods: Optional[Mapping[str, str]] = None,
    abi: Optional[Sequence[Mapping[str, Any]]] = None,
) -> ContractBinding:
    """Bind a wrapped native token (WETH-style ``deposit``/``withdraw``)."""
    return WRAPPED.bind(address, methods, abi)
