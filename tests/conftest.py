"""
Shared fixtures for multicall SDK tests.
"""

from typing import Any, Dict, List

import pytest

from evm_multicall.contracts import ContractBinding, erc20, erc721
from evm_multicall.multicall import AggregationEngine
from evm_multicall.network import InMemoryNetworkAdapter


# =============================================================================
# Test Constants
# =============================================================================

# Digit-only addresses are their own EIP-55 checksum
HOLDER = "0x1111111111111111111111111111111111111111"
TOKEN = "0x2222222222222222222222222222222222222222"
NFT = "0x3333333333333333333333333333333333333333"
CUSTOM = "0x4444444444444444444444444444444444444444"
SPENDER = "0x5555555555555555555555555555555555555555"
NFT_OWNER = "0x6666666666666666666666666666666666666666"

# A contract whose balance getter is not called balanceOf
CUSTOM_TOKEN_ABI: List[Dict[str, Any]] = [
    {
        "type": "function",
        "name": "getBalanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "info",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [
            {"name": "supply", "type": "uint256"},
            {"name": "admin", "type": "address"},
        ],
    },
    {
        "type": "function",
        "name": "lookup",
        "stateMutability": "view",
        "inputs": [{"name": "id", "type": "uint256"}],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "type": "function",
        "name": "lookup",
        "stateMutability": "view",
        "inputs": [{"name": "id", "type": "bytes32"}],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "type": "event",
        "name": "Updated",
        "anonymous": False,
        "inputs": [{"name": "by", "type": "address", "indexed": True}],
    },
]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def token() -> ContractBinding:
    """ERC-20 binding at TOKEN."""
    return erc20(TOKEN)


@pytest.fixture
def nft() -> ContractBinding:
    """ERC-721 binding at NFT."""
    return erc721(NFT)


@pytest.fixture
def custom() -> ContractBinding:
    """Binding that maps the logical balanceOf onto getBalanceOf."""
    return ContractBinding(CUSTOM, CUSTOM_TOKEN_ABI, methods={"balanceOf": "getBalanceOf"})


@pytest.fixture
def adapter(token: ContractBinding, nft: ContractBinding) -> InMemoryNetworkAdapter:
    """In-memory chain with a funded ERC-20 holder and one minted NFT."""
    adapter = InMemoryNetworkAdapter(chain_id=1, block_number=100)
    adapter.register(token, "balanceOf", lambda owner: 1_000 if owner == HOLDER else 0)
    adapter.register(token, "symbol", "TKN")
    adapter.register(token, "decimals", 18)
    adapter.register(nft, "ownerOf", lambda token_id: NFT_OWNER)
    return adapter


@pytest.fixture
def engine(adapter: InMemoryNetworkAdapter) -> AggregationEngine:
    """Engine with the default chunk size over the in-memory chain."""
    return AggregationEngine(adapter)
