"""Network adapters: the engine's only route to a chain."""

from evm_multicall.network.base import NetworkAdapter, resolve_aggregator_address
from evm_multicall.network.memory import CallReverted, DispatchRecord, InMemoryNetworkAdapter
from evm_multicall.network.web3_adapter import Web3NetworkAdapter

__all__ = [
    "NetworkAdapter",
    "resolve_aggregator_address",
    "Web3NetworkAdapter",
    "InMemoryNetworkAdapter",
    "CallReverted",
    "DispatchRecord",
]
