"""Multicall provider: chain, transport and engine wired together.

Example:
    >>> provider = MulticallProvider(chain_id=1, rpc_url="https://eth.llamarpc.com")
    >>> dai = provider.get_contract(DAI, load_abi("erc20.json"))
    >>> batch = await provider.call({
    ...     "supply": dai.call("totalSupply"),
    ...     "vitalik": dai.call("balanceOf", VITALIK),
    ... })
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Mapping, Optional, Sequence, TypeVar

from web3 import AsyncWeb3

from evm_multicall.config.settings import MulticallSettings
from evm_multicall.constants import (
    DEFAULT_MAX_BATCH_SIZE,
    DEFAULT_MAX_CONCURRENCY,
    PROVIDER_TIMEOUT_SECONDS,
)
from evm_multicall.contracts.binding import ContractBinding
from evm_multicall.contracts.descriptor import CallDescriptor
from evm_multicall.errors import ConfigurationError
from evm_multicall.multicall.engine import AggregationEngine, OptionsLike
from evm_multicall.network.base import NetworkAdapter
from evm_multicall.network.web3_adapter import Web3NetworkAdapter
from evm_multicall.types import BatchResult
from evm_multicall.utils.retry import RetryConfig

K = TypeVar("K", bound=Hashable)

__all__ = ["NetworkInfo", "MulticallProvider"]


@dataclass(frozen=True)
class NetworkInfo:
    chain_id: int
    aggregator_address: str
    rpc_url: Optional[str] = None


class MulticallProvider:
    """Entry point for batching reads on one chain.

    Either ``rpc_url``, ``w3`` or ``adapter`` must be supplied. An explicit
    adapter wins over ``w3``, which wins over ``rpc_url``.

    Raises:
        ConfigurationError: If chain_id is missing, or no RPC URL, Web3
            instance or adapter was given
        UnsupportedNetworkError: If the chain has no known aggregator and
            no aggregator_address was given
    """

    def __init__(
        self,
        chain_id: int,
        rpc_url: Optional[str] = None,
        *,
        w3: Optional[AsyncWeb3] = None,
        adapter: Optional[NetworkAdapter] = None,
        aggregator_address: Optional[str] = None,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        retry: Optional[RetryConfig] = None,
        timeout: int = PROVIDER_TIMEOUT_SECONDS,
    ):
        if not chain_id:
            raise ConfigurationError(
                "Can not find a Chain ID, provide a 'chain_id' along with the 'rpc_url'",
                field="chain_id",
            )
        if adapter is None and w3 is None and not rpc_url:
            raise ConfigurationError(
                f"Can not find a RPC URL for {chain_id}, provide a 'rpc_url' along with the 'chain_id'",
                field="rpc_url",
            )

        if adapter is None:
            if w3 is None:
                w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))
            adapter = Web3NetworkAdapter(w3, chain_id, retry=retry, endpoint=rpc_url)
        elif adapter.chain_id != chain_id:
            raise ConfigurationError(
                f"adapter is connected to chain {adapter.chain_id}, not {chain_id}",
                field="adapter",
            )

        self._rpc_url = rpc_url
        self._engine = AggregationEngine(
            adapter,
            aggregator_address=aggregator_address,
            max_batch_size=max_batch_size,
            max_concurrency=max_concurrency,
        )

    @classmethod
    def from_settings(
        cls,
        settings: MulticallSettings,
        *,
        w3: Optional[AsyncWeb3] = None,
        retry: Optional[RetryConfig] = None,
    ) -> "MulticallProvider":
        return cls(
            settings.chain_id,
            settings.rpc_url,
            w3=w3,
            aggregator_address=settings.aggregator_address,
            max_batch_size=settings.max_batch_size,
            max_concurrency=settings.max_concurrency,
            retry=retry,
            timeout=settings.timeout,
        )

    @property
    def engine(self) -> AggregationEngine:
        return self._engine

    @property
    def adapter(self) -> NetworkAdapter:
        return self._engine.adapter

    @property
    def network(self) -> NetworkInfo:
        return NetworkInfo(
            chain_id=self.adapter.chain_id,
            aggregator_address=self._engine.aggregator_address,
            rpc_url=self._rpc_url,
        )

    def get_contract(
        self,
        address: str,
        abi: Sequence[Mapping[str, Any]],
        methods: Optional[Mapping[str, str]] = None,
    ) -> ContractBinding:
        return ContractBinding(address, abi, methods)

    async def call(
        self,
        named_calls: Mapping[K, CallDescriptor],
        options: OptionsLike = None,
    ) -> BatchResult[K]:
        """Execute a keyed batch; see ``AggregationEngine.execute``."""
        return await self._engine.execute(named_calls, options)

    def call_sync(
        self,
        named_calls: Mapping[K, CallDescriptor],
        options: OptionsLike = None,
    ) -> BatchResult[K]:
        return self._engine.execute_sync(named_calls, options)
