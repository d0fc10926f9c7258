"""
Network adapter interface.

The aggregation engine only needs two things from the network: the
aggregator address for the active chain, and a primitive that sends one
encoded aggregator call and returns its decoded per-call results.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from evm_multicall.config.networks import get_aggregator_address
from evm_multicall.config.settings import BlockTag
from evm_multicall.constants import DEFAULT_BLOCK_TAG
from evm_multicall.types import DispatchResult, ProtocolVariant

__all__ = ["NetworkAdapter", "resolve_aggregator_address"]


def resolve_aggregator_address(chain_id: Optional[int], override: Optional[str] = None) -> str:
    """Resolve the aggregator address for ``chain_id``.

    Raises:
        UnsupportedNetworkError: If no entry exists and no override was supplied
    """
    return get_aggregator_address(chain_id, override)


class NetworkAdapter(ABC):
    """
    Boundary between the engine and the transport.

    Implementations may be slow and may fail; the engine never retries.
    They must raise TransportError when no answer was obtained and
    ContractRevertError when a strict aggregate call reverted.
    """

    @property
    @abstractmethod
    def chain_id(self) -> int:
        """Chain id of the network this adapter talks to."""

    @abstractmethod
    async def dispatch(
        self,
        aggregator_address: str,
        call_data: bytes,
        variant: ProtocolVariant,
        block_tag: BlockTag = DEFAULT_BLOCK_TAG,
        expected_count: Optional[int] = None,
    ) -> DispatchResult:
        """
        Send one encoded aggregator call.

        Args:
            aggregator_address: Aggregator contract to call
            call_data: Encoded ``aggregate``/``tryBlockAndAggregate`` call
            variant: Which entry point ``call_data`` targets
            block_tag: Block to execute against
            expected_count: Number of sub-calls encoded in ``call_data``

        Returns:
            Block number and per-call results, in request order
        """

    def resolve_aggregator_address(self, override: Optional[str] = None) -> str:
        return resolve_aggregator_address(self.chain_id, override)
