"""
Partition, flatten and remap: the ordering half of the aggregation engine.

The wire protocol carries no keys, only positions. A batch is encoded in
key insertion order, split into contiguous chunks, and after dispatch the
chunk results are concatenated back in chunk order so that position ``i``
of the flattened list answers key ``i`` of the captured key order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Sequence, Tuple, TypeVar

from evm_multicall.errors import TransportError
from evm_multicall.types import AggregateRequest, AggregateResult, DispatchResult

K = TypeVar("K", bound=Hashable)

__all__ = ["Chunk", "partition", "flatten", "remap"]


@dataclass(frozen=True)
class Chunk:
    """A contiguous slice of a batch, dispatched as one aggregator call."""

    index: int
    offset: int
    requests: Tuple[AggregateRequest, ...]

    def __len__(self) -> int:
        return len(self.requests)

    @property
    def stop(self) -> int:
        return self.offset + len(self.requests)


def partition(requests: Sequence[AggregateRequest], max_size: int) -> List[Chunk]:
    """Split ordered requests into contiguous chunks of at most ``max_size``.

    Raises:
        ValueError: If max_size is not positive
    """
    if max_size < 1:
        raise ValueError(f"max_size must be positive, got {max_size}")
    return [
        Chunk(index=i, offset=start, requests=tuple(requests[start : start + max_size]))
        for i, start in enumerate(range(0, len(requests), max_size))
    ]


def flatten(
    chunks: Sequence[Chunk], dispatches: Sequence[DispatchResult]
) -> List[AggregateResult]:
    """Concatenate per-chunk results in chunk order.

    Raises:
        TransportError: If any chunk came back with a different number of
            results than it sent
    """
    if len(chunks) != len(dispatches):
        raise TransportError(
            f"Received {len(dispatches)} dispatch results for {len(chunks)} chunks"
        )
    flat: List[AggregateResult] = []
    for chunk, dispatch in zip(chunks, dispatches):
        if len(dispatch.results) != len(chunk):
            raise TransportError(
                f"Chunk {chunk.index} returned {len(dispatch.results)} results "
                f"for {len(chunk)} calls",
                details={"chunk": chunk.index},
            )
        flat.extend(dispatch.results)
    return flat


def remap(keys: Sequence[K], values: Sequence[Any]) -> Dict[K, Any]:
    """Zip positional values back onto the captured key order."""
    if len(keys) != len(values):
        raise TransportError(f"Received {len(values)} results for {len(keys)} calls")
    return dict(zip(keys, values))
