"""Aggregation engine, chunking and the aggregator wire codec."""

from evm_multicall.multicall.chunking import Chunk, flatten, partition, remap
from evm_multicall.multicall.engine import AggregationEngine
from evm_multicall.multicall.protocol import (
    aggregator_binding,
    decode_aggregate_call,
    decode_aggregate_result,
    encode_aggregate_call,
    encode_aggregate_result,
)

__all__ = [
    "AggregationEngine",
    "Chunk",
    "partition",
    "flatten",
    "remap",
    "aggregator_binding",
    "encode_aggregate_call",
    "decode_aggregate_call",
    "encode_aggregate_result",
    "decode_aggregate_result",
]
