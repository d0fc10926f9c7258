"""
Aggregator wire codec.

Encodes ``aggregate`` / ``tryBlockAndAggregate`` call data and decodes
their return data, using the Multicall2 ABI (Multicall3 is a superset
with identical selectors for both entry points).
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from evm_multicall.abis import load_abi
from evm_multicall.constants import MULTICALL3_ADDRESS
from evm_multicall.contracts.binding import ContractBinding
from evm_multicall.errors import DecodingError, TransportError
from evm_multicall.types import (
    AggregateRequest,
    AggregateResult,
    DispatchResult,
    ProtocolVariant,
)

__all__ = [
    "aggregator_binding",
    "encode_aggregate_call",
    "decode_aggregate_call",
    "encode_aggregate_result",
    "decode_aggregate_result",
]

EMPTY_BLOCK_HASH = b"\x00" * 32

# Encoding does not depend on the deployment address.
_AGGREGATOR = ContractBinding(MULTICALL3_ADDRESS, load_abi("multicall2.json"))


def aggregator_binding(address: str) -> ContractBinding:
    """Binding for an aggregator deployed at ``address``."""
    return ContractBinding(address, load_abi("multicall2.json"))


def encode_aggregate_call(
    requests: Sequence[AggregateRequest], variant: ProtocolVariant
) -> bytes:
    """Encode one aggregator invocation for the given ordered requests."""
    calls = [r.as_tuple() for r in requests]
    if variant is ProtocolVariant.STRICT:
        return _AGGREGATOR.encode("aggregate", [calls])
    return _AGGREGATOR.encode("tryBlockAndAggregate", [False, calls])


def decode_aggregate_call(
    call_data: bytes,
) -> Tuple[ProtocolVariant, bool, Tuple[AggregateRequest, ...]]:
    """Decode aggregator call data into ``(variant, require_success, requests)``."""
    fn, args = _AGGREGATOR.decode_call(call_data)
    if fn.name == ProtocolVariant.STRICT.value:
        (calls,) = args
        variant, require_success = ProtocolVariant.STRICT, True
    else:
        require_success, calls = args
        variant = ProtocolVariant.TOLERANT
    requests = tuple(AggregateRequest(target=t, call_data=bytes(d)) for t, d in calls)
    return variant, require_success, requests


def encode_aggregate_result(result: DispatchResult, variant: ProtocolVariant) -> bytes:
    """Encode return data as the aggregator contract would produce it."""
    if variant is ProtocolVariant.STRICT:
        return _AGGREGATOR.encode_result(
            "aggregate",
            (result.block_number, [r.return_data for r in result.results]),
        )
    return _AGGREGATOR.encode_result(
        "tryBlockAndAggregate",
        (
            result.block_number,
            result.block_hash or EMPTY_BLOCK_HASH,
            [(r.success, r.return_data) for r in result.results],
        ),
    )


def decode_aggregate_result(
    data: bytes,
    variant: ProtocolVariant,
    expected_count: Optional[int] = None,
) -> DispatchResult:
    """Decode aggregator return data.

    Raises:
        TransportError: If the data is malformed or carries a different
            number of results than requests were sent
    """
    try:
        decoded = _AGGREGATOR.decode(variant.value, data)
    except DecodingError as e:
        raise TransportError(f"Malformed aggregator response: {e.reason}") from e

    if variant is ProtocolVariant.STRICT:
        block_number, return_data = decoded
        block_hash = None
        results = tuple(AggregateResult(success=True, return_data=bytes(d)) for d in return_data)
    else:
        block_number, block_hash, entries = decoded
        results = tuple(
            AggregateResult(success=bool(ok), return_data=bytes(d)) for ok, d in entries
        )

    if expected_count is not None and len(results) != expected_count:
        raise TransportError(
            f"Aggregator returned {len(results)} results for {expected_count} calls",
            details={"expected": expected_count, "received": len(results)},
        )
    return DispatchResult(
        block_number=int(block_number),
        results=results,
        block_hash=bytes(block_hash) if block_hash is not None else None,
    )
