"""Shared data types for calls, dispatches and batch results."""

from evm_multicall.types.calls import (
    AggregateRequest,
    AggregateResult,
    BatchResult,
    CallFailure,
    DispatchResult,
    OriginContext,
    ProtocolVariant,
)

__all__ = [
    "ProtocolVariant",
    "AggregateRequest",
    "AggregateResult",
    "DispatchResult",
    "OriginContext",
    "CallFailure",
    "BatchResult",
]
