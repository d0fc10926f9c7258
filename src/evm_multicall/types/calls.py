"""
Call and result types exchanged between the engine and network adapters.

AggregateRequest and AggregateResult are positional: the n-th result
answers the n-th request of the same dispatch. BatchResult is what the
caller receives once positions have been mapped back onto keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Hashable, List, Optional, Tuple, TypeVar

K = TypeVar("K", bound=Hashable)


class ProtocolVariant(str, Enum):
    """Aggregator entry point used for a dispatch."""

    STRICT = "aggregate"
    """Reverts the whole aggregate call if any sub-call reverts."""

    TOLERANT = "tryBlockAndAggregate"
    """Reports a success flag per sub-call and never reverts for them."""

    @classmethod
    def for_options(cls, require_success: bool) -> "ProtocolVariant":
        return cls.STRICT if require_success else cls.TOLERANT


@dataclass(frozen=True)
class AggregateRequest:
    """One encoded sub-call: ``(target, callData)`` on the wire."""

    target: str
    call_data: bytes

    def as_tuple(self) -> Tuple[str, bytes]:
        return (self.target, self.call_data)


@dataclass(frozen=True)
class AggregateResult:
    """One sub-call answer. ``success`` is always True for strict dispatches."""

    success: bool
    return_data: bytes


@dataclass(frozen=True)
class DispatchResult:
    """Everything an adapter returns for one aggregator invocation."""

    block_number: int
    results: Tuple[AggregateResult, ...]
    block_hash: Optional[bytes] = None


@dataclass(frozen=True)
class OriginContext:
    """Which contract and method produced the result stored under a key."""

    contract: str
    method: str
    signature: str
    args: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class CallFailure:
    """
    Result marker for a sub-call that failed in tolerant mode.

    Falsy, so ``if result:`` separates failures from decoded values
    (except decoded falsy values such as ``0``; use ``isinstance`` when
    that matters).

    Attributes:
        key: Batch key of the failed call
        target: Contract address that was called
        method: Logical method name
        return_data: Raw revert or return bytes as received
        reason: Decoded revert reason, or a short description
        decode_error: True when the call succeeded but its bytes did not
            match the method's outputs
    """

    key: Any
    target: str
    method: str
    return_data: bytes = b""
    reason: Optional[str] = None
    decode_error: bool = False

    def __bool__(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "target": self.target,
            "method": self.method,
            "return_data": "0x" + self.return_data.hex(),
            "reason": self.reason,
            "decode_error": self.decode_error,
        }


@dataclass
class BatchResult(Generic[K]):
    """
    Keyed outcome of one ``execute`` call.

    Attributes:
        block_number: Block of the first dispatched chunk
        origin_context: key -> contract/method, populated for every key
        results: key -> decoded value or CallFailure
    """

    block_number: int
    origin_context: Dict[K, OriginContext] = field(default_factory=dict)
    results: Dict[K, Any] = field(default_factory=dict)

    def __getitem__(self, key: K) -> Any:
        return self.results[key]

    def __contains__(self, key: object) -> bool:
        return key in self.results

    def __len__(self) -> int:
        return len(self.results)

    @property
    def failures(self) -> Dict[K, CallFailure]:
        """Keys whose call failed, with their failure markers."""
        return {k: v for k, v in self.results.items() if isinstance(v, CallFailure)}

    @property
    def ok(self) -> bool:
        """True when no key carries a failure marker."""
        return not self.failures

    def keys(self) -> List[K]:
        return list(self.results)
