"""
In-memory network adapter.

Executes aggregator calls against Python handlers instead of a node. The
full wire format is exercised: call data is decoded as an aggregator
would decode it and the answer is ABI-encoded and decoded again, so a
batch behaves as it would against a real Multicall deployment.

Example:
    >>> adapter = InMemoryNetworkAdapter(chain_id=1, block_number=100)
    >>> adapter.register(token, "balanceOf", lambda owner: 42)
    >>> adapter.register(token, "decimals", 18)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from eth_abi import encode

from evm_multicall.config.settings import BlockTag
from evm_multicall.constants import DEFAULT_BLOCK_TAG, ERROR_STRING_SELECTOR
from evm_multicall.contracts.binding import AbiFunction, ContractBinding
from evm_multicall.errors import ContractRevertError, TransportError
from evm_multicall.multicall.protocol import (
    decode_aggregate_call,
    decode_aggregate_result,
    encode_aggregate_result,
)
from evm_multicall.network.base import NetworkAdapter
from evm_multicall.types import AggregateRequest, AggregateResult, DispatchResult, ProtocolVariant
from evm_multicall.utils.validation import decode_revert_reason, to_bytes

__all__ = ["CallReverted", "DispatchRecord", "InMemoryNetworkAdapter"]


class CallReverted(Exception):
    """Raise from a handler to make the sub-call revert with ``reason``."""

    def __init__(self, reason: str = "") -> None:
        super().__init__(reason)
        self.reason = reason

    @property
    def revert_data(self) -> bytes:
        return to_bytes(ERROR_STRING_SELECTOR) + encode(["string"], [self.reason])


@dataclass(frozen=True)
class DispatchRecord:
    """One dispatch as seen by the adapter."""

    aggregator_address: str
    variant: ProtocolVariant
    block_tag: BlockTag
    requests: Tuple[AggregateRequest, ...]


_Handler = Tuple[AbiFunction, Callable[..., Any]]


class InMemoryNetworkAdapter(NetworkAdapter):
    """
    Network adapter that answers from registered handlers.

    A handler is called with the decoded call arguments and returns the
    value to encode; raising CallReverted makes that sub-call revert.
    Calls to unregistered functions revert with empty data, as calls to a
    missing function do on chain.

    Args:
        chain_id: Chain id reported to the engine
        block_number: Block number reported for dispatches
        auto_mine: Advance block_number after every dispatch
        latency: Seconds every dispatch waits before answering
    """

    def __init__(
        self,
        chain_id: int = 1,
        *,
        block_number: int = 1,
        auto_mine: bool = False,
        latency: float = 0.0,
    ):
        self._chain_id = chain_id
        self.block_number = block_number
        self.auto_mine = auto_mine
        self.latency = latency
        self.dispatches: List[DispatchRecord] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._handlers: Dict[Tuple[str, bytes], _Handler] = {}
        self._transport_failures: List[Exception] = []

    @property
    def chain_id(self) -> int:
        return self._chain_id

    def register(
        self,
        binding: ContractBinding,
        method: str,
        handler: Any,
        *,
        variant: Optional[str] = None,
    ) -> None:
        """Answer ``method`` on ``binding`` with ``handler`` (callable or constant)."""
        fn = binding.function(method, variant=variant)
        if not callable(handler):
            value = handler
            handler = lambda *_args: value  # noqa: E731
        self._handlers[(binding.address, fn.selector)] = (fn, handler)

    def fail_next(self, error: Optional[Exception] = None) -> None:
        """Make the next dispatch raise ``error`` (a TransportError by default)."""
        self._transport_failures.append(error or TransportError("simulated transport failure"))

    async def dispatch(
        self,
        aggregator_address: str,
        call_data: bytes,
        variant: ProtocolVariant,
        block_tag: BlockTag = DEFAULT_BLOCK_TAG,
        expected_count: Optional[int] = None,
    ) -> DispatchResult:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.latency:
                await asyncio.sleep(self.latency)
            if self._transport_failures:
                raise self._transport_failures.pop(0)

            decoded_variant, require_success, requests = decode_aggregate_call(call_data)
            if decoded_variant is not variant:
                raise TransportError(
                    f"call data targets {decoded_variant.value}, dispatched as {variant.value}"
                )
            self.dispatches.append(
                DispatchRecord(aggregator_address, variant, block_tag, requests)
            )

            results = []
            for index, request in enumerate(requests):
                try:
                    results.append(AggregateResult(True, self._execute(request)))
                except CallReverted as e:
                    if require_success:
                        raise ContractRevertError(
                            decode_revert_reason(e.revert_data) or None,
                            index=index,
                            target=request.target,
                            call_data=request.call_data,
                        ) from e
                    results.append(AggregateResult(False, e.revert_data if e.reason else b""))

            answer = DispatchResult(block_number=self.block_number, results=tuple(results))
            if self.auto_mine:
                self.block_number += 1
            raw = encode_aggregate_result(answer, variant)
            return decode_aggregate_result(raw, variant, expected_count)
        finally:
            self.in_flight -= 1

    def _execute(self, request: AggregateRequest) -> bytes:
        entry = self._handlers.get((request.target, request.call_data[:4]))
        if entry is None:
            raise CallReverted()
        fn, handler = entry
        args = fn.decode_input(request.call_data)
        return fn.encode_output(handler(*args))
