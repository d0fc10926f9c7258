"""
Aggregation engine.

Turns a key -> CallDescriptor mapping into one or more aggregator
invocations and hands back a key -> decoded result mapping.

Phases, in order:

1. encode every descriptor in key insertion order (fail fast, no dispatch)
2. capture the key order, the only correlation back from wire positions
3. partition the ordered requests into contiguous chunks
4. dispatch chunks concurrently (bounded), strict or tolerant variant
5. decode each result with the descriptor at the same position
6. remap onto the captured keys and attach block number and origin context

Example:
    >>> engine = AggregationEngine(adapter)
    >>> batch = await engine.execute(
    ...     {"bal": token.call("balanceOf", holder), "own": nft.call("ownerOf", 7)},
    ...     {"require_success": False},
    ... )
    >>> batch.results["bal"], batch.origin_context["own"].contract
"""

from __future__ import annotations

import asyncio
from typing import (
    TYPE_CHECKING,
    Any,
    Hashable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

from evm_multicall.config.settings import ExecuteOptions
from evm_multicall.constants import DEFAULT_MAX_BATCH_SIZE, DEFAULT_MAX_CONCURRENCY
from evm_multicall.contracts.descriptor import CallDescriptor
from evm_multicall.errors import (
    ConfigurationError,
    ContractRevertError,
    DecodingError,
    MulticallError,
    TransportError,
)
from evm_multicall.multicall.chunking import Chunk, flatten, partition, remap
from evm_multicall.multicall.protocol import encode_aggregate_call
from evm_multicall.types import (
    AggregateRequest,
    AggregateResult,
    BatchResult,
    CallFailure,
    DispatchResult,
    ProtocolVariant,
)
from evm_multicall.utils.logging import get_logger
from evm_multicall.utils.validation import decode_revert_reason

if TYPE_CHECKING:
    from evm_multicall.network.base import NetworkAdapter

K = TypeVar("K", bound=Hashable)

OptionsLike = Union[ExecuteOptions, Mapping[str, Any], None]

_logger = get_logger(__name__)

__all__ = ["AggregationEngine"]


class AggregationEngine:
    """
    Executes keyed batches of calls through an aggregator contract.

    The engine holds no per-batch state; one instance may run any number
    of batches concurrently.

    Args:
        adapter: Network adapter used for every dispatch
        aggregator_address: Custom aggregator deployment; defaults to the
            chain registry entry for ``adapter.chain_id``
        max_batch_size: Maximum calls per aggregator invocation
        max_concurrency: Maximum chunk dispatches in flight per batch

    Raises:
        UnsupportedNetworkError: If no aggregator is known for the chain
        ConfigurationError: If a limit is not positive
    """

    def __init__(
        self,
        adapter: "NetworkAdapter",
        *,
        aggregator_address: Optional[str] = None,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ):
        if adapter is None:
            raise ConfigurationError("adapter is required", field="adapter")
        if max_batch_size < 1:
            raise ConfigurationError("max_batch_size must be positive", field="max_batch_size")
        if max_concurrency < 1:
            raise ConfigurationError("max_concurrency must be positive", field="max_concurrency")
        self._adapter = adapter
        self._aggregator_address = adapter.resolve_aggregator_address(aggregator_address)
        self._max_batch_size = max_batch_size
        self._max_concurrency = max_concurrency

    @property
    def adapter(self) -> "NetworkAdapter":
        return self._adapter

    @property
    def aggregator_address(self) -> str:
        return self._aggregator_address

    @property
    def max_batch_size(self) -> int:
        return self._max_batch_size

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def execute(
        self,
        named_calls: Mapping[K, CallDescriptor],
        options: OptionsLike = None,
    ) -> BatchResult[K]:
        """
        Execute a keyed batch of calls.

        Args:
            named_calls: key -> CallDescriptor; key order is preserved
            options: ExecuteOptions or an equivalent mapping

        Returns:
            BatchResult keyed exactly like ``named_calls``

        Raises:
            ConfigurationError, UnknownMethodError, AmbiguousOverloadError:
                A descriptor could not be encoded (nothing was dispatched)
            ContractRevertError: A call reverted in strict mode
            TransportError: A chunk got no answer from the network
        """
        opts = ExecuteOptions.coerce(options)
        variant = ProtocolVariant.for_options(opts.require_success)

        keys, descriptors, requests = self._encode(named_calls)
        origin_context = {key: d.origin() for key, d in zip(keys, descriptors)}
        if not requests:
            return BatchResult(block_number=0, origin_context={}, results={})

        chunks = partition(requests, opts.max_batch_size or self._max_batch_size)
        _logger.debug(
            "Dispatching batch",
            extra={
                "calls": len(requests),
                "chunks": len(chunks),
                "variant": variant.value,
                "block_tag": opts.block_tag,
            },
        )

        dispatches = await self._dispatch_all(chunks, keys, variant, opts)
        flat = flatten(chunks, dispatches)
        decoded = [
            self._decode(key, descriptor, result, variant)
            for key, descriptor, result in zip(keys, descriptors, flat)
        ]

        block_number = dispatches[0].block_number
        if any(d.block_number != block_number for d in dispatches[1:]):
            _logger.info(
                "Chunks answered from different blocks; reporting the first",
                extra={"blocks": sorted({d.block_number for d in dispatches})},
            )

        batch: BatchResult[K] = BatchResult(
            block_number=block_number,
            origin_context=origin_context,
            results=remap(keys, decoded),
        )
        _logger.debug(
            "Batch complete",
            extra={"calls": len(requests), "failures": len(batch.failures), "block": block_number},
        )
        return batch

    def execute_sync(
        self,
        named_calls: Mapping[K, CallDescriptor],
        options: OptionsLike = None,
    ) -> BatchResult[K]:
        """Blocking wrapper around ``execute`` for code without an event loop."""
        return asyncio.run(self.execute(named_calls, options))

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------
    def _encode(
        self, named_calls: Mapping[K, CallDescriptor]
    ) -> Tuple[List[K], List[CallDescriptor], List[AggregateRequest]]:
        keys: List[K] = []
        descriptors: List[CallDescriptor] = []
        requests: List[AggregateRequest] = []
        for key, descriptor in named_calls.items():
            if not isinstance(descriptor, CallDescriptor):
                raise ConfigurationError(
                    f"expected a CallDescriptor, got {type(descriptor).__name__}",
                    field="named_calls",
                ).attribute_to(key)
            try:
                request = descriptor.to_request()
            except MulticallError as e:
                raise e.attribute_to(key)
            keys.append(key)
            descriptors.append(descriptor)
            requests.append(request)
        return keys, descriptors, requests

    async def _dispatch_all(
        self,
        chunks: Sequence[Chunk],
        keys: Sequence[K],
        variant: ProtocolVariant,
        opts: ExecuteOptions,
    ) -> List[DispatchResult]:
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def run(chunk: Chunk) -> DispatchResult:
            async with semaphore:
                return await self._dispatch_chunk(chunk, keys, variant, opts)

        if len(chunks) == 1:
            return [await run(chunks[0])]

        tasks = [asyncio.ensure_future(run(chunk)) for chunk in chunks]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # No partial results escape a failed or cancelled batch.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _dispatch_chunk(
        self,
        chunk: Chunk,
        keys: Sequence[K],
        variant: ProtocolVariant,
        opts: ExecuteOptions,
    ) -> DispatchResult:
        call_data = encode_aggregate_call(chunk.requests, variant)
        chunk_keys = list(keys[chunk.offset : chunk.stop])
        try:
            return await self._adapter.dispatch(
                self._aggregator_address,
                call_data,
                variant,
                opts.block_tag,
                expected_count=len(chunk),
            )
        except ContractRevertError as e:
            self._annotate_revert(e, chunk, chunk_keys)
            _logger.warning(
                "Strict aggregate call reverted",
                extra={"chunk": chunk.index, "key": e.key, "reason": e.reason},
            )
            raise
        except TransportError as e:
            e.details.setdefault("chunk", chunk.index)
            e.details.setdefault("keys", chunk_keys)
            _logger.warning(
                "Chunk dispatch failed",
                extra={"chunk": chunk.index, "calls": len(chunk), "error": e.message},
            )
            raise

    @staticmethod
    def _annotate_revert(error: ContractRevertError, chunk: Chunk, chunk_keys: List[Any]) -> None:
        error.keys = chunk_keys
        error.details.setdefault("chunk", chunk.index)
        if error.index is not None and 0 <= error.index < len(chunk):
            request = chunk.requests[error.index]
            error.target = request.target
            error.call_data = request.call_data
            error.details["target"] = request.target
            error.attribute_to(chunk_keys[error.index])
        elif len(chunk) == 1:
            request = chunk.requests[0]
            error.target = request.target
            error.call_data = request.call_data
            error.details["target"] = request.target
            error.attribute_to(chunk_keys[0])
        else:
            error.details["keys"] = chunk_keys

    @staticmethod
    def _decode(
        key: K,
        descriptor: CallDescriptor,
        result: AggregateResult,
        variant: ProtocolVariant,
    ) -> Any:
        if not result.success:
            return CallFailure(
                key=key,
                target=descriptor.target,
                method=descriptor.method,
                return_data=result.return_data,
                reason=decode_revert_reason(result.return_data) or "call reverted",
            )
        try:
            return descriptor.decode(result.return_data)
        except DecodingError as e:
            if variant is ProtocolVariant.STRICT:
                raise e.attribute_to(key)
            return CallFailure(
                key=key,
                target=descriptor.target,
                method=descriptor.method,
                return_data=result.return_data,
                reason=e.reason,
                decode_error=True,
            )
