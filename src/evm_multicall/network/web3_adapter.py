"""
web3.py network adapter.

Sends aggregator calls with ``eth_call`` through an ``AsyncWeb3``
instance and sorts failures into contract reverts and transport errors.

Example:
    >>> w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
    >>> adapter = Web3NetworkAdapter(w3, chain_id=1, retry=RetryConfig())
"""

from __future__ import annotations

import asyncio
from typing import Optional

import aiohttp
from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError, Web3Exception

from evm_multicall.config.settings import BlockTag
from evm_multicall.constants import DEFAULT_BLOCK_TAG
from evm_multicall.errors import ConfigurationError, ContractRevertError, TransportError
from evm_multicall.multicall.protocol import decode_aggregate_result
from evm_multicall.network.base import NetworkAdapter
from evm_multicall.types import DispatchResult, ProtocolVariant
from evm_multicall.utils.logging import get_logger
from evm_multicall.utils.retry import RetryConfig, retry_async
from evm_multicall.utils.validation import decode_revert_reason

_logger = get_logger(__name__)

REVERT_MESSAGE_PREFIX = "execution reverted"


def _revert_reason(error: ContractLogicError) -> Optional[str]:
    data = getattr(error, "data", None)
    if isinstance(data, (str, bytes)):
        reason = decode_revert_reason(data)
        if reason:
            return reason
    message = getattr(error, "message", None) or str(error)
    if message.startswith(REVERT_MESSAGE_PREFIX):
        message = message[len(REVERT_MESSAGE_PREFIX):].lstrip(": ")
    return message or None


class Web3NetworkAdapter(NetworkAdapter):
    """Network adapter backed by ``AsyncWeb3``."""

    def __init__(
        self,
        w3: AsyncWeb3,
        chain_id: int,
        *,
        retry: Optional[RetryConfig] = None,
        endpoint: Optional[str] = None,
    ):
        if w3 is None:
            raise ConfigurationError("w3 is required", field="w3")
        if not chain_id:
            raise ConfigurationError("chain_id is required", field="chain_id")
        self._w3 = w3
        self._chain_id = int(chain_id)
        self._retry = retry
        self._endpoint = endpoint

    @property
    def chain_id(self) -> int:
        return self._chain_id

    @property
    def w3(self) -> AsyncWeb3:
        return self._w3

    async def dispatch(
        self,
        aggregator_address: str,
        call_data: bytes,
        variant: ProtocolVariant,
        block_tag: BlockTag = DEFAULT_BLOCK_TAG,
        expected_count: Optional[int] = None,
    ) -> DispatchResult:
        async def send() -> bytes:
            return await self._eth_call(aggregator_address, call_data, block_tag)

        if self._retry is not None:
            raw = await retry_async(send, self._retry, operation="eth_call")
        else:
            raw = await send()
        return decode_aggregate_result(raw, variant, expected_count)

    async def _eth_call(self, to: str, call_data: bytes, block_tag: BlockTag) -> bytes:
        tx = {"to": to, "data": "0x" + call_data.hex()}
        try:
            raw = await self._w3.eth.call(tx, block_identifier=block_tag)
        except ContractLogicError as e:
            raise ContractRevertError(_revert_reason(e), details={"aggregator": to}) from e
        except (Web3Exception, aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as e:
            _logger.debug(
                "Aggregator eth_call failed",
                extra={"aggregator": to, "error": str(e), "endpoint": self._endpoint},
            )
            raise TransportError(
                f"eth_call to aggregator failed: {e}",
                endpoint=self._endpoint,
                details={"aggregator": to},
            ) from e
        return bytes(raw)
