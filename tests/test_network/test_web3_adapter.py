"""
Tests for Web3NetworkAdapter.

AsyncWeb3 is mocked; only ``w3.eth.call`` is exercised.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest
from eth_abi import encode
from web3.exceptions import ContractLogicError

from evm_multicall.constants import ERROR_STRING_SELECTOR, MULTICALL3_ADDRESS
from evm_multicall.errors import ConfigurationError, ContractRevertError, TransportError
from evm_multicall.multicall import encode_aggregate_call
from evm_multicall.network import Web3NetworkAdapter
from evm_multicall.types import AggregateRequest, AggregateResult, ProtocolVariant
from evm_multicall.utils.retry import RetryConfig

from ..conftest import SPENDER, TOKEN

ENDPOINT = "https://rpc.example.org"

CALL_DATA = encode_aggregate_call(
    [AggregateRequest(TOKEN, b"\x95\xd8\x9b\x41")], ProtocolVariant.STRICT
)
STRICT_ANSWER = encode(["uint256", "bytes[]"], [321, [encode(["string"], ["TKN"])]])


def make_w3(**call_kwargs) -> MagicMock:
    w3 = MagicMock()
    w3.eth.call = AsyncMock(**call_kwargs)
    return w3


def revert_data(reason: str) -> str:
    return ERROR_STRING_SELECTOR + encode(["string"], [reason]).hex()


# =============================================================================
# Construction Tests
# =============================================================================


class TestConstruction:
    """Tests for adapter setup."""

    def test_chain_id(self) -> None:
        adapter = Web3NetworkAdapter(make_w3(), 137)
        assert adapter.chain_id == 137

    def test_w3_required(self) -> None:
        with pytest.raises(ConfigurationError):
            Web3NetworkAdapter(None, 1)  # type: ignore[arg-type]

    def test_chain_id_required(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            Web3NetworkAdapter(make_w3(), 0)
        assert exc_info.value.field == "chain_id"

    def test_aggregator_resolution(self) -> None:
        adapter = Web3NetworkAdapter(make_w3(), 1)

        assert adapter.resolve_aggregator_address() == MULTICALL3_ADDRESS
        assert adapter.resolve_aggregator_address(SPENDER) == SPENDER


# =============================================================================
# Dispatch Tests
# =============================================================================


class TestDispatch:
    """Tests for eth_call dispatch and error mapping."""

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        w3 = make_w3(return_value=STRICT_ANSWER)
        adapter = Web3NetworkAdapter(w3, 1)

        result = await adapter.dispatch(
            MULTICALL3_ADDRESS, CALL_DATA, ProtocolVariant.STRICT, 19_000_000, expected_count=1
        )

        assert result.block_number == 321
        assert result.results == (AggregateResult(True, encode(["string"], ["TKN"])),)
        w3.eth.call.assert_awaited_once_with(
            {"to": MULTICALL3_ADDRESS, "data": "0x" + CALL_DATA.hex()},
            block_identifier=19_000_000,
        )

    @pytest.mark.asyncio
    async def test_default_block_tag(self) -> None:
        w3 = make_w3(return_value=STRICT_ANSWER)

        await Web3NetworkAdapter(w3, 1).dispatch(
            MULTICALL3_ADDRESS, CALL_DATA, ProtocolVariant.STRICT
        )

        assert w3.eth.call.await_args.kwargs["block_identifier"] == "latest"

    @pytest.mark.asyncio
    async def test_revert_reason_from_message(self) -> None:
        w3 = make_w3(side_effect=ContractLogicError("execution reverted: Multicall3: call failed"))

        with pytest.raises(ContractRevertError) as exc_info:
            await Web3NetworkAdapter(w3, 1).dispatch(
                MULTICALL3_ADDRESS, CALL_DATA, ProtocolVariant.STRICT
            )

        assert exc_info.value.reason == "Multicall3: call failed"
        assert exc_info.value.details["aggregator"] == MULTICALL3_ADDRESS

    @pytest.mark.asyncio
    async def test_revert_reason_from_data(self) -> None:
        error = ContractLogicError("execution reverted", data=revert_data("paused"))
        w3 = make_w3(side_effect=error)

        with pytest.raises(ContractRevertError) as exc_info:
            await Web3NetworkAdapter(w3, 1).dispatch(
                MULTICALL3_ADDRESS, CALL_DATA, ProtocolVariant.STRICT
            )

        assert exc_info.value.reason == "paused"
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            aiohttp.ClientConnectionError("connection refused"),
            asyncio.TimeoutError(),
            OSError("network unreachable"),
        ],
    )
    async def test_transport_errors(self, error: Exception) -> None:
        w3 = make_w3(side_effect=error)
        adapter = Web3NetworkAdapter(w3, 1, endpoint=ENDPOINT)

        with pytest.raises(TransportError) as exc_info:
            await adapter.dispatch(MULTICALL3_ADDRESS, CALL_DATA, ProtocolVariant.STRICT)

        assert exc_info.value.endpoint == ENDPOINT
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_malformed_response(self) -> None:
        w3 = make_w3(return_value=b"\x00")

        with pytest.raises(TransportError, match="Malformed"):
            await Web3NetworkAdapter(w3, 1).dispatch(
                MULTICALL3_ADDRESS, CALL_DATA, ProtocolVariant.STRICT
            )

    @pytest.mark.asyncio
    async def test_result_count_checked(self) -> None:
        w3 = make_w3(return_value=STRICT_ANSWER)

        with pytest.raises(TransportError):
            await Web3NetworkAdapter(w3, 1).dispatch(
                MULTICALL3_ADDRESS, CALL_DATA, ProtocolVariant.STRICT, expected_count=2
            )


# =============================================================================
# Retry Tests
# =============================================================================


class TestRetry:
    """Tests for opt-in retry of transport failures."""

    @pytest.mark.asyncio
    async def test_retries_transport_failure(self) -> None:
        w3 = make_w3(side_effect=[aiohttp.ClientConnectionError("reset"), STRICT_ANSWER])
        adapter = Web3NetworkAdapter(
            w3, 1, retry=RetryConfig(max_attempts=3, base_delay_ms=0, jitter=False)
        )

        result = await adapter.dispatch(MULTICALL3_ADDRESS, CALL_DATA, ProtocolVariant.STRICT)

        assert result.block_number == 321
        assert w3.eth.call.await_count == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self) -> None:
        w3 = make_w3(side_effect=aiohttp.ClientConnectionError("down"))
        adapter = Web3NetworkAdapter(
            w3, 1, retry=RetryConfig(max_attempts=2, base_delay_ms=0, jitter=False)
        )

        with pytest.raises(TransportError):
            await adapter.dispatch(MULTICALL3_ADDRESS, CALL_DATA, ProtocolVariant.STRICT)

        assert w3.eth.call.await_count == 2

    @pytest.mark.asyncio
    async def test_retry_log_names_eth_call(self, caplog: pytest.LogCaptureFixture) -> None:
        w3 = make_w3(side_effect=[aiohttp.ClientConnectionError("reset"), STRICT_ANSWER])
        adapter = Web3NetworkAdapter(w3, 1, retry=RetryConfig(base_delay_ms=0, jitter=False))

        with caplog.at_level("WARNING", logger="evm_multicall"):
            await adapter.dispatch(MULTICALL3_ADDRESS, CALL_DATA, ProtocolVariant.STRICT)

        retries = [r for r in caplog.records if r.name == "evm_multicall.utils.retry"]
        assert [r.operation for r in retries] == ["eth_call"]

    @pytest.mark.asyncio
    async def test_revert_is_not_retried(self) -> None:
        w3 = make_w3(side_effect=ContractLogicError("execution reverted"))
        adapter = Web3NetworkAdapter(w3, 1, retry=RetryConfig(base_delay_ms=0))

        with pytest.raises(ContractRevertError):
            await adapter.dispatch(MULTICALL3_ADDRESS, CALL_DATA, ProtocolVariant.STRICT)

        assert w3.eth.call.await_count == 1

    @pytest.mark.asyncio
    async def test_no_retry_by_default(self) -> None:
        w3 = make_w3(side_effect=aiohttp.ClientConnectionError("down"))

        with pytest.raises(TransportError):
            await Web3NetworkAdapter(w3, 1).dispatch(
                MULTICALL3_ADDRESS, CALL_DATA, ProtocolVariant.STRICT
            )

        assert w3.eth.call.await_count == 1
