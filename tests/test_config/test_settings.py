"""
Tests for ExecuteOptions and MulticallSettings.
"""

import pytest
from pydantic import ValidationError

from evm_multicall.config import ExecuteOptions, MulticallSettings
from evm_multicall.constants import DEFAULT_MAX_BATCH_SIZE, DEFAULT_MAX_CONCURRENCY
from evm_multicall.errors import ConfigurationError

from ..conftest import CUSTOM


# =============================================================================
# ExecuteOptions Tests
# =============================================================================


class TestExecuteOptions:
    """Tests for per-batch options."""

    def test_defaults(self) -> None:
        options = ExecuteOptions()

        assert options.require_success is True
        assert options.block_tag == "latest"
        assert options.max_batch_size is None

    def test_coerce_none(self) -> None:
        assert ExecuteOptions.coerce(None) == ExecuteOptions()

    def test_coerce_instance(self) -> None:
        options = ExecuteOptions(require_success=False)
        assert ExecuteOptions.coerce(options) is options

    def test_coerce_mapping(self) -> None:
        options = ExecuteOptions.coerce({"require_success": False, "block_tag": 12})

        assert options.require_success is False
        assert options.block_tag == 12

    def test_coerce_rejects_unknown_fields(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ExecuteOptions.coerce({"requireSuccess": False})
        assert exc_info.value.field == "options"

    def test_frozen(self) -> None:
        options = ExecuteOptions()
        with pytest.raises(ValidationError):
            options.require_success = False  # type: ignore[misc]


# =============================================================================
# MulticallSettings Tests
# =============================================================================


class TestMulticallSettings:
    """Tests for provider settings."""

    def test_defaults(self) -> None:
        settings = MulticallSettings(chain_id=1)

        assert settings.rpc_url is None
        assert settings.aggregator_address is None
        assert settings.max_batch_size == DEFAULT_MAX_BATCH_SIZE
        assert settings.max_concurrency == DEFAULT_MAX_CONCURRENCY
        assert settings.timeout == 30

    def test_chain_id_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            MulticallSettings(chain_id=0)

    def test_from_env(self) -> None:
        settings = MulticallSettings.from_env(
            {
                "MULTICALL_CHAIN_ID": "137",
                "MULTICALL_RPC_URL": "https://polygon-rpc.example",
                "MULTICALL_ADDRESS_UNUSED": "ignored",
                "MULTICALL_AGGREGATOR_ADDRESS": CUSTOM,
                "MULTICALL_MAX_BATCH_SIZE": "50",
                "MULTICALL_MAX_CONCURRENCY": "2",
                "MULTICALL_TIMEOUT": "5",
            }
        )

        assert settings.chain_id == 137
        assert settings.rpc_url == "https://polygon-rpc.example"
        assert settings.aggregator_address == CUSTOM
        assert settings.max_batch_size == 50
        assert settings.max_concurrency == 2
        assert settings.timeout == 5

    def test_from_env_empty_values_use_defaults(self) -> None:
        settings = MulticallSettings.from_env(
            {"MULTICALL_CHAIN_ID": "1", "MULTICALL_MAX_BATCH_SIZE": ""}
        )
        assert settings.max_batch_size == DEFAULT_MAX_BATCH_SIZE

    def test_from_env_missing_chain_id(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            MulticallSettings.from_env({"MULTICALL_RPC_URL": "https://rpc.example"})
        assert exc_info.value.field == "chain_id"

    def test_from_env_invalid_value(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid multicall settings"):
            MulticallSettings.from_env(
                {"MULTICALL_CHAIN_ID": "1", "MULTICALL_MAX_CONCURRENCY": "zero"}
            )

    def test_from_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MULTICALL_CHAIN_ID", "10")
        monkeypatch.setenv("MULTICALL_RPC_URL", "https://optimism.example")

        settings = MulticallSettings.from_env(dotenv=False)

        assert settings.chain_id == 10
        assert settings.rpc_url == "https://optimism.example"
