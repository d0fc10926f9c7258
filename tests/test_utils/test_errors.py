"""
Tests for the exception hierarchy.
"""

import pytest

from evm_multicall.errors import (
    AmbiguousOverloadError,
    ConfigurationError,
    ContractRevertError,
    DecodingError,
    EncodingError,
    MulticallError,
    TransportError,
    UnknownMethodError,
    UnsupportedNetworkError,
)


class TestMulticallError:
    """Tests for the base error."""

    def test_str_without_key(self) -> None:
        assert str(MulticallError("boom", code="X")) == "[X] boom"

    def test_attribute_to(self) -> None:
        error = TransportError("boom").attribute_to(("token", 1))

        assert error.key == ("token", 1)
        assert error.details["key"] == ("token", 1)
        assert str(error) == "[TRANSPORT_ERROR] boom (key: ('token', 1))"

    def test_to_dict(self) -> None:
        error = ConfigurationError("abi is required", field="abi")

        assert error.to_dict() == {
            "error": "ConfigurationError",
            "code": "CONFIGURATION_ERROR",
            "message": "abi is required",
            "key": None,
            "details": {"field": "abi"},
        }

    def test_repr(self) -> None:
        assert repr(MulticallError("boom")).startswith("MulticallError(message='boom'")


class TestHierarchy:
    """Tests for codes and parent classes."""

    @pytest.mark.parametrize(
        "error, parent, code",
        [
            (UnsupportedNetworkError(5), ConfigurationError, "UNSUPPORTED_NETWORK"),
            (EncodingError("f()", "bad"), ConfigurationError, "ENCODING_ERROR"),
            (DecodingError("f()", "bad"), MulticallError, "DECODING_ERROR"),
            (UnknownMethodError("f"), MulticallError, "UNKNOWN_METHOD"),
            (AmbiguousOverloadError("f", ["f(uint256)", "f(bytes32)"]), MulticallError, "AMBIGUOUS_OVERLOAD"),
            (TransportError("down"), MulticallError, "TRANSPORT_ERROR"),
            (ContractRevertError(), MulticallError, "CONTRACT_REVERT"),
        ],
    )
    def test_codes(self, error: MulticallError, parent: type, code: str) -> None:
        assert isinstance(error, parent)
        assert error.code == code

    def test_decoding_error_is_not_configuration(self) -> None:
        assert not isinstance(DecodingError("f()", "bad"), ConfigurationError)

    def test_revert_message(self) -> None:
        assert ContractRevertError().message == "Aggregate call reverted"
        error = ContractRevertError("paused", index=2)
        assert error.message == "Aggregate call reverted: paused"
        assert error.details == {"reason": "paused", "index": 2}
        assert error.keys == []

    def test_unknown_method_message(self) -> None:
        error = UnknownMethodError("mint", contract="0xabc", reason="unknown selector")
        assert error.message == "Method mint does not exist on the contract 0xabc (unknown selector)"
