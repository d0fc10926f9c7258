"""
Exceptions raised while binding, encoding, dispatching and decoding calls.

Local errors (configuration, method resolution, encoding) are raised
before anything reaches the network. TransportError and
ContractRevertError come back from the aggregator dispatch.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from evm_multicall.errors.base import MulticallError


class ConfigurationError(MulticallError):
    """
    Raised when a binding, adapter or provider is missing required setup.

    Example:
        >>> raise ConfigurationError("abi is required")
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field

        super().__init__(
            message,
            code="CONFIGURATION_ERROR",
            details=details,
        )
        self.field = field


class UnsupportedNetworkError(ConfigurationError):
    """
    Raised when no aggregator address is known for a chain.

    Example:
        >>> raise UnsupportedNetworkError(31337)
    """

    def __init__(
        self,
        chain_id: Optional[int],
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["chain_id"] = chain_id

        super().__init__(
            f"Network - {chain_id} doesn't have a multicall contract address defined. "
            "Please check your network or deploy your own contract on it.",
            field="chain_id",
            details=details,
        )
        self.code = "UNSUPPORTED_NETWORK"
        self.chain_id = chain_id


class EncodingError(ConfigurationError):
    """
    Raised when call arguments cannot be ABI-encoded for a method.

    Example:
        >>> raise EncodingError("balanceOf(address)", "not an address")
    """

    def __init__(
        self,
        signature: str,
        reason: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["signature"] = signature
        details["reason"] = reason

        super().__init__(
            f"Could not encode arguments for {signature}: {reason}",
            details=details,
        )
        self.code = "ENCODING_ERROR"
        self.signature = signature
        self.reason = reason


class DecodingError(MulticallError):
    """
    Raised when return bytes do not match a method's declared outputs.

    Example:
        >>> raise DecodingError("ownerOf(uint256)", "insufficient data")
    """

    def __init__(
        self,
        signature: str,
        reason: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["signature"] = signature
        details["reason"] = reason

        super().__init__(
            f"Could not decode return data of {signature}: {reason}",
            code="DECODING_ERROR",
            details=details,
        )
        self.signature = signature
        self.reason = reason


class UnknownMethodError(MulticallError):
    """
    Raised when a logical method name has no mapping on a binding.

    Example:
        >>> raise UnknownMethodError("mint", contract="0x...")
    """

    def __init__(
        self,
        method: str,
        *,
        contract: Optional[str] = None,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["method"] = method
        if contract:
            details["contract"] = contract
        if reason:
            details["reason"] = reason

        message = f"Method {method} does not exist on the contract"
        if contract:
            message += f" {contract}"
        if reason:
            message += f" ({reason})"

        super().__init__(
            message,
            code="UNKNOWN_METHOD",
            details=details,
        )
        self.method = method
        self.contract = contract


class AmbiguousOverloadError(MulticallError):
    """
    Raised when several overloads of a method accept the given arguments.

    Pass ``variant`` (e.g. ``"(address,address,uint256,bytes)"``) to pick one.

    Example:
        >>> raise AmbiguousOverloadError("safeTransferFrom", ["(address,address,uint256)"])
    """

    def __init__(
        self,
        method: str,
        candidates: Sequence[str],
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["method"] = method
        details["candidates"] = list(candidates)

        super().__init__(
            f"Ambiguous overload for {method}: {', '.join(candidates)}; "
            "pass variant= to select one",
            code="AMBIGUOUS_OVERLOAD",
            details=details,
        )
        self.method = method
        self.candidates = list(candidates)


class TransportError(MulticallError):
    """
    Raised when the aggregator call could not be delivered or answered.

    Distinct from ContractRevertError: the node never produced a result.

    Example:
        >>> raise TransportError("Connection refused", endpoint="https://rpc...")
    """

    def __init__(
        self,
        message: str,
        *,
        endpoint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if endpoint:
            details["endpoint"] = endpoint

        super().__init__(
            message,
            code="TRANSPORT_ERROR",
            details=details,
        )
        self.endpoint = endpoint


class ContractRevertError(MulticallError):
    """
    Raised when a strict aggregate call reverts.

    ``index`` is the position of the failing call within the dispatched
    chunk when the adapter can tell; the engine maps it back to ``key``,
    ``target`` and ``call_data``. Otherwise ``keys`` lists every key of the
    reverted chunk.

    Example:
        >>> raise ContractRevertError("Multicall3: call failed")
    """

    def __init__(
        self,
        reason: Optional[str] = None,
        *,
        index: Optional[int] = None,
        target: Optional[str] = None,
        call_data: Optional[bytes] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if reason:
            details["reason"] = reason
        if index is not None:
            details["index"] = index
        if target:
            details["target"] = target

        message = "Aggregate call reverted"
        if reason:
            message += f": {reason}"

        super().__init__(
            message,
            code="CONTRACT_REVERT",
            details=details,
        )
        self.reason = reason
        self.index = index
        self.target = target
        self.call_data = call_data
        self.keys: List[Any] = []
