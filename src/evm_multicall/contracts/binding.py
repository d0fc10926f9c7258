"""
Contract binding: address + ABI + logical method names.

A ContractBinding is the only place that knows how a logical operation
("balanceOf") maps to a concrete wire function ("getBalanceOf(address)")
and how to encode its arguments and decode its return data. Bindings are
immutable after construction and safe to share between concurrent
batches.

Example:
    >>> token = ContractBinding(
    ...     "0x6B175474E89094C44Da98b954EedeAC495271d0F",
    ...     abi=load_abi("erc20.json"),
    ... )
    >>> token.resolve("balanceOf")
    'balanceOf(address)'
    >>> data = token.encode("balanceOf", ["0x" + "11" * 20])
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import DecodingError as AbiDecodingError
from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_utils import function_signature_to_4byte_selector, to_checksum_address
from eth_utils.abi import collapse_if_tuple

from evm_multicall.constants import ABI_SELECTOR_LENGTH
from evm_multicall.contracts.descriptor import CallDescriptor, build_call
from evm_multicall.errors import (
    AmbiguousOverloadError,
    ConfigurationError,
    DecodingError,
    EncodingError,
    UnknownMethodError,
)
from evm_multicall.utils.validation import is_byte_like, to_bytes, validate_address

AbiDefinition = Union[str, Sequence[Mapping[str, Any]]]

__all__ = ["AbiFunction", "ContractBinding", "split_signature", "parse_types"]


# ------------------------------------------------------------------
# Signature helpers
# ------------------------------------------------------------------

def parse_types(inner: str) -> Tuple[str, ...]:
    """Split a comma-separated ABI type list, respecting tuple nesting.

    >>> parse_types("address,(uint256,bytes)[],bool")
    ('address', '(uint256,bytes)[]', 'bool')
    """
    inner = inner.replace(" ", "")
    if not inner:
        return ()
    types: List[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(inner):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            types.append(inner[start:i])
            start = i + 1
    types.append(inner[start:])
    return tuple(types)


def split_signature(signature: str) -> Tuple[str, Optional[Tuple[str, ...]]]:
    """Split ``name(types)`` into ``(name, types)``.

    A bare name returns ``(name, None)``; a bare type list such as
    ``"(address,uint256)"`` returns ``("", types)``.
    """
    signature = signature.strip()
    if "(" not in signature:
        return signature, None
    if not signature.endswith(")"):
        raise ValueError(f"malformed signature: {signature!r}")
    open_at = signature.index("(")
    return signature[:open_at], parse_types(signature[open_at + 1 : -1])


def _is_array_type(abi_type: str) -> bool:
    return abi_type.endswith("]")


def _is_bytes_type(abi_type: str) -> bool:
    return abi_type.startswith("bytes") and not _is_array_type(abi_type)


def _normalize(abi_type: str, value: Any) -> Any:
    """Checksum decoded addresses, recursing through arrays and tuples."""
    if _is_array_type(abi_type):
        element_type = abi_type[: abi_type.rindex("[")]
        return tuple(_normalize(element_type, v) for v in value)
    if abi_type.startswith("("):
        component_types = parse_types(abi_type[1:-1])
        return tuple(_normalize(t, v) for t, v in zip(component_types, value))
    if abi_type == "address":
        return to_checksum_address(value)
    return value


def _prepare_arg(abi_type: str, value: Any) -> Any:
    """Coerce hex strings and memoryviews for bytes parameters."""
    if _is_bytes_type(abi_type) and is_byte_like(value):
        return to_bytes(value)
    return value


@dataclass(frozen=True)
class AbiFunction:
    """One function entry of an ABI, reduced to what encoding needs."""

    name: str
    input_types: Tuple[str, ...]
    output_types: Tuple[str, ...]
    state_mutability: str = "nonpayable"

    @classmethod
    def from_abi(cls, entry: Mapping[str, Any]) -> "AbiFunction":
        return cls(
            name=entry["name"],
            input_types=tuple(collapse_if_tuple(i) for i in entry.get("inputs", [])),
            output_types=tuple(collapse_if_tuple(o) for o in entry.get("outputs", [])),
            state_mutability=entry.get("stateMutability", "nonpayable"),
        )

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.signature)

    def shape_matches(self, args: Sequence[Any]) -> bool:
        """The documented overload shape check.

        ``bytes``/``bytesN`` parameters must receive a byte-like argument;
        every other parameter must not receive a raw ``bytes`` object.
        Array parameters (``T[]``, ``T[N]``) must receive a list or tuple,
        and scalar parameters must not.
        Hex strings are byte-like but also acceptable for non-bytes
        parameters such as addresses.
        """
        for abi_type, arg in zip(self.input_types, args):
            if _is_array_type(abi_type):
                if not isinstance(arg, (list, tuple)):
                    return False
            elif isinstance(arg, (list, tuple)) and not abi_type.startswith("("):
                return False
            elif _is_bytes_type(abi_type):
                if not is_byte_like(arg):
                    return False
            elif isinstance(arg, (bytes, bytearray, memoryview)):
                return False
        return True

    def encode_input(self, args: Sequence[Any]) -> bytes:
        try:
            prepared = [_prepare_arg(t, a) for t, a in zip(self.input_types, args)]
            return self.selector + abi_encode(list(self.input_types), prepared)
        except (AbiEncodingError, TypeError, ValueError, OverflowError) as e:
            raise EncodingError(self.signature, str(e)) from e

    def decode_input(self, data: bytes) -> Tuple[Any, ...]:
        data = bytes(data)
        if data[:ABI_SELECTOR_LENGTH] != self.selector:
            raise DecodingError(self.signature, "selector mismatch")
        try:
            values = abi_decode(list(self.input_types), data[ABI_SELECTOR_LENGTH:])
        except (AbiDecodingError, TypeError, ValueError, OverflowError) as e:
            raise DecodingError(self.signature, str(e)) from e
        return tuple(_normalize(t, v) for t, v in zip(self.input_types, values))

    def decode_output(self, data: bytes) -> Any:
        if not self.output_types:
            return None
        try:
            values = abi_decode(list(self.output_types), bytes(data))
        except (AbiDecodingError, TypeError, ValueError, OverflowError) as e:
            raise DecodingError(self.signature, str(e)) from e
        normalized = tuple(_normalize(t, v) for t, v in zip(self.output_types, values))
        return normalized[0] if len(normalized) == 1 else normalized

    def encode_output(self, value: Any) -> bytes:
        values = (value,) if len(self.output_types) == 1 else tuple(value or ())
        try:
            prepared = [_prepare_arg(t, v) for t, v in zip(self.output_types, values)]
            return abi_encode(list(self.output_types), prepared)
        except (AbiEncodingError, TypeError, ValueError, OverflowError) as e:
            raise EncodingError(self.signature, str(e)) from e


class ContractBinding:
    """
    Immutable association of a contract address, its ABI and method names.

    Every function in the ABI is reachable under its own name. ``methods``
    overrides or adds logical names: ``{"balanceOf": "getBalanceOf"}``
    routes the logical ``balanceOf`` to the wire function
    ``getBalanceOf``. An override may also be a full signature
    (``"safeTransferFrom(address,address,uint256)"``), which pins one
    overload.

    Args:
        address: Contract address
        abi: ABI as a list of entries or a JSON string
        methods: Optional logical name -> wire name overrides

    Raises:
        ConfigurationError: If address or ABI is missing, the ABI has no
            functions, or an override names a function the ABI lacks
    """

    def __init__(
        self,
        address: str,
        abi: AbiDefinition,
        methods: Optional[Mapping[str, str]] = None,
    ):
        self._address = validate_address(address, "address")

        if not abi:
            raise ConfigurationError("abi is required", field="abi")
        if isinstance(abi, str):
            try:
                abi = json.loads(abi)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"abi is not valid JSON: {e}", field="abi") from e
        self._abi: Tuple[Mapping[str, Any], ...] = tuple(abi)

        functions: Dict[str, List[AbiFunction]] = {}
        for entry in self._abi:
            if entry.get("type", "function") != "function" or "name" not in entry:
                continue
            fn = AbiFunction.from_abi(entry)
            functions.setdefault(fn.name, []).append(fn)
        if not functions:
            raise ConfigurationError("abi defines no functions", field="abi")
        self._functions = MappingProxyType({k: tuple(v) for k, v in functions.items()})

        method_names = {name: name for name in functions}
        for logical, wire in (methods or {}).items():
            try:
                wire_name, pinned = split_signature(wire)
            except ValueError as e:
                raise ConfigurationError(str(e), field="methods") from e
            overloads = self._functions.get(wire_name, ())
            if pinned is not None:
                overloads = tuple(fn for fn in overloads if fn.input_types == pinned)
            if not overloads:
                raise ConfigurationError(
                    f"method override {logical!r} -> {wire!r} has no function in the abi",
                    field="methods",
                )
            method_names[logical] = wire
        self._method_names = MappingProxyType(method_names)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def address(self) -> str:
        return self._address

    @property
    def abi(self) -> List[Dict[str, Any]]:
        return [dict(entry) for entry in self._abi]

    @property
    def method_names(self) -> Mapping[str, str]:
        """Logical name -> wire name (or pinned signature)."""
        return self._method_names

    @property
    def functions(self) -> Tuple[str, ...]:
        """Logical names callable on this binding."""
        return tuple(self._method_names)

    def __repr__(self) -> str:
        return f"ContractBinding(address={self._address!r}, functions={len(self._functions)})"

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def function(
        self,
        method: str,
        args: Optional[Sequence[Any]] = None,
        variant: Optional[str] = None,
    ) -> AbiFunction:
        """Select the ABI function a logical call resolves to.

        Overloads are narrowed in a fixed order: explicit ``variant`` (a
        type list such as ``"(address,address,uint256,bytes)"`` or a full
        signature), then argument count, then the byte-like shape check.

        Raises:
            UnknownMethodError: If nothing matches
            AmbiguousOverloadError: If more than one overload survives
        """
        wire = self._method_names.get(method)
        if wire is None:
            raise UnknownMethodError(method, contract=self._address)

        wire_name, pinned = split_signature(wire)
        candidates: Tuple[AbiFunction, ...] = self._functions.get(wire_name, ())
        if pinned is not None:
            candidates = tuple(fn for fn in candidates if fn.input_types == pinned)

        if variant is not None:
            try:
                variant_name, variant_types = split_signature(variant)
            except ValueError as e:
                raise UnknownMethodError(method, contract=self._address, reason=str(e)) from e
            if variant_types is None or (variant_name and variant_name != wire_name):
                raise UnknownMethodError(
                    method,
                    contract=self._address,
                    reason=f"variant {variant!r} does not name an overload of {wire_name}",
                )
            candidates = tuple(fn for fn in candidates if fn.input_types == variant_types)
            if not candidates:
                raise UnknownMethodError(
                    method, contract=self._address, reason=f"no overload matches {variant!r}"
                )

        if args is not None:
            candidates = tuple(fn for fn in candidates if len(fn.input_types) == len(args))
            if not candidates:
                raise UnknownMethodError(
                    method,
                    contract=self._address,
                    reason=f"no overload of {wire_name} takes {len(args)} arguments",
                )

        if len(candidates) == 1:
            return candidates[0]
        if args is None:
            raise AmbiguousOverloadError(method, [fn.signature for fn in candidates])

        shaped = tuple(fn for fn in candidates if fn.shape_matches(args))
        if len(shaped) == 1:
            return shaped[0]
        raise AmbiguousOverloadError(method, [fn.signature for fn in candidates])

    def resolve(
        self,
        method: str,
        args: Optional[Sequence[Any]] = None,
        variant: Optional[str] = None,
    ) -> str:
        """Return the wire signature a logical method resolves to."""
        return self.function(method, args, variant).signature

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------
    def encode(
        self,
        method: str,
        args: Sequence[Any] = (),
        variant: Optional[str] = None,
    ) -> bytes:
        """Encode call data (selector + arguments) for a logical method."""
        args = tuple(args)
        return self.function(method, args, variant).encode_input(args)

    def decode(
        self,
        method: str,
        data: bytes,
        variant: Optional[str] = None,
        args: Optional[Sequence[Any]] = None,
    ) -> Any:
        """Decode return data of a logical method.

        A single output is returned bare, several outputs as a tuple, no
        outputs as None. Addresses come back checksummed.
        """
        return self.function(method, args, variant).decode_output(data)

    def encode_result(
        self,
        method: str,
        value: Any,
        variant: Optional[str] = None,
        args: Optional[Sequence[Any]] = None,
    ) -> bytes:
        """Encode a return value the way the contract would (inverse of decode)."""
        return self.function(method, args, variant).encode_output(value)

    def decode_call(self, data: bytes) -> Tuple[AbiFunction, Tuple[Any, ...]]:
        """Identify the function behind call data and decode its arguments.

        Raises:
            UnknownMethodError: If no ABI function has the data's selector
            DecodingError: If the arguments do not decode
        """
        selector = bytes(data[:ABI_SELECTOR_LENGTH])
        for overloads in self._functions.values():
            for fn in overloads:
                if fn.selector == selector:
                    return fn, fn.decode_input(data)
        raise UnknownMethodError(
            "0x" + selector.hex(), contract=self._address, reason="unknown selector"
        )

    # ------------------------------------------------------------------
    # Descriptors
    # ------------------------------------------------------------------
    def call(self, method: str, *args: Any, variant: Optional[str] = None) -> CallDescriptor:
        """Shortcut for ``build_call(self, method, args, variant=variant)``."""
        return build_call(self, method, args, variant=variant)
