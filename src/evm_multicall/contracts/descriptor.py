"""
Call descriptors: inert descriptions of one intended contract call.

Building a descriptor validates that the method (and overload) resolves
on the binding but never touches the network. Descriptors are immutable
and may be reused across any number of batches.

Example:
    >>> desc = build_call(token, "balanceOf", ["0x" + "11" * 20])
    >>> desc.signature
    'balanceOf(address)'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Sequence, Tuple

from evm_multicall.types import AggregateRequest, OriginContext

if TYPE_CHECKING:
    from evm_multicall.contracts.binding import ContractBinding

__all__ = ["CallDescriptor", "build_call"]


@dataclass(frozen=True)
class CallDescriptor:
    """
    One intended call: binding + logical method + ordered arguments.

    Attributes:
        binding: ContractBinding the call is addressed to
        method: Logical method name
        args: Ordered call arguments
        variant: Overload selector supplied by the caller, if any
        signature: Wire signature resolved when the descriptor was built
    """

    binding: "ContractBinding"
    method: str
    args: Tuple[Any, ...] = ()
    variant: Optional[str] = None
    signature: str = ""

    @property
    def target(self) -> str:
        return self.binding.address

    def encode(self) -> bytes:
        """Encode call data for this descriptor."""
        return self.binding.encode(self.method, self.args, variant=self.signature or self.variant)

    def decode(self, data: bytes) -> Any:
        """Decode return data produced by this call."""
        return self.binding.decode(
            self.method, data, variant=self.signature or self.variant, args=self.args
        )

    def to_request(self) -> AggregateRequest:
        return AggregateRequest(target=self.target, call_data=self.encode())

    def origin(self) -> OriginContext:
        return OriginContext(
            contract=self.target,
            method=self.method,
            signature=self.signature,
            args=self.args,
        )


def build_call(
    binding: "ContractBinding",
    method: str,
    args: Sequence[Any] = (),
    *,
    variant: Optional[str] = None,
) -> CallDescriptor:
    """Build a CallDescriptor for ``method`` on ``binding``.

    Args:
        binding: Contract the call is addressed to
        method: Logical method name
        args: Call arguments, in ABI order
        variant: Overload selector, e.g. ``"(address,address,uint256,bytes)"``

    Returns:
        Immutable CallDescriptor

    Raises:
        UnknownMethodError: If the method or overload does not resolve
        AmbiguousOverloadError: If several overloads accept ``args``
    """
    args = tuple(args)
    signature = binding.resolve(method, args, variant)
    return CallDescriptor(
        binding=binding,
        method=method,
        args=args,
        variant=variant,
        signature=signature,
    )
