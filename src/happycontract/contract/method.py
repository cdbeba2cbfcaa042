from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterator, Mapping, Optional

from ..abi.decode import decode_result
from ..abi.models import MethodDescriptor
from ..rpc.contract import BoundMethod, SendCallback, TransactionHandle
from . import dispatch
from .dispatch import Options, OptionsLike

if TYPE_CHECKING:
    from .wrapper import ContractWrapper


class MethodFacade:
    """
    A contract method bound to its arguments.

    Exposes ``call``, ``post``, ``estimate_gas`` and ``encode_abi``; results
    of ``call`` are decoded with the method's declared outputs.
    """

    def __init__(self, wrapper: "ContractWrapper", descriptor: MethodDescriptor, method: BoundMethod) -> None:
        self.wrapper = wrapper
        self.descriptor = descriptor
        self.method = method

    def __repr__(self) -> str:
        return f"MethodFacade({self.wrapper.schema.contract_name}.{self.descriptor.name}{self.method.args!r})"

    async def call(self, opts: OptionsLike = None) -> Any:
        fields = Options.coerce(opts).fields()
        fields = await dispatch.resolve_sender(self.wrapper.client, fields)
        raw = await self.method.call(fields)
        return decode_result(raw, self.descriptor.outputs)

    async def post(self, opts: OptionsLike = None, callback: Optional[SendCallback] = None) -> TransactionHandle:
        return await dispatch.post(self.method, self.wrapper.client, self.wrapper.queue, opts, callback)

    async def estimate_gas(self, opts: OptionsLike = None) -> int:
        return await self.method.estimate_gas(Options.coerce(opts).fields())

    def encode_abi(self) -> str:
        return self.method.encode_abi()


class MethodTable(Mapping[str, Callable[..., MethodFacade]]):
    """
    Method name -> callable building a MethodFacade.

    Supports both ``table["balanceOf"](addr)`` and ``table.balanceOf(addr)``.
    """

    def __init__(self, wrapper: "ContractWrapper") -> None:
        self._wrapper = wrapper
        self._entries: dict[str, Callable[..., MethodFacade]] = {}
        factories = wrapper.contract.methods
        for name, factory in factories.items():
            self._entries[name] = self._entry(name, factory)

    def _entry(self, name: str, factory: Callable[..., BoundMethod]) -> Callable[..., MethodFacade]:
        wrapper = self._wrapper

        def invoke(*args: Any) -> MethodFacade:
            return MethodFacade(wrapper, wrapper.descriptor(name), factory(*args))

        invoke.__name__ = name
        return invoke

    def __getitem__(self, name: str) -> Callable[..., MethodFacade]:
        return self._entries[name]

    def __getattr__(self, name: str) -> Callable[..., MethodFacade]:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._entries[name]
        except KeyError:
            raise AttributeError(
                f"{self._wrapper.schema.contract_name} has no method {name!r}"
            ) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
