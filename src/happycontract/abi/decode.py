"""
Output Decoder - Rebuild typed results from loose call return values.

Walks the ABI output list alongside the raw positional values a client
hands back: integers are coerced per declared width, arrays are mapped
element-wise and tuples are rebuilt recursively, either as a dict keyed
by component name or as a plain list.

Pure functions only; no I/O.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..errors import DecodeMismatchError
from ..utils import parse_int
from .models import ARRAY_SUFFIX, TypedParam, element_type

WIDE_INTEGER_TYPES = frozenset({"int256", "uint256"})
NARROW_INTEGER_TYPES = frozenset({"uint8", "uint16", "uint32", "int8", "int16", "int32"})


def to_big_int(value: Any) -> int:
    """Convert an ``int256``/``uint256`` value without precision loss."""
    return _parse_int(value)


def to_number(value: Any) -> int:
    """Convert a value declared with a width of 32 bits or less."""
    return _parse_int(value)


def _parse_int(value: Any) -> int:
    try:
        return parse_int(value)
    except ValueError as exc:
        raise DecodeMismatchError(f"Not an integer: {value!r}") from exc


def _is_positional(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def decode_item(base_type: str, param: TypedParam, item: Any) -> Any:
    if ARRAY_SUFFIX.search(base_type):
        if not _is_positional(item):
            raise DecodeMismatchError(
                f"Output {param.name or param.type} expects a sequence, got {type(item).__name__}"
            )
        inner = element_type(base_type)
        return [decode_item(inner, param, e) for e in item]
    if base_type == "tuple":
        values = decode_outputs(item, param.components, nested=True)
        return shape_tuple(values, param.components)
    if base_type in WIDE_INTEGER_TYPES:
        return to_big_int(item)
    if base_type in NARROW_INTEGER_TYPES:
        return to_number(item)
    return item


def _already_wrapped(raw: Any, only: TypedParam, nested: bool) -> bool:
    # A composite value is itself positional, so it is always wrapped at the
    # top level. Inside a tuple the raw value is the component list.
    if not _is_positional(raw):
        return False
    if nested:
        return True
    return not (only.is_array or only.is_tuple) and len(raw) == 1


def decode_outputs(raw: Any, outputs: Sequence[TypedParam], *, nested: bool = False) -> Any:
    """
    Decode ``raw`` positionally against ``outputs``.

    Args:
        raw: Loose value(s) returned by the client
        outputs: Declared output (or tuple component) descriptors
        nested: True when ``raw`` is the component sequence of a tuple

    Returns:
        ``raw`` unchanged when ``outputs`` is empty, otherwise a list
        with one decoded value per output.

    Raises:
        DecodeMismatchError: If ``raw`` does not line up with ``outputs``
    """
    if not outputs:
        return raw

    if len(outputs) == 1 and not _already_wrapped(raw, outputs[0], nested):
        raw = [raw]

    if not _is_positional(raw):
        raise DecodeMismatchError(
            f"Expected {len(outputs)} positional values, got {type(raw).__name__}"
        )
    if len(raw) < len(outputs):
        raise DecodeMismatchError(
            f"Expected {len(outputs)} positional values, got {len(raw)}"
        )

    return [decode_item(out.type, out, item) for item, out in zip(raw, outputs)]


def shape_tuple(values: list[Any], outputs: Sequence[TypedParam]) -> Any:
    """Return a name-keyed dict when there are several entries, all named and distinct."""
    names = [out.name for out in outputs]
    if len(values) > 1 and all(names) and len(set(names)) == len(names):
        return dict(zip(names, values))
    return list(values)


def decode_result(raw: Any, outputs: Sequence[TypedParam]) -> Any:
    """
    Decode the return value of a call.

    No outputs gives ``None``, a single output gives the bare value and
    several outputs are shaped like a tuple.
    """
    if not outputs:
        return None
    values = decode_outputs(raw, outputs)
    if len(values) == 1:
        return values[0]
    return shape_tuple(values, outputs)


__all__ = [
    "decode_item",
    "decode_outputs",
    "decode_result",
    "shape_tuple",
    "to_big_int",
    "to_number",
]
