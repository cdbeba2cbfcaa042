"""
ABI codec helpers on top of eth-abi.

Canonical type strings (tuples expanded to ``(a,b)`` form), function
selectors, event topics, calldata encoding and event-log decoding.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from eth_abi import decode, encode

from ..utils import hex_to_bytes, hex_to_int, keccak256, to_checksum_address
from .models import ARRAY_SUFFIX, MethodDescriptor, TypedParam, element_type


def canonical_type(param: TypedParam) -> str:
    """Convert a typed param to an eth-abi type string (tuples expanded)."""
    if not param.is_tuple:
        return param.type
    suffix = param.type[len("tuple"):]
    inner = ",".join(canonical_type(c) for c in param.components)
    return f"({inner}){suffix}"


def signature(descriptor: MethodDescriptor) -> str:
    types = ",".join(canonical_type(p) for p in descriptor.inputs)
    return f"{descriptor.name}({types})"


def function_selector(descriptor: MethodDescriptor) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST).
    return keccak256(signature(descriptor).encode("utf-8"))[:4]


def event_topic(descriptor: MethodDescriptor) -> str:
    return "0x" + keccak256(signature(descriptor).encode("utf-8")).hex()


def normalize_arg(param: TypedParam, value: Any) -> Any:
    """
    Shape a Python argument the way eth-abi expects it.

    Tuples may be passed as dicts keyed by component name; numeric
    strings are accepted for integer types.
    """
    if param.is_array:
        element = TypedParam(name="", type=param.base_type, components=param.components)
        return [normalize_arg(element, v) for v in value]
    if param.is_tuple:
        if isinstance(value, Mapping):
            value = [value[c.name] for c in param.components]
        return tuple(normalize_arg(c, v) for c, v in zip(param.components, value))
    if param.type.startswith(("int", "uint")) and isinstance(value, str):
        return hex_to_int(value) if value.lower().startswith("0x") else int(value)
    if param.type.startswith("bytes") and isinstance(value, str):
        return hex_to_bytes(value)
    return value


def encode_call(descriptor: MethodDescriptor, args: Sequence[Any]) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex encoded calldata
    """
    if len(args) != len(descriptor.inputs):
        raise ValueError(
            f"{descriptor.name} expects {len(descriptor.inputs)} arguments, got {len(args)}"
        )
    input_types = [canonical_type(p) for p in descriptor.inputs]
    values = [normalize_arg(p, a) for p, a in zip(descriptor.inputs, args)]
    encoded_args = encode(input_types, values) if values else b""
    return "0x" + function_selector(descriptor).hex() + encoded_args.hex()


def decode_return(descriptor: MethodDescriptor, data: str) -> Any:
    """
    ABI-decode return data into loose positional values.

    Returns:
        ``None`` for void functions, the bare value for a single output,
        otherwise a list.
    """
    output_types = [canonical_type(p) for p in descriptor.outputs]
    if not output_types:
        return None
    decoded = [
        with_checksums(p.type, p, v)
        for p, v in zip(descriptor.outputs, decode(output_types, hex_to_bytes(data)))
    ]
    if len(decoded) == 1:
        return decoded[0]
    return decoded


def decode_log(descriptor: MethodDescriptor, log: Mapping[str, Any]) -> dict[str, Any]:
    """
    Decode one raw log entry into a web3-style event record.

    Indexed dynamic types (strings, bytes, arrays, tuples) are stored as
    their topic hash, since the value itself is not recoverable.
    """
    topics = list(log.get("topics") or [])
    if not descriptor.anonymous:
        topics = topics[1:]

    indexed = [p for p in descriptor.inputs if p.indexed]
    plain = [p for p in descriptor.inputs if not p.indexed]
    data = decode([canonical_type(p) for p in plain], hex_to_bytes(log.get("data") or "0x"))
    plain_values = [with_checksums(p.type, p, v) for p, v in zip(plain, data)]

    indexed_values = []
    for param, topic in zip(indexed, topics):
        if _is_dynamic(param):
            indexed_values.append(topic)
        else:
            value = decode([canonical_type(param)], hex_to_bytes(topic))[0]
            indexed_values.append(with_checksums(param.type, param, value))

    by_param = dict(zip((id(p) for p in indexed), indexed_values))
    by_param.update(zip((id(p) for p in plain), plain_values))

    return_values: dict[str, Any] = {}
    for i, param in enumerate(descriptor.inputs):
        value = by_param.get(id(param))
        return_values[str(i)] = value
        if param.name:
            return_values[param.name] = value

    return {
        "event": descriptor.name,
        "signature": event_topic(descriptor),
        "address": to_checksum_address(log["address"]) if log.get("address") else None,
        "blockNumber": _quantity(log.get("blockNumber")),
        "blockHash": log.get("blockHash"),
        "transactionHash": log.get("transactionHash"),
        "logIndex": _quantity(log.get("logIndex")),
        "returnValues": return_values,
        "raw": {"data": log.get("data"), "topics": list(log.get("topics") or [])},
    }


def with_checksums(type_name: str, param: TypedParam, value: Any) -> Any:
    """Checksum every address inside a value decoded by eth-abi."""
    if ARRAY_SUFFIX.search(type_name):
        inner = element_type(type_name)
        return tuple(with_checksums(inner, param, v) for v in value)
    if type_name == "tuple":
        return tuple(with_checksums(c.type, c, v) for c, v in zip(param.components, value))
    if type_name == "address" and isinstance(value, str):
        return to_checksum_address(value)
    return value


def _is_dynamic(param: TypedParam) -> bool:
    return param.is_array or param.is_tuple or param.type in ("string", "bytes")


def _quantity(value: Any) -> Any:
    if isinstance(value, str) and value.startswith("0x"):
        return hex_to_int(value)
    return value


__all__ = [
    "canonical_type",
    "decode_log",
    "decode_return",
    "encode_call",
    "event_topic",
    "function_selector",
    "normalize_arg",
    "signature",
    "with_checksums",
]
