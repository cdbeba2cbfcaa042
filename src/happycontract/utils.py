from __future__ import annotations

import json
from typing import Any

from eth_hash.auto import keccak
from eth_utils import to_checksum_address as _to_checksum_address

# Integers above this lose precision in JSON consumers that parse numbers as doubles.
MAX_SAFE_INTEGER = 2**53 - 1


def keccak256(data: bytes) -> bytes:
    return keccak(data)


def to_checksum_address(address: str) -> str:
    return _to_checksum_address(address)


def hex_to_int(value: str) -> int:
    return int(value, 16)


def hex_to_bytes(value: str) -> bytes:
    return bytes.fromhex(value[2:] if value.startswith(("0x", "0X")) else value)


def parse_int(value: Any) -> int:
    """
    Parse an integer given as an int, bool, decimal string or 0x-hex string.

    Raises:
        ValueError: If the value is not an integer
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lower().startswith(("0x", "-0x")):
            return int(text, 16)
        return int(text, 10)
    raise ValueError(f"Not an integer: {value!r}")


def to_quantity(value: Any) -> str:
    """Encode an integer (or numeric string) as a JSON-RPC hex quantity."""
    return hex(parse_int(value))


def to_jsonable(value: Any) -> Any:
    """Render decoded values for JSON output (bytes as hex, big ints as strings)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value) if abs(value) > MAX_SAFE_INTEGER else value
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def dump_json(value: Any) -> str:
    return json.dumps(to_jsonable(value), indent=2)
