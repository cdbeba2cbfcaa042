from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import jsonschema
from jsonschema import FormatChecker

from ..errors import SchemaError

SCHEMA_ROOT = Path(__file__).resolve().parent / "schemas"
CONTRACT_SCHEMA = "contract.schema.json"

# Trailing dimension of a dynamic (`[]`) or fixed-size (`[N]`) array type.
ARRAY_SUFFIX = re.compile(r"\[\d*\]$")


def element_type(type_name: str) -> str:
    """Type with one trailing array dimension removed."""
    return ARRAY_SUFFIX.sub("", type_name, count=1)


@dataclass(frozen=True)
class TypedParam:
    name: str
    type: str
    components: tuple["TypedParam", ...] = ()
    indexed: bool = False

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "TypedParam":
        return cls(
            name=payload.get("name") or "",
            type=payload["type"],
            components=tuple(cls.from_dict(c) for c in payload.get("components") or []),
            indexed=bool(payload.get("indexed", False)),
        )

    @property
    def is_array(self) -> bool:
        return ARRAY_SUFFIX.search(self.type) is not None

    @property
    def base_type(self) -> str:
        """Type with one trailing ``[]`` or ``[N]`` removed."""
        return element_type(self.type)

    @property
    def is_tuple(self) -> bool:
        return self.type.startswith("tuple")


@dataclass(frozen=True)
class MethodDescriptor:
    name: str
    type: str = "function"
    inputs: tuple[TypedParam, ...] = ()
    outputs: tuple[TypedParam, ...] = ()
    state_mutability: Optional[str] = None
    anonymous: bool = False

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "MethodDescriptor":
        return cls(
            name=payload.get("name") or "",
            type=payload.get("type") or "function",
            inputs=tuple(TypedParam.from_dict(p) for p in payload.get("inputs") or []),
            outputs=tuple(TypedParam.from_dict(p) for p in payload.get("outputs") or []),
            state_mutability=payload.get("stateMutability"),
            anonymous=bool(payload.get("anonymous", False)),
        )

    @property
    def is_function(self) -> bool:
        return self.type == "function"

    @property
    def is_event(self) -> bool:
        return self.type == "event"


@dataclass(frozen=True)
class ContractSchema:
    """
    Contract name, deployed address and ABI of one contract.

    Built through ``from_dict`` so the JSON shape is checked once at the
    boundary; everything downstream works with typed records.
    """
    contract_name: str
    contract_address: str
    abi: tuple[MethodDescriptor, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, payload: Any) -> "ContractSchema":
        validate_contract_payload(payload)
        return cls(
            contract_name=payload["contractName"],
            contract_address=payload["contractAddress"],
            abi=tuple(MethodDescriptor.from_dict(item) for item in payload["abi"]),
        )

    def functions(self) -> list[MethodDescriptor]:
        return [item for item in self.abi if item.is_function]

    def events(self) -> list[MethodDescriptor]:
        return [item for item in self.abi if item.is_event]


@lru_cache(maxsize=4)
def _validator_for(schema_filename: str) -> jsonschema.Validator:
    path = SCHEMA_ROOT / schema_filename
    with path.open("r", encoding="utf-8") as f:
        schema = json.load(f)
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema, format_checker=FormatChecker())


def validate_contract_payload(payload: Any) -> None:
    """
    Check a ``{contractName, abi, contractAddress}`` payload.

    Raises:
        SchemaError: If the payload is missing or does not match
            ``contract.schema.json``. ``errors`` lists every violation.
    """
    if payload is None:
        raise SchemaError("Contract schema is missing.")
    validator = _validator_for(CONTRACT_SCHEMA)
    errors = sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path])
    if errors:
        formatted = [_format_error(err) for err in errors]
        raise SchemaError(
            f"Contract schema is malformed: {formatted[0]}",
            errors=formatted,
        )


def _format_error(error: jsonschema.ValidationError) -> str:
    location = "/".join(str(part) for part in error.path) or "<root>"
    return f"{location}: {error.message}"


__all__ = [
    "ContractSchema",
    "MethodDescriptor",
    "TypedParam",
    "element_type",
    "validate_contract_payload",
]
