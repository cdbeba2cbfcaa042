"""
Schema Loader - Loads contract schemas from JSON files.

Two file shapes are supported:
- a schema file ``{contractName, abi, contractAddress}``
- a Foundry/Hardhat build artifact (``abi`` member), paired with an
  address supplied by the caller
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from ..errors import SchemaError
from .models import ContractSchema


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as exc:
            raise SchemaError(f"Invalid JSON in {path}: {exc}") from exc


def load_schema(path: Path) -> ContractSchema:
    """
    Load a contract schema file.

    Args:
        path: JSON file with ``contractName``, ``abi``, ``contractAddress``

    Returns:
        Validated ContractSchema

    Raises:
        FileNotFoundError: If the file does not exist
        SchemaError: If the content is not a valid schema
    """
    return ContractSchema.from_dict(_read_json(Path(path)))


def load_artifact(
    path: Path,
    contract_address: str,
    contract_name: Optional[str] = None,
) -> ContractSchema:
    """
    Build a schema from a compiler artifact.

    Args:
        path: Foundry (``out/X.sol/X.json``) or Hardhat artifact
        contract_address: Deployed address of the contract
        contract_name: Defaults to the artifact's ``contractName`` or file stem

    Returns:
        Validated ContractSchema
    """
    path = Path(path)
    artifact = _read_json(path)
    if not isinstance(artifact, dict) or "abi" not in artifact:
        raise SchemaError(f"No abi in artifact {path}")

    name = contract_name or artifact.get("contractName") or path.stem
    return ContractSchema.from_dict(
        {
            "contractName": name,
            "abi": artifact["abi"],
            "contractAddress": contract_address,
        }
    )
