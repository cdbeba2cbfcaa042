"""Shared plumbing for the CLI commands."""

from __future__ import annotations

import json
import sys
from contextlib import asynccontextmanager
from dataclasses import replace
from pathlib import Path
from typing import Any, AsyncIterator, Optional

import click

from ..abi.loader import load_schema
from ..abi.models import ContractSchema
from ..config import Settings, load_settings
from ..contract.registry import ContractRegistry
from ..contract.wrapper import ContractWrapper
from ..errors import ContractError, SchemaError
from ..rpc.queue import MemoryTransactionQueue


def fail(message: str, exit_code: int = 1) -> None:
    click.secho(f"ERROR: {message}", fg="red")
    sys.exit(exit_code)


def parse_args(args_json: str) -> list[Any]:
    try:
        args = json.loads(args_json)
        if not isinstance(args, list):
            raise ValueError("Args must be a JSON array")
    except (json.JSONDecodeError, ValueError) as exc:
        fail(f"Invalid args: {exc}")
    return args


def resolve_settings(rpc_url: Optional[str], use_queue: Optional[bool] = None) -> Settings:
    try:
        settings = load_settings()
    except ValueError as exc:
        fail(str(exc))
    if rpc_url:
        settings = replace(settings, rpc_url=rpc_url)
    settings = replace(settings, use_queue=settings.use_queue or bool(use_queue))
    return settings


def read_schema(schema_path: str) -> ContractSchema:
    try:
        return load_schema(Path(schema_path))
    except (FileNotFoundError, SchemaError) as exc:
        fail(str(exc), getattr(exc, "exit_code", 1))


@asynccontextmanager
async def open_contract(schema: ContractSchema, settings: Settings) -> AsyncIterator[ContractWrapper]:
    """Build the wrapper for one command run and close the client afterwards."""
    client = settings.build_client()
    registry = ContractRegistry()
    target = MemoryTransactionQueue(client) if settings.use_queue else client
    try:
        yield registry.instance_for(schema, target)
    finally:
        await client.aclose()


def report_error(exc: Exception) -> None:
    exit_code = exc.exit_code if isinstance(exc, ContractError) else 1
    fail(str(exc), exit_code)
