"""
Settings loaded from the environment.

Values can also live in ~/.happycontract/.env (KEY=value lines), which
is loaded first without overriding variables already set.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .rpc.client import DEFAULT_RPC_URL, DEFAULT_TIMEOUT, RpcClient

HAPPY_DIR = Path.home() / ".happycontract"
HAPPY_ENV = HAPPY_DIR / ".env"

TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    rpc_url: str = DEFAULT_RPC_URL
    rpc_timeout: float = DEFAULT_TIMEOUT
    default_from: Optional[str] = None
    use_queue: bool = False

    def build_client(self) -> RpcClient:
        return RpcClient(self.rpc_url, timeout=self.rpc_timeout, default_from=self.default_from)


def load_settings(env_path: Optional[Path] = None) -> Settings:
    """
    Load settings from the environment.

    Args:
        env_path: Path to .env file (default: ~/.happycontract/.env)

    Returns:
        Settings with defaults for anything unset

    Raises:
        ValueError: If HAPPY_RPC_TIMEOUT is not a number
    """
    env_path = env_path or HAPPY_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)

    timeout_raw = os.environ.get("HAPPY_RPC_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = float(timeout_raw)
    except ValueError:
        raise ValueError(f"HAPPY_RPC_TIMEOUT must be a number, got {timeout_raw!r}") from None

    return Settings(
        rpc_url=os.environ.get("HAPPY_RPC_URL", DEFAULT_RPC_URL).strip(),
        rpc_timeout=timeout,
        default_from=os.environ.get("HAPPY_FROM") or None,
        use_queue=os.environ.get("HAPPY_USE_QUEUE", "").strip().lower() in TRUTHY,
    )
