"""Server configuration from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .models.session import DEFAULT_PORT, DEFAULT_TRY_LIMIT

ENV_HOST = "GREE_HOST"
ENV_PORT = "GREE_PORT"
ENV_CID = "GREE_CID"
ENV_KEY = "GREE_KEY"
ENV_TRY_LIMIT = "GREE_TRY_LIMIT"
ENV_LOG_LEVEL = "GREE_LOG_LEVEL"


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Connection defaults for the MCP server."""

    host: Optional[str] = None
    port: int = DEFAULT_PORT
    cid: str = ""
    key: Optional[str] = None
    try_limit: int = DEFAULT_TRY_LIMIT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Settings:
        if env is None:
            env = os.environ
        return cls(
            host=env.get(ENV_HOST) or None,
            port=_int(env, ENV_PORT, DEFAULT_PORT),
            cid=env.get(ENV_CID, ""),
            key=env.get(ENV_KEY) or None,
            try_limit=_int(env, ENV_TRY_LIMIT, DEFAULT_TRY_LIMIT),
            log_level=env.get(ENV_LOG_LEVEL, "INFO").upper(),
        )
