"""Per-device connection parameters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..utils.crypto import DEFAULT_KEY

DEFAULT_PORT = 7000
DEFAULT_TRY_LIMIT = 3


@dataclass
class Session:
    """Identity and connection parameters for one device.

    ``key`` stays ``None`` until a bind succeeds (or the caller supplies a
    previously bound key); until then :attr:`active_key` is the vendor
    default.
    """

    host: str
    port: int = DEFAULT_PORT
    cid: str = ""
    key: Optional[str] = None
    try_limit: int = DEFAULT_TRY_LIMIT

    @property
    def active_key(self) -> str:
        return self.key or DEFAULT_KEY

    @property
    def bound(self) -> bool:
        return bool(self.key)

    def to_dict(self) -> dict:
        return {
            "host": self.host,
            "port": self.port,
            "cid": self.cid,
            "bound": self.bound,
            "try_limit": self.try_limit,
        }

    def __repr__(self) -> str:
        return (
            f"Session(host={self.host!r}, port={self.port}, cid={self.cid!r}, "
            f"bound={self.bound})"
        )
