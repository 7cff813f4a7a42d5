"""Request variants and the inner packs they render.

Each logical request is its own frozen dataclass, so only the fields that
make sense for an operation can be set:

- :class:`ScanRequest`: outer-only ``{"t": "scan"}``, never encrypted
- :class:`BindRequest`: ``{"mac", "t": "bind", "uid": 0}``
- :class:`SetRequest`: ``{"opt": [...], "p": [...], "t": "cmd", "mac"}``
- :class:`GetRequest`: ``{"cols": [...], "t": "status", "mac"}``
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence, Union


class MessageType(str, Enum):
    """Type tags used in inner packs and envelopes."""

    SCAN = "scan"
    BIND = "bind"
    CMD = "cmd"
    STATUS = "status"
    PACK = "pack"
    # Response tags
    DEV = "dev"
    BIND_OK = "bindok"
    RES = "res"
    DAT = "dat"


# Every column the full status read asks for.
STATUS_COLUMNS: tuple[str, ...] = (
    "Pow",
    "Mod",
    "SetTem",
    "WdSpd",
    "Air",
    "Blo",
    "Health",
    "SwhSlp",
    "Lig",
    "SwingLfRig",
    "SwUpDn",
    "Quiet",
    "Tur",
    "StHt",
    "TemUn",
    "HeatCoolType",
    "TemRec",
    "SvSt",
)


@dataclass(frozen=True)
class ScanRequest:
    """Broadcast-style discovery request."""

    message_type = MessageType.SCAN
    sequence = 0

    def to_pack(self, cid: str) -> None:
        return None


@dataclass(frozen=True)
class BindRequest:
    """Key exchange request, encrypted with the vendor key."""

    message_type = MessageType.BIND
    sequence = 1

    def to_pack(self, cid: str) -> dict[str, Any]:
        return {"mac": cid, "t": self.message_type.value, "uid": 0}


@dataclass(frozen=True)
class SetRequest:
    """Write integer values to a list of properties."""

    opt: tuple[str, ...]
    p: tuple[int, ...]

    message_type = MessageType.CMD
    sequence = 0

    def __post_init__(self) -> None:
        if len(self.opt) != len(self.p):
            raise ValueError(
                f"Property and value lists differ in length "
                f"({len(self.opt)} != {len(self.p)})"
            )
        if not self.opt:
            raise ValueError("At least one property is required")

    def to_pack(self, cid: str) -> dict[str, Any]:
        return {
            "opt": list(self.opt),
            "p": list(self.p),
            "t": self.message_type.value,
            "mac": cid,
        }


@dataclass(frozen=True)
class GetRequest:
    """Read the current values of a list of properties."""

    cols: tuple[str, ...]

    message_type = MessageType.STATUS
    sequence = 0

    def __post_init__(self) -> None:
        if not self.cols:
            raise ValueError("At least one column is required")

    def to_pack(self, cid: str) -> dict[str, Any]:
        return {"cols": list(self.cols), "t": self.message_type.value, "mac": cid}


Request = Union[ScanRequest, BindRequest, SetRequest, GetRequest]


def build_scan() -> ScanRequest:
    return ScanRequest()


def build_bind() -> BindRequest:
    return BindRequest()


def build_set(codes: Sequence[str], values: Sequence[int]) -> SetRequest:
    """Build a ``cmd`` request.

    Args:
        codes: Property codes, e.g. ``["Pow", "Mod"]``.
        values: Wire integers, parallel to ``codes``.
    """
    return SetRequest(opt=tuple(codes), p=tuple(int(v) for v in values))


def build_get(codes: Sequence[str] = STATUS_COLUMNS) -> GetRequest:
    """Build a ``status`` request for ``codes``."""
    return GetRequest(cols=tuple(codes))
