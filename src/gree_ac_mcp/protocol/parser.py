"""Response parsing for decrypted device packs."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Optional

from .commands import MessageType
from .envelope import Envelope
from ..exceptions import ProtocolError


@dataclass
class ResponsePack:
    """Decrypted inner pack of a device response.

    Scan, bind, cmd and status responses all use this shape; which fields
    are filled depends on ``t``. When the decrypted text is not valid JSON
    the raw text lands in ``key``.
    """

    t: str = ""
    cid: str = ""
    mac: str = ""
    key: str = ""
    bc: str = ""
    brand: str = ""
    catalog: str = ""
    mid: str = ""
    model: str = ""
    name: str = ""
    series: str = ""
    vender: str = ""
    ver: str = ""
    lock: int = 0
    r: int = 0
    opt: list[str] = field(default_factory=list)
    p: list[int] = field(default_factory=list)
    cols: list[str] = field(default_factory=list)
    dat: list[int] = field(default_factory=list)
    val: list[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResponsePack:
        """Build from a decoded JSON object, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known and v is not None})

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)
                if getattr(self, f.name) not in ("", 0, [])}


@dataclass
class Response:
    """An outer envelope with its (optional) decrypted pack."""

    envelope: Envelope
    pack: Optional[ResponsePack] = None

    def require_pack(self) -> ResponsePack:
        if self.pack is None:
            raise ProtocolError(
                f"Response '{self.envelope.t}' from {self.envelope.cid!r} has no pack"
            )
        return self.pack


@dataclass
class DeviceInfo:
    """Scan (``dev``) response."""

    cid: str
    mac: str
    name: str = ""
    brand: str = ""
    model: str = ""
    series: str = ""
    vender: str = ""
    ver: str = ""
    catalog: str = ""
    mid: str = ""
    bc: str = ""
    lock: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "cid": self.cid,
            "mac": self.mac,
            "name": self.name,
            "brand": self.brand,
            "model": self.model,
            "series": self.series,
            "vendor": self.vender,
            "firmware": self.ver,
            "catalog": self.catalog,
            "mid": self.mid,
            "locked": bool(self.lock),
        }


@dataclass
class BindResult:
    """Bind response; ``ok`` only when the status is ``bindok``."""

    status: str
    key: str

    @property
    def ok(self) -> bool:
        return self.status == MessageType.BIND_OK.value and bool(self.key)


@dataclass
class CommandResult:
    """Command (``res``) acknowledgment."""

    opt: list[str]
    values: list[int]
    result_code: int = 0


@dataclass
class StatusResult:
    """Status (``dat``) response: parallel column and value lists."""

    cols: list[str]
    dat: list[int]


def parse_device_info(response: Response) -> Optional[DeviceInfo]:
    """Parse a scan response.

    Returns ``None`` if the response has no pack or the pack identity does
    not match the identity claimed by the envelope.
    """
    pack = response.pack
    if pack is None or not pack.mac:
        return None
    if pack.mac != response.envelope.cid:
        return None
    return DeviceInfo(
        cid=pack.cid or pack.mac,
        mac=pack.mac,
        name=pack.name,
        brand=pack.brand,
        model=pack.model,
        series=pack.series,
        vender=pack.vender,
        ver=pack.ver,
        catalog=pack.catalog,
        mid=pack.mid,
        bc=pack.bc,
        lock=pack.lock,
    )


def parse_bind(response: Response) -> BindResult:
    pack = response.require_pack()
    return BindResult(status=pack.t, key=pack.key)


def parse_command(response: Response) -> CommandResult:
    """Parse a ``res`` pack.

    Devices that omit ``val`` echo the written values in ``p``; those are
    used instead.
    """
    pack = response.require_pack()
    values = pack.val if pack.val else pack.p
    return CommandResult(opt=list(pack.opt), values=list(values), result_code=pack.r)


def parse_status(response: Response) -> StatusResult:
    pack = response.require_pack()
    return StatusResult(cols=list(pack.cols), dat=list(pack.dat))
