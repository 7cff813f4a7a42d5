"""Outer envelope: the JSON object carried by every UDP datagram.

Envelope layout::

    {
      "t":    "pack",          # type tag ("scan", "pack", ...)
      "i":    0,               # sequence indicator (1 for bind)
      "uid":  0,
      "cid":  "app",           # caller / source identity
      "tcid": "aabbccddeeff",  # target device identity
      "pack": "<base64>"       # optional AES-ECB ciphertext of the inner pack
    }

Fields left as ``None`` are omitted on the wire, so a scan request is just
``{"t": "scan"}``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from ..exceptions import ProtocolError

TYPE_SCAN = "scan"
TYPE_PACK = "pack"

CLIENT_CID = "app"


@dataclass
class Envelope:
    """A parsed or to-be-sent outer envelope."""

    t: str
    i: Optional[int] = None
    uid: Optional[int] = None
    cid: Optional[str] = None
    tcid: Optional[str] = None
    pack: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        fields = {
            "t": self.t,
            "i": self.i,
            "uid": self.uid,
            "cid": self.cid,
            "tcid": self.tcid,
            "pack": self.pack,
        }
        return {k: v for k, v in fields.items() if v is not None}

    def to_bytes(self) -> bytes:
        return json.dumps(self.to_dict(), separators=(",", ":")).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> Envelope:
        """Parse a received datagram.

        Raises:
            ProtocolError: If ``data`` is not a JSON object with a ``t`` tag.
        """
        try:
            obj = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise ProtocolError(f"Can not decode JSON envelope: {e}") from e

        if not isinstance(obj, dict) or not isinstance(obj.get("t"), str):
            raise ProtocolError(f"Envelope without type tag: {data[:64]!r}")

        pack = obj.get("pack")
        return cls(
            t=obj["t"],
            i=obj.get("i"),
            uid=obj.get("uid"),
            cid=obj.get("cid"),
            tcid=obj.get("tcid"),
            pack=pack if isinstance(pack, str) else None,
        )

    def __repr__(self) -> str:
        pack = f"{len(self.pack)} chars" if self.pack else "(none)"
        return f"Envelope(t={self.t!r}, cid={self.cid!r}, pack={pack})"
