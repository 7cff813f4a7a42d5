"""Envelope codec: inner pack <-> encrypted, base64 ``pack`` field.

Encoding::

    inner dict --json--> bytes --zero pad + AES-ECB--> ciphertext --base64--> pack

Decoding reverses this, then cuts the plaintext after the first ``}``:
zero padding leaves trailing bytes after the JSON text that the parser must
never see. If the cut text still fails to parse, the raw plaintext is kept
in ``ResponsePack.key`` so a caller expecting one opaque string still gets
something.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any

from .commands import Request, ScanRequest
from .envelope import CLIENT_CID, TYPE_PACK, TYPE_SCAN, Envelope
from .parser import Response, ResponsePack
from ..exceptions import ProtocolError
from ..models.session import Session
from ..utils import crypto

logger = logging.getLogger(__name__)

# Packs shorter than this carry no payload.
MIN_PACK_LENGTH = 16


def encode_pack(payload: dict[str, Any], key: str) -> str:
    """JSON-serialize, encrypt and base64-encode an inner pack."""
    data = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    logger.debug("Pack JSON: %s", data.decode("utf-8"))
    return base64.b64encode(crypto.encrypt(data, key)).decode("ascii")


def decode_pack(pack: str, key: str) -> ResponsePack:
    """Decrypt a ``pack`` field into a :class:`ResponsePack`.

    Raises:
        ProtocolError: Invalid base64, or no ``}`` in the plaintext.
        CryptoError: Decryption failed.
    """
    try:
        ciphertext = base64.b64decode(pack, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ProtocolError(f"Can not decode base64 pack: {e}") from e

    raw = crypto.decrypt(ciphertext, key)

    end = raw.find(b"}")
    if end <= 0:
        raise ProtocolError("Malformed payload: JSON object not found")

    text = raw[: end + 1]
    logger.debug("Decrypted pack: %s", text.decode("utf-8", errors="replace"))

    try:
        obj = json.loads(text.decode("utf-8"))
        if not isinstance(obj, dict):
            raise ValueError(f"expected an object, got {type(obj).__name__}")
        return ResponsePack.from_dict(obj)
    except (UnicodeDecodeError, ValueError, TypeError) as e:
        logger.warning("Can not decode JSON pack, keeping raw text: %s", e)
        return ResponsePack(key=raw.decode("utf-8", errors="replace"))


def encode_request(request: Request, session: Session) -> bytes:
    """Build the wire datagram for ``request``.

    Scan goes out as the bare outer envelope. Everything else is re-tagged
    ``pack``, with the device identity embedded in the encrypted inner pack.
    """
    if isinstance(request, ScanRequest):
        return Envelope(t=TYPE_SCAN).to_bytes()

    payload = request.to_pack(session.cid)
    envelope = Envelope(
        t=TYPE_PACK,
        i=request.sequence,
        uid=0,
        cid=CLIENT_CID,
        tcid=session.cid,
        pack=encode_pack(payload, session.active_key),
    )
    return envelope.to_bytes()


def decode_response(data: bytes, key: str) -> Response:
    """Parse a received datagram and decrypt its pack, if it has one."""
    envelope = Envelope.from_bytes(data)
    if envelope.t != TYPE_PACK:
        raise ProtocolError(f"Unexpected response type '{envelope.t}'")

    if not envelope.pack or len(envelope.pack) < MIN_PACK_LENGTH:
        return Response(envelope=envelope)
    return Response(envelope=envelope, pack=decode_pack(envelope.pack, key))
