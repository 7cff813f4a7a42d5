"""Tests for the envelope codec: pack encryption and truncation recovery."""

import base64
import json

import pytest

from gree_ac_mcp.exceptions import CryptoError, ProtocolError
from gree_ac_mcp.models.session import Session
from gree_ac_mcp.protocol.codec import (
    decode_pack,
    decode_response,
    encode_pack,
    encode_request,
)
from gree_ac_mcp.protocol.commands import build_bind, build_get, build_scan, build_set
from gree_ac_mcp.protocol.envelope import Envelope
from gree_ac_mcp.utils.crypto import DEFAULT_KEY, encrypt

KEY = "0123456789abcdef"
CID = "aabbccddeeff"


def _raw_pack(plaintext: bytes, key: str = KEY) -> str:
    """Encrypt arbitrary bytes into a base64 pack."""
    return base64.b64encode(encrypt(plaintext, key)).decode()


def test_pack_roundtrip():
    """Encrypt then decrypt (with brace truncation) gives the payload back."""
    payload = {"t": "dat", "mac": CID, "cols": ["Pow", "SetTem"], "dat": [1, 24]}
    pack = decode_pack(encode_pack(payload, KEY), KEY)
    assert pack.t == "dat"
    assert pack.mac == CID
    assert pack.cols == ["Pow", "SetTem"]
    assert pack.dat == [1, 24]


def test_trailing_garbage_is_cut():
    """Bytes after the first closing brace never reach the JSON parser."""
    pack = decode_pack(_raw_pack(b'{"t":"bindok","key":"k"}\x0f\x0f\xffjunk'), KEY)
    assert pack.t == "bindok"
    assert pack.key == "k"


def test_unknown_fields_are_ignored():
    pack = decode_pack(encode_pack({"t": "res", "unexpected": 1}, KEY), KEY)
    assert pack.t == "res"


def test_no_closing_brace():
    with pytest.raises(ProtocolError):
        decode_pack(_raw_pack(b"no json object in here"), KEY)


def test_closing_brace_first():
    with pytest.raises(ProtocolError):
        decode_pack(_raw_pack(b"}{"), KEY)


def test_unparseable_json_falls_back_to_raw_text():
    """The raw plaintext is kept in ``key`` when parsing fails."""
    pack = decode_pack(_raw_pack(b"0123456789abcdef}"), KEY)
    assert pack.t == ""
    assert pack.key.startswith("0123456789abcdef}")


def test_nested_object_is_cut_at_first_brace():
    """Truncation stops at the first brace, even inside a nested object."""
    pack = decode_pack(_raw_pack(b'{"t":"dev","x":{"a":1},"mac":"m"}'), KEY)
    assert pack.t == ""
    assert pack.key.startswith('{"t":"dev","x":{"a":1}')


def test_invalid_base64():
    with pytest.raises(ProtocolError):
        decode_pack("not base64 at all!!", KEY)


def test_wrong_key_length():
    with pytest.raises(CryptoError):
        decode_pack(encode_pack({"t": "dat"}, KEY), "bad")


def test_wrong_key_gives_no_payload():
    """Decrypting with the wrong key yields noise, never a silent parse."""
    pack_b64 = encode_pack({"t": "dat", "dat": [1]}, KEY)
    try:
        pack = decode_pack(pack_b64, DEFAULT_KEY)
    except ProtocolError:
        return
    assert pack.dat == []


def test_encode_scan_request():
    data = encode_request(build_scan(), Session(host="h"))
    assert json.loads(data) == {"t": "scan"}


def test_encode_bind_request_uses_default_key():
    session = Session(host="h", cid=CID)
    env = Envelope.from_bytes(encode_request(build_bind(), session))
    assert env.t == "pack"
    assert env.i == 1
    assert env.tcid == CID
    assert env.cid == "app"
    pack = decode_pack(env.pack, DEFAULT_KEY)
    assert pack.t == "bind"
    assert pack.mac == CID


def test_encode_set_request_uses_bound_key():
    """Once a key is bound, packs are encrypted with it and embed the cid."""
    session = Session(host="h", cid=CID, key=KEY)
    env = Envelope.from_bytes(encode_request(build_set(["Pow"], [1]), session))
    assert env.t == "pack"
    assert env.i == 0
    pack = decode_pack(env.pack, KEY)
    assert pack.t == "cmd"
    assert pack.mac == CID
    assert pack.opt == ["Pow"]
    assert pack.p == [1]


def test_encode_get_request():
    session = Session(host="h", cid=CID, key=KEY)
    env = Envelope.from_bytes(encode_request(build_get(["Mod"]), session))
    pack = decode_pack(env.pack, KEY)
    assert pack.t == "status"
    assert pack.cols == ["Mod"]


def test_decode_response_with_pack():
    data = Envelope(t="pack", cid=CID, pack=encode_pack({"t": "dev", "mac": CID}, KEY)).to_bytes()
    response = decode_response(data, KEY)
    assert response.envelope.cid == CID
    assert response.pack is not None
    assert response.pack.mac == CID


def test_decode_response_short_pack_is_no_payload():
    """Packs under 16 characters are skipped, not decrypted."""
    response = decode_response(Envelope(t="pack", cid=CID, pack="QUJD").to_bytes(), KEY)
    assert response.pack is None


def test_decode_response_wrong_type():
    with pytest.raises(ProtocolError):
        decode_response(b'{"t":"scan"}', KEY)
