"""Tests for request variants."""

import pytest

from gree_ac_mcp.protocol.commands import (
    STATUS_COLUMNS,
    BindRequest,
    GetRequest,
    MessageType,
    ScanRequest,
    SetRequest,
    build_bind,
    build_get,
    build_scan,
    build_set,
)

CID = "aabbccddeeff"


def test_message_type_values():
    assert MessageType.SCAN == "scan"
    assert MessageType.BIND_OK == "bindok"
    assert MessageType.STATUS.value == "status"


def test_scan_has_no_pack():
    assert isinstance(build_scan(), ScanRequest)
    assert build_scan().to_pack(CID) is None


def test_bind_pack():
    req = build_bind()
    assert isinstance(req, BindRequest)
    assert req.sequence == 1
    assert req.to_pack(CID) == {"mac": CID, "t": "bind", "uid": 0}


def test_set_pack():
    req = build_set(["Pow", "Mod"], [1, 4])
    assert isinstance(req, SetRequest)
    assert req.to_pack(CID) == {
        "opt": ["Pow", "Mod"],
        "p": [1, 4],
        "t": "cmd",
        "mac": CID,
    }


def test_set_coerces_bools():
    assert build_set(["Add0.5"], [True]).p == (1,)


def test_set_length_mismatch():
    with pytest.raises(ValueError):
        build_set(["Pow", "Mod"], [1])


def test_set_requires_a_property():
    with pytest.raises(ValueError):
        build_set([], [])


def test_get_pack():
    req = build_get(["SetTem", "Add0.5"])
    assert isinstance(req, GetRequest)
    assert req.to_pack(CID) == {"cols": ["SetTem", "Add0.5"], "t": "status", "mac": CID}


def test_get_defaults_to_full_status():
    assert build_get().cols == STATUS_COLUMNS
    assert "Pow" in STATUS_COLUMNS
    assert len(STATUS_COLUMNS) == 18


def test_get_requires_a_column():
    with pytest.raises(ValueError):
        build_get([])


def test_requests_are_frozen():
    req = build_get(["Pow"])
    with pytest.raises(AttributeError):
        req.cols = ("Mod",)
