"""Tests for the retrying UDP transport."""

from unittest.mock import MagicMock, patch

import pytest

from gree_ac_mcp.exceptions import TransportError
from gree_ac_mcp.transport.udp_connection import (
    RECV_BUFFER_SIZE,
    RETRY_DELAY,
    SOCKET_TIMEOUT,
    UDPConnection,
)

REQUEST = b'{"t":"scan"}'
PACK_RESPONSE = b'{"t":"pack","cid":"aabbccddeeff","pack":"abc"}'


@pytest.fixture
def sleep():
    with patch("gree_ac_mcp.transport.udp_connection.time.sleep") as mock_sleep:
        yield mock_sleep


def _exchange(sock: MagicMock, **kwargs) -> bytes:
    """Run one exchange against a mocked socket."""
    with patch("gree_ac_mcp.transport.udp_connection.socket.socket", return_value=sock):
        return UDPConnection("192.168.1.50", **kwargs).exchange(REQUEST)


def test_first_success_wins(sleep):
    """A pack envelope on the first attempt ends the loop."""
    sock = MagicMock()
    sock.recv.return_value = PACK_RESPONSE

    assert _exchange(sock) == PACK_RESPONSE
    sock.send.assert_called_once_with(REQUEST)
    sock.recv.assert_called_once_with(RECV_BUFFER_SIZE)
    sock.close.assert_called_once()


def test_socket_setup(sleep):
    """The socket is connected to the device with the per-attempt timeout."""
    sock = MagicMock()
    sock.recv.return_value = PACK_RESPONSE

    _exchange(sock)
    sock.settimeout.assert_called_once_with(SOCKET_TIMEOUT)
    sock.connect.assert_called_once_with(("192.168.1.50", 7000))


def test_paced_before_each_send(sleep):
    sock = MagicMock()
    sock.recv.return_value = PACK_RESPONSE

    _exchange(sock)
    sleep.assert_called_once_with(RETRY_DELAY)


def test_retries_exactly_try_limit_times(sleep):
    """Persistent read timeouts exhaust all attempts, then fail."""
    sock = MagicMock()
    sock.recv.side_effect = TimeoutError("timed out")

    with pytest.raises(TransportError):
        _exchange(sock)
    assert sock.send.call_count == 3
    assert sleep.call_count == 3
    sock.close.assert_called_once()


def test_custom_try_limit(sleep):
    sock = MagicMock()
    sock.recv.side_effect = TimeoutError("timed out")

    with pytest.raises(TransportError):
        _exchange(sock, try_limit=5)
    assert sock.send.call_count == 5


def test_stops_after_recovery(sleep):
    """A failed attempt followed by a good one stops at the good one."""
    sock = MagicMock()
    sock.recv.side_effect = [TimeoutError("timed out"), PACK_RESPONSE, PACK_RESPONSE]

    assert _exchange(sock) == PACK_RESPONSE
    assert sock.send.call_count == 2


def test_write_failure_skips_read(sleep):
    sock = MagicMock()
    sock.send.side_effect = [OSError("network unreachable"), len(REQUEST)]
    sock.recv.return_value = PACK_RESPONSE

    assert _exchange(sock) == PACK_RESPONSE
    assert sock.send.call_count == 2
    sock.recv.assert_called_once()


def test_unparseable_response_is_retried(sleep):
    sock = MagicMock()
    sock.recv.side_effect = [b"\xff\xfe garbage", PACK_RESPONSE]

    assert _exchange(sock) == PACK_RESPONSE
    assert sock.send.call_count == 2


def test_non_pack_envelope_is_retried(sleep):
    """Only a pack-typed envelope counts as success."""
    sock = MagicMock()
    sock.recv.side_effect = [b'{"t":"scan"}', b'{"t":"scan"}', b'{"t":"scan"}']

    with pytest.raises(TransportError):
        _exchange(sock)
    assert sock.send.call_count == 3


def test_connect_failure(sleep):
    """A socket that can not be dialed fails without any attempt."""
    sock = MagicMock()
    sock.connect.side_effect = OSError("bad address")

    with pytest.raises(TransportError):
        _exchange(sock)
    sock.send.assert_not_called()
    sock.close.assert_called_once()


def test_invalid_try_limit():
    with pytest.raises(ValueError):
        UDPConnection("h", try_limit=0)
