"""UDP connection to a Gree air conditioner.

Each exchange opens its own socket, connected to the device, and closes it
before returning. Requests are retried a bounded number of times; the first
attempt that yields a ``pack`` envelope wins.
"""

from __future__ import annotations

import logging
import socket
import time

from ..exceptions import ProtocolError, TransportError
from ..models.session import DEFAULT_PORT, DEFAULT_TRY_LIMIT
from ..protocol.envelope import TYPE_PACK, Envelope

logger = logging.getLogger(__name__)

SOCKET_TIMEOUT = 5.0
RETRY_DELAY = 1.0
RECV_BUFFER_SIZE = 1024


class UDPConnection:
    """Request/response exchange with one device.

    Usage::

        conn = UDPConnection("192.168.1.50")
        response = conn.exchange(request_bytes)
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        try_limit: int = DEFAULT_TRY_LIMIT,
        timeout: float = SOCKET_TIMEOUT,
        retry_delay: float = RETRY_DELAY,
    ) -> None:
        if try_limit < 1:
            raise ValueError(f"try_limit must be at least 1, got {try_limit}")
        self._host = host
        self._port = port
        self._try_limit = try_limit
        self._timeout = timeout
        self._retry_delay = retry_delay

    @property
    def address(self) -> tuple[str, int]:
        return (self._host, self._port)

    def _open(self) -> socket.socket:
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as e:
            raise TransportError(f"Can not open UDP socket: {e}") from e
        try:
            sock.settimeout(self._timeout)
            sock.connect(self.address)
        except OSError as e:
            sock.close()
            raise TransportError(
                f"Can not dial UDP {self._host}:{self._port}: {e}"
            ) from e
        return sock

    def exchange(self, data: bytes) -> bytes:
        """Send a request datagram and return the device's response datagram.

        Args:
            data: The serialized request envelope.

        Returns:
            The raw bytes of the first response that parses as a ``pack``
            envelope.

        Raises:
            TransportError: If the socket can not be opened, or every attempt
                failed.
        """
        logger.info("Request to UDP %s:%s...", self._host, self._port)
        logger.debug("Request: %s", data.decode("utf-8", errors="replace"))

        sock = self._open()
        try:
            for attempt in range(1, self._try_limit + 1):
                time.sleep(self._retry_delay)

                try:
                    sock.send(data)
                except OSError as e:
                    logger.warning("Attempt %d: can not write to UDP: %s", attempt, e)
                    continue

                try:
                    response = sock.recv(RECV_BUFFER_SIZE)
                except OSError as e:
                    logger.warning("Attempt %d: can not read from UDP: %s", attempt, e)
                    continue

                try:
                    envelope = Envelope.from_bytes(response)
                except ProtocolError as e:
                    logger.warning("Attempt %d: %s", attempt, e)
                    continue

                if envelope.t != TYPE_PACK:
                    logger.warning(
                        "Attempt %d: unexpected envelope type '%s'", attempt, envelope.t
                    )
                    continue

                logger.debug("Response: %s", response.decode("utf-8", errors="replace"))
                return response
        finally:
            sock.close()

        raise TransportError(
            f"Device unreachable at {self._host}:{self._port} "
            f"after {self._try_limit} attempts"
        )
