"""Protocol engine: discovery, binding and generic get/set.

A device is driven through three phases, in order::

    client = GreeClient(Session(host="192.168.1.50"))
    client.scan()                        # adopt the device identity
    client.bind()                        # adopt the per-device key
    client.set_values(["Pow"], [1])      # {"Pow": "on"}
    client.get_values(["SetTem", "Add0.5"])  # {"SetTem": 24, "Add0.5": True}

The phases are not enforced: get/set before bind are sent with the vendor
key and the outcome is up to the device.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from .exceptions import BindingError, DiscoveryError, ProtocolError
from .models.aliases import AliasTable, Value
from .models.session import Session
from .protocol.codec import decode_response, encode_request
from .protocol.commands import (
    STATUS_COLUMNS,
    Request,
    build_bind,
    build_get,
    build_scan,
    build_set,
)
from .protocol.parser import (
    DeviceInfo,
    Response,
    parse_bind,
    parse_command,
    parse_device_info,
    parse_status,
)
from .transport.udp_connection import UDPConnection

logger = logging.getLogger(__name__)

DEFAULT_TABLE = AliasTable()


class GreeClient:
    """Protocol engine for one device session."""

    def __init__(self, session: Session, aliases: AliasTable = DEFAULT_TABLE) -> None:
        self._session = session
        self._aliases = aliases
        self._device_info: Optional[DeviceInfo] = None

    @property
    def session(self) -> Session:
        return self._session

    @property
    def aliases(self) -> AliasTable:
        return self._aliases

    @property
    def device_info(self) -> Optional[DeviceInfo]:
        """Result of the last successful scan."""
        return self._device_info

    # ─── SESSION SETTERS ──────────────────────────────────────────────

    def set_host(self, host: str) -> None:
        self._session.host = host

    def set_port(self, port: int) -> None:
        self._session.port = port

    def set_cid(self, cid: str) -> None:
        self._session.cid = cid

    def set_key(self, key: Optional[str]) -> None:
        self._session.key = key

    def set_try_limit(self, try_limit: int) -> None:
        self._session.try_limit = try_limit

    # ─── EXCHANGE ─────────────────────────────────────────────────────

    def _open_connection(self) -> UDPConnection:
        return UDPConnection(
            self._session.host,
            self._session.port,
            try_limit=self._session.try_limit,
        )

    def _send(self, request: Request) -> Response:
        """Encode, exchange and decode one request."""
        key = self._session.active_key
        data = encode_request(request, self._session)
        raw = self._open_connection().exchange(data)
        return decode_response(raw, key)

    # ─── PHASES ───────────────────────────────────────────────────────

    def scan(self) -> DeviceInfo:
        """Discover the device and adopt its identity code.

        Raises:
            DiscoveryError: If the response does not identify the device.
        """
        response = self._send(build_scan())
        info = parse_device_info(response)
        if info is None:
            reported = response.pack.mac if response.pack else None
            raise DiscoveryError(
                f"Can not find CID: envelope claims {response.envelope.cid!r}, "
                f"pack reports {reported!r}"
            )

        self.set_cid(info.mac)
        self._device_info = info
        logger.info("Found device CID %s (%s)", info.mac, info.name or "unnamed")
        return info

    def bind(self) -> str:
        """Exchange keys with the device and adopt the per-device key.

        Returns:
            The bound key.

        Raises:
            BindingError: If the device refuses or sends no key.
        """
        try:
            result = parse_bind(self._send(build_bind()))
        except ProtocolError as e:
            raise BindingError(f"Can not get bind key from response: {e}") from e

        if not result.ok:
            raise BindingError(
                f"Can not get sec-key: status {result.status!r}, "
                f"key {'present' if result.key else 'missing'}"
            )

        self.set_key(result.key)
        logger.info("Bound key for device %s", self._session.cid)
        return result.key

    def set_values(self, codes: Sequence[str], values: Sequence[int]) -> dict[str, Any]:
        """Write integer values and return the acknowledged values, translated.

        Raises:
            ProtocolError: If the acknowledgment is missing or has the wrong
                length.
            OutOfRangeError: If an acknowledged value has no alias.
        """
        request = build_set(codes, values)
        result = parse_command(self._send(request))
        if len(result.values) != len(request.opt):
            raise ProtocolError(
                f"Can not get {list(request.opt)} values from response: "
                f"got {result.values}"
            )
        return {
            code: self._aliases.translate(code, value)
            for code, value in zip(request.opt, result.values)
        }

    def get_values(self, codes: Sequence[str]) -> dict[str, Any]:
        """Read property values and return them translated.

        Raises:
            ProtocolError: If the returned columns differ from ``codes`` or
                the data list has the wrong length.
            OutOfRangeError: If a value has no alias.
        """
        request = build_get(codes)
        result = parse_status(self._send(request))
        if result.cols != list(request.cols) or len(result.dat) != len(result.cols):
            raise ProtocolError(
                f"Can not get status from response: cols={result.cols}, "
                f"dat={result.dat}"
            )
        return {
            code: self._aliases.translate(code, value)
            for code, value in zip(result.cols, result.dat)
        }

    # ─── HUMAN-READABLE HELPERS ───────────────────────────────────────

    def set_options(self, options: Mapping[str, Value]) -> dict[str, Any]:
        """Write human-readable values, e.g. ``{"Mod": "cool", "SetTem": 24}``.

        Raises:
            UnknownValueError: If a name is not an alias of its property.
        """
        codes = list(options)
        values = [self._aliases.encode(code, options[code]) for code in codes]
        return self.set_values(codes, values)

    def status(self) -> dict[str, Any]:
        """Read every column of the full status set."""
        return self.get_values(STATUS_COLUMNS)
