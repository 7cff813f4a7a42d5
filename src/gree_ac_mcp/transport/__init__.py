"""Datagram transport to the device."""

from .udp_connection import UDPConnection
