"""Find an ATAG One thermostat on the local network.

The thermostat periodically broadcasts ``ONE <device id>`` on UDP port 11000.
"""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass

from .api import AtagOneConnectionError
from .const import DISCOVERY_PACKET_SIZE, DISCOVERY_PORT, DISCOVERY_PREFIX, DISCOVERY_TIMEOUT

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AtagOneDiscovery:
    """A thermostat announcement: who sent it and which device it names."""

    host: str
    device_id: str


def parse_announcement(payload: bytes, host: str) -> AtagOneDiscovery | None:
    text = payload.decode("utf-8", errors="replace").rstrip("\x00")
    if not text.startswith(DISCOVERY_PREFIX):
        return None
    parts = text.split()
    if len(parts) < 2:
        return None
    return AtagOneDiscovery(host=host, device_id=parts[1])


def discover(timeout: float = DISCOVERY_TIMEOUT) -> AtagOneDiscovery | None:
    """Wait for a single broadcast and return the thermostat it announces.

    Returns None when nothing arrives within ``timeout`` seconds or the
    packet is not a thermostat announcement.
    """
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        try:
            sock.bind(("0.0.0.0", DISCOVERY_PORT))
        except OSError as err:
            raise AtagOneConnectionError(f"Cannot listen on UDP port {DISCOVERY_PORT}: {err}") from err
        sock.settimeout(timeout)
        try:
            payload, (host, _port) = sock.recvfrom(DISCOVERY_PACKET_SIZE)
        except TimeoutError:
            _LOGGER.debug("No thermostat announcement within %s seconds", timeout)
            return None
        except OSError as err:
            raise AtagOneConnectionError(f"Receiving on UDP port {DISCOVERY_PORT} failed: {err}") from err

    found = parse_announcement(payload, host)
    if found is None:
        _LOGGER.debug("Ignoring unexpected UDP payload from %s: %r", host, payload)
    return found
