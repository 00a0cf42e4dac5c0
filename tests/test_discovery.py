"""Tests for ATAG One UDP discovery."""

from unittest.mock import MagicMock, patch

import pytest

from custom_components.atag_one import discovery
from custom_components.atag_one.api import AtagOneConnectionError
from custom_components.atag_one.const import DISCOVERY_PACKET_SIZE, DISCOVERY_PORT
from custom_components.atag_one.discovery import AtagOneDiscovery

DEVICE_ID = "6808-1401-3109_15-30-001-544"
HOST = "192.168.1.42"


@pytest.fixture
def mock_socket():
    """Patch the socket constructor and yield (constructor, socket)."""
    with patch("custom_components.atag_one.discovery.socket.socket") as socket_cls:
        sock = MagicMock()
        socket_cls.return_value.__enter__.return_value = sock
        socket_cls.return_value.__exit__.return_value = False
        yield socket_cls, sock


class TestParseAnnouncement:
    """Tests for parse_announcement."""

    def test_parse_announcement_returns_device(self) -> None:
        """Test that a thermostat broadcast yields the id and sender."""
        found = discovery.parse_announcement(f"ONE {DEVICE_ID}".encode(), HOST)
        assert found == AtagOneDiscovery(host=HOST, device_id=DEVICE_ID)

    def test_parse_announcement_strips_padding(self) -> None:
        """Test that NUL padding in a fixed size buffer is ignored."""
        payload = f"ONE {DEVICE_ID}".encode().ljust(DISCOVERY_PACKET_SIZE, b"\x00")
        assert discovery.parse_announcement(payload, HOST).device_id == DEVICE_ID

    @pytest.mark.parametrize("payload", [b"TWO 1234", b"one 1234", b"ONE", b"", b"\xff\xfe"])
    def test_parse_announcement_ignores_other_payloads(self, payload: bytes) -> None:
        """Test that anything but a ONE announcement is ignored."""
        assert discovery.parse_announcement(payload, HOST) is None


class TestDiscover:
    """Tests for discover."""

    def test_discover_returns_announcement(self, mock_socket) -> None:
        """Test that the first broadcast is parsed and the socket closed."""
        socket_cls, sock = mock_socket
        sock.recvfrom.return_value = (f"ONE {DEVICE_ID}".encode(), (HOST, 11000))

        found = discovery.discover(timeout=5)

        assert found == AtagOneDiscovery(host=HOST, device_id=DEVICE_ID)
        sock.bind.assert_called_once_with(("0.0.0.0", DISCOVERY_PORT))
        sock.settimeout.assert_called_once_with(5)
        sock.recvfrom.assert_called_once_with(DISCOVERY_PACKET_SIZE)
        socket_cls.return_value.__exit__.assert_called_once()

    def test_discover_enables_broadcast(self, mock_socket) -> None:
        """Test that broadcast reception is switched on."""
        socket_cls, sock = mock_socket
        sock.recvfrom.return_value = (f"ONE {DEVICE_ID}".encode(), (HOST, 11000))
        discovery.discover(timeout=5)
        options = [call.args[1] for call in sock.setsockopt.call_args_list]
        assert discovery.socket.SO_BROADCAST in options

    def test_discover_timeout_returns_none(self, mock_socket) -> None:
        """Test that a timeout is a normal empty result and releases the socket."""
        socket_cls, sock = mock_socket
        sock.recvfrom.side_effect = TimeoutError

        assert discovery.discover(timeout=1) is None
        socket_cls.return_value.__exit__.assert_called_once()

    def test_discover_unexpected_payload_returns_none(self, mock_socket) -> None:
        """Test that a foreign datagram yields None and releases the socket."""
        socket_cls, sock = mock_socket
        sock.recvfrom.return_value = (b"HELLO WORLD", (HOST, 11000))

        assert discovery.discover(timeout=1) is None
        socket_cls.return_value.__exit__.assert_called_once()

    def test_discover_bind_failure_raises(self, mock_socket) -> None:
        """Test that a port that cannot be bound is a connection error."""
        socket_cls, sock = mock_socket
        sock.bind.side_effect = OSError("Address already in use")

        with pytest.raises(AtagOneConnectionError, match="11000"):
            discovery.discover(timeout=1)
        socket_cls.return_value.__exit__.assert_called_once()
        sock.recvfrom.assert_not_called()

    def test_discover_receive_failure_raises(self, mock_socket) -> None:
        """Test that a socket error while waiting is a connection error."""
        socket_cls, sock = mock_socket
        sock.recvfrom.side_effect = OSError("Network is down")

        with pytest.raises(AtagOneConnectionError, match="Network is down"):
            discovery.discover(timeout=1)
        socket_cls.return_value.__exit__.assert_called_once()
