"""Unit tests for transports.tcp.sync_client module."""

import pytest
import socket
from unittest.mock import Mock, patch

from eofclient.transports.tcp.sync_client import SyncTCPClient

ADDRINFO = (
    socket.AF_INET,
    socket.SOCK_STREAM,
    socket.IPPROTO_TCP,
    "",
    ("127.0.0.1", 3010),
)


def connected_client(mock_socket_class, mock_socket=None):
    """Build a SyncTCPClient connected to a mocked socket."""
    mock_socket = mock_socket or Mock()
    mock_socket_class.return_value = mock_socket
    client = SyncTCPClient("127.0.0.1", 3010)
    client.connect(ADDRINFO)
    return client, mock_socket


class TestSyncTCPClient:
    """Test suite for SyncTCPClient."""

    def test_initialization(self):
        """Test client initialization."""
        client = SyncTCPClient("127.0.0.1", 3010)

        assert client.host == "127.0.0.1"
        assert client.port == 3010
        assert client.timeout is None
        assert client.socket is None

    def test_initialization_with_timeout(self):
        """Test initialization with custom timeout."""
        client = SyncTCPClient("127.0.0.1", 3010, timeout=5.0)

        assert client.timeout == 5.0

    @patch("socket.getaddrinfo")
    def test_resolve_returns_first_entry(self, mock_getaddrinfo):
        """Test resolution picks the first address."""
        second = (socket.AF_INET6, socket.SOCK_STREAM, 6, "", ("::1", 3010, 0, 0))
        mock_getaddrinfo.return_value = [ADDRINFO, second]

        client = SyncTCPClient("localhost", 3010)

        assert client.resolve() == ADDRINFO
        mock_getaddrinfo.assert_called_once_with(
            "localhost", 3010, type=socket.SOCK_STREAM, proto=socket.IPPROTO_TCP
        )

    @patch("socket.getaddrinfo")
    def test_resolve_no_addresses(self, mock_getaddrinfo):
        """Test empty resolver result raises gaierror."""
        mock_getaddrinfo.return_value = []

        client = SyncTCPClient("nowhere", 3010)

        with pytest.raises(socket.gaierror):
            client.resolve()

    @patch("socket.getaddrinfo")
    @patch("socket.socket")
    def test_connect_resolves_when_no_address_given(
        self, mock_socket_class, mock_getaddrinfo
    ):
        """Test connect resolves the host itself."""
        mock_getaddrinfo.return_value = [ADDRINFO]
        mock_socket = Mock()
        mock_socket_class.return_value = mock_socket

        client = SyncTCPClient("127.0.0.1", 3010, timeout=30.0)
        client.connect()

        mock_socket_class.assert_called_once_with(
            socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP
        )
        mock_socket.settimeout.assert_called_once_with(30.0)
        mock_socket.connect.assert_called_once_with(("127.0.0.1", 3010))
        assert client.socket == mock_socket

    @patch("socket.socket")
    def test_connect_failure_closes_socket(self, mock_socket_class):
        """Test a socket that fails to connect is closed and not kept."""
        mock_socket = Mock()
        mock_socket.connect.side_effect = ConnectionRefusedError("Connection refused")
        mock_socket_class.return_value = mock_socket

        client = SyncTCPClient("127.0.0.1", 3010)

        with pytest.raises(ConnectionRefusedError):
            client.connect(ADDRINFO)

        mock_socket.close.assert_called_once()
        assert client.socket is None

    @patch("socket.socket")
    def test_send(self, mock_socket_class):
        """Test sending data."""
        mock_socket = Mock()
        mock_socket.send.side_effect = lambda view: len(view)
        client, _ = connected_client(mock_socket_class, mock_socket)

        assert client.send(b"status<EOF>") == 11
        mock_socket.send.assert_called_once()

    @patch("socket.socket")
    def test_send_resumes_partial_writes(self, mock_socket_class):
        """Test send keeps writing until the whole payload is out."""
        written = []

        def partial_send(view):
            chunk = bytes(view[:4])
            written.append(chunk)
            return len(chunk)

        mock_socket = Mock()
        mock_socket.send.side_effect = partial_send
        client, _ = connected_client(mock_socket_class, mock_socket)

        sent = client.send(b"status<EOF>")

        assert sent == 11
        assert written == [b"stat", b"us<E", b"OF>"]

    @patch("socket.socket")
    def test_send_zero_bytes_written(self, mock_socket_class):
        """Test a zero-byte write is treated as a broken connection."""
        mock_socket = Mock()
        mock_socket.send.return_value = 0
        client, _ = connected_client(mock_socket_class, mock_socket)

        with pytest.raises(ConnectionError, match="broken"):
            client.send(b"data")

    def test_send_not_connected(self):
        """Test sending when not connected raises error."""
        client = SyncTCPClient("127.0.0.1", 3010)

        with pytest.raises(ConnectionError, match="Not connected"):
            client.send(b"data")

    @patch("socket.socket")
    def test_receive(self, mock_socket_class):
        """Test receiving data."""
        mock_socket = Mock()
        mock_socket.recv.return_value = b"IDLE"
        client, _ = connected_client(mock_socket_class, mock_socket)

        data = client.receive(256)

        assert data == b"IDLE"
        mock_socket.recv.assert_called_once_with(256)

    @patch("socket.socket")
    def test_receive_empty_response(self, mock_socket_class):
        """Test receiving empty response after peer close."""
        mock_socket = Mock()
        mock_socket.recv.return_value = b""
        client, _ = connected_client(mock_socket_class, mock_socket)

        assert client.receive() == b""

    def test_receive_not_connected(self):
        """Test receiving when not connected raises error."""
        client = SyncTCPClient("127.0.0.1", 3010)

        with pytest.raises(ConnectionError, match="Not connected"):
            client.receive()

    @patch("socket.socket")
    def test_timeout_error(self, mock_socket_class):
        """Test socket timeout error propagates."""
        mock_socket = Mock()
        mock_socket.recv.side_effect = socket.timeout("Timeout")
        client, _ = connected_client(mock_socket_class, mock_socket)

        with pytest.raises(socket.timeout):
            client.receive()

    @patch("socket.socket")
    def test_remote_address(self, mock_socket_class):
        """Test peer address lookup."""
        mock_socket = Mock()
        mock_socket.getpeername.return_value = ("127.0.0.1", 3010)
        client, _ = connected_client(mock_socket_class, mock_socket)

        assert client.remote_address == ("127.0.0.1", 3010)

    def test_remote_address_not_connected(self):
        """Test peer address requires a connection."""
        client = SyncTCPClient("127.0.0.1", 3010)

        with pytest.raises(ConnectionError, match="Not connected"):
            client.remote_address

    @patch("socket.socket")
    def test_close(self, mock_socket_class):
        """Test closing connection shuts down both directions."""
        client, mock_socket = connected_client(mock_socket_class)
        client.close()

        mock_socket.shutdown.assert_called_once_with(socket.SHUT_RDWR)
        mock_socket.close.assert_called_once()
        assert client.socket is None

    @patch("socket.socket")
    def test_close_after_peer_reset(self, mock_socket_class):
        """Test close still releases the socket when shutdown fails."""
        mock_socket = Mock()
        mock_socket.shutdown.side_effect = OSError("Transport endpoint is not connected")
        client, _ = connected_client(mock_socket_class, mock_socket)

        client.close()

        mock_socket.close.assert_called_once()
        assert client.socket is None

    @patch("socket.socket")
    def test_close_twice(self, mock_socket_class):
        """Test repeated close only closes the socket once."""
        client, mock_socket = connected_client(mock_socket_class)
        client.close()
        client.close()

        mock_socket.close.assert_called_once()

    def test_close_when_not_connected(self):
        """Test closing when not connected does nothing."""
        client = SyncTCPClient("127.0.0.1", 3010)
        client.close()  # Should not raise

        assert client.socket is None

    @patch("socket.getaddrinfo")
    @patch("socket.socket")
    def test_context_manager(self, mock_socket_class, mock_getaddrinfo):
        """Test using client as context manager."""
        mock_getaddrinfo.return_value = [ADDRINFO]
        mock_socket = Mock()
        mock_socket_class.return_value = mock_socket

        with SyncTCPClient("127.0.0.1", 3010) as client:
            assert client.socket is not None

        mock_socket.connect.assert_called_once()
        mock_socket.close.assert_called_once()

    @patch("socket.getaddrinfo")
    @patch("socket.socket")
    def test_context_manager_exception(self, mock_socket_class, mock_getaddrinfo):
        """Test context manager cleanup on exception."""
        mock_getaddrinfo.return_value = [ADDRINFO]
        mock_socket = Mock()
        mock_socket_class.return_value = mock_socket

        with pytest.raises(ValueError):
            with SyncTCPClient("127.0.0.1", 3010):
                raise ValueError("Test error")

        # Should still close
        mock_socket.close.assert_called_once()
