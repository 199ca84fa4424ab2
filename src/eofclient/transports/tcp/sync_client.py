"""Synchronous TCP client implementation."""

import socket
from typing import Any, Optional, Tuple

AddrInfo = Tuple[int, int, int, str, Tuple[Any, ...]]


class SyncTCPClient:
    """Synchronous TCP client."""

    def __init__(self, host: str, port: int, timeout: Optional[float] = None):
        """
        Initialize TCP client.

        Args:
            host: Server hostname or IP
            port: Server port
            timeout: Socket timeout in seconds (None blocks forever)
        """
        self.host = host
        self.port = port
        self.timeout = timeout
        self.socket: Optional[socket.socket] = None

    def resolve(self) -> AddrInfo:
        """
        Resolve the server host to a stream socket address.

        Returns:
            First (family, type, proto, canonname, sockaddr) entry

        Raises:
            socket.gaierror: If the resolver yields no usable address
        """
        infos = socket.getaddrinfo(
            self.host, self.port, type=socket.SOCK_STREAM, proto=socket.IPPROTO_TCP
        )
        if not infos:
            raise socket.gaierror(f"No address found for {self.host!r}")
        return infos[0]

    def connect(self, addrinfo: Optional[AddrInfo] = None) -> None:
        """
        Establish connection to server.

        Args:
            addrinfo: Pre-resolved address; resolved here when omitted
        """
        family, socktype, proto, _, sockaddr = addrinfo or self.resolve()
        sock = socket.socket(family, socktype, proto)
        try:
            sock.settimeout(self.timeout)
            sock.connect(sockaddr)
        except BaseException:
            sock.close()
            raise
        self.socket = sock

    @property
    def remote_address(self) -> Tuple[Any, ...]:
        """Address of the connected peer."""
        if not self.socket:
            raise ConnectionError("Not connected")
        return self.socket.getpeername()

    def send(self, data: bytes) -> int:
        """
        Send data to server, resuming after partial writes.

        Args:
            data: Bytes to send

        Returns:
            Number of bytes written

        Raises:
            ConnectionError: If not connected
        """
        if not self.socket:
            raise ConnectionError("Not connected")
        view = memoryview(data)
        total = 0
        while total < len(view):
            sent = self.socket.send(view[total:])
            if sent == 0:
                raise ConnectionError("Socket connection broken")
            total += sent
        return total

    def receive(self, buffer_size: int = 4096) -> bytes:
        """
        Receive data from server.

        Args:
            buffer_size: Size of receive buffer

        Returns:
            Received bytes (empty once the peer has closed)

        Raises:
            ConnectionError: If not connected
        """
        if not self.socket:
            raise ConnectionError("Not connected")
        return self.socket.recv(buffer_size)

    def close(self) -> None:
        """Shut down both directions and close connection."""
        if self.socket:
            try:
                self.socket.shutdown(socket.SHUT_RDWR)
            except OSError:
                # peer already tore the connection down
                pass
            self.socket.close()
            self.socket = None

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
