"""Asynchronous TCP client implementation."""

import asyncio
import socket
from typing import Any, Optional, Tuple

AddrInfo = Tuple[int, int, int, str, Tuple[Any, ...]]


class AsyncTCPClient:
    """Asynchronous TCP client using asyncio."""

    def __init__(self, host: str, port: int):
        """
        Initialize async TCP client.

        Args:
            host: Server hostname or IP
            port: Server port
        """
        self.host = host
        self.port = port
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    async def resolve(self) -> AddrInfo:
        """
        Resolve the server host to a stream socket address.

        Raises:
            socket.gaierror: If the resolver yields no usable address
        """
        loop = asyncio.get_running_loop()
        infos = await loop.getaddrinfo(
            self.host, self.port, type=socket.SOCK_STREAM, proto=socket.IPPROTO_TCP
        )
        if not infos:
            raise socket.gaierror(f"No address found for {self.host!r}")
        return infos[0]

    async def connect(self, addrinfo: Optional[AddrInfo] = None) -> None:
        """
        Establish connection to server.

        Args:
            addrinfo: Pre-resolved address; resolved here when omitted
        """
        family, _, _, _, sockaddr = addrinfo or await self.resolve()
        self.reader, self.writer = await asyncio.open_connection(
            sockaddr[0], sockaddr[1], family=family
        )

    @property
    def remote_address(self) -> Tuple[Any, ...]:
        """Address of the connected peer."""
        if not self.writer:
            raise ConnectionError("Not connected")
        peername = self.writer.get_extra_info("peername")
        # asyncio stores None when getpeername failed after a reset
        if peername is None:
            raise ConnectionError("Peer address unavailable")
        return peername

    async def send(self, data: bytes) -> int:
        """
        Send data to server.

        Args:
            data: Bytes to send

        Returns:
            Number of bytes written

        Raises:
            ConnectionError: If not connected
        """
        if not self.writer:
            raise ConnectionError("Not connected")
        self.writer.write(data)
        await self.writer.drain()
        return len(data)

    async def receive(self, buffer_size: int = 4096) -> bytes:
        """
        Receive data from server.

        Args:
            buffer_size: Size of receive buffer

        Returns:
            Received bytes (empty once the peer has closed)

        Raises:
            ConnectionError: If not connected
        """
        if not self.reader:
            raise ConnectionError("Not connected")
        return await self.reader.read(buffer_size)

    async def close(self) -> None:
        """Close connection."""
        if self.writer:
            writer = self.writer
            self.writer = None
            self.reader = None
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                # peer already tore the connection down
                pass

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
