"""Client session: one connect, send, receive, close exchange."""

import asyncio
from dataclasses import replace
from enum import Enum
from typing import Any, Callable, Optional, Tuple

from eofclient.config.settings import ClientConfig
from eofclient.errors import (
    AddressResolutionError,
    ConnectionFailedError,
    ReceiveFailedError,
    SendFailedError,
    SessionError,
)
from eofclient.framing import ResponseBuffer, frame_command
from eofclient.transports.tcp.async_client import AsyncTCPClient
from eofclient.transports.tcp.sync_client import SyncTCPClient

# getaddrinfo raises UnicodeError for labels IDNA cannot encode
_RESOLVE_ERRORS = (OSError, UnicodeError)
_IO_ERRORS = (OSError, asyncio.TimeoutError)


class SessionState(Enum):
    """Client session state."""

    IDLE = "idle"
    CONNECTING = "connecting"
    SENDING = "sending"
    RECEIVING = "receiving"
    COMPLETED = "completed"
    FAILED = "failed"


def _format_address(address: Tuple[Any, ...]) -> str:
    return f"{address[0]}:{address[1]}"


class _BaseSession:
    """State tracking shared by the sync and async sessions."""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        command: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        verbose: bool = True,
    ):
        """
        Initialize the session.

        Args:
            host: Server host address, overrides config.host
            port: Server port number, overrides config.port
            command: Command text, overrides config.command
            config: Optional ClientConfig. If None, defaults are used.
            verbose: Print a line for each phase transition
        """
        overrides = {
            name: value
            for name, value in (("host", host), ("port", port), ("command", command))
            if value is not None
        }
        self.config = replace(config or ClientConfig(), **overrides)
        self.verbose = verbose
        self._state = SessionState.IDLE
        self._error: Optional[SessionError] = None

    @property
    def host(self) -> str:
        return self.config.host

    @property
    def port(self) -> int:
        return self.config.port

    @property
    def command(self) -> str:
        return self.config.command

    def _begin(self) -> bytes:
        if self._state is not SessionState.IDLE:
            raise RuntimeError(f"Session already ran (state: {self._state.value})")
        payload = frame_command(
            self.config.command, self.config.end_marker, self.config.encoding
        )
        self._state = SessionState.CONNECTING
        return payload

    def _fail(self, error: SessionError) -> None:
        self._state = SessionState.FAILED
        self._error = error

    def _finish(self, buffer: ResponseBuffer) -> str:
        buffer.freeze()
        try:
            response = buffer.text(self.config.encoding)
        except UnicodeDecodeError as e:
            raise ReceiveFailedError(f"Response is not valid {e.encoding}") from e
        self._state = SessionState.COMPLETED
        self._log(f"Response received : {response}")
        return response

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message)

    def get_state(self) -> SessionState:
        """
        Get the current session state.

        Returns:
            Current SessionState
        """
        return self._state

    def get_error(self) -> Optional[SessionError]:
        """
        Get the error that ended the session.

        Returns:
            SessionError if state is FAILED, otherwise None
        """
        return self._error


class ClientSession(_BaseSession):
    """
    Blocking client session.

    Resolves the server, connects, sends the command followed by the end
    marker, then reads until the peer closes the connection. The connection
    is closed on every exit path.

    Example:
        session = ClientSession("127.0.0.1", 3010, "status")
        response = session.run()
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        command: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        verbose: bool = True,
        transport_factory: Callable[..., SyncTCPClient] = SyncTCPClient,
    ):
        super().__init__(host, port, command, config, verbose)
        self._transport_factory = transport_factory

    def run(self) -> str:
        """
        Perform the exchange.

        Returns:
            Decoded response text, empty if the peer sent nothing

        Raises:
            ValueError: If the command is empty or cannot be encoded
            RuntimeError: If the session already ran
            SessionError: If any phase fails
        """
        payload = self._begin()
        transport = self._transport_factory(
            self.host, self.port, timeout=self.config.timeout
        )
        try:
            try:
                addrinfo = transport.resolve()
            except _RESOLVE_ERRORS as e:
                raise AddressResolutionError(
                    f"Cannot resolve {self.host!r}: {e}"
                ) from e

            try:
                transport.connect(addrinfo)
                peer = _format_address(transport.remote_address)
            except OSError as e:
                raise ConnectionFailedError(
                    f"Cannot connect to {self.host}:{self.port}: {e}"
                ) from e
            self._log(f"Socket connected to {peer}")

            self._state = SessionState.SENDING
            try:
                sent = transport.send(payload)
            except OSError as e:
                raise SendFailedError(f"Send failed: {e}") from e
            self._log(f"Sent {sent} bytes to server.")

            self._state = SessionState.RECEIVING
            buffer = ResponseBuffer()
            try:
                while True:
                    chunk = transport.receive(self.config.buffer_size)
                    if not chunk:
                        break
                    buffer.append(chunk)
            except OSError as e:
                buffer.freeze()
                raise ReceiveFailedError(f"Receive failed: {e}") from e

            return self._finish(buffer)
        except SessionError as e:
            self._fail(e)
            raise
        finally:
            transport.close()


class AsyncClientSession(_BaseSession):
    """
    Client session driven by a single asyncio task.

    Each phase is awaited in order; config.timeout bounds every await.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        command: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        verbose: bool = True,
        transport_factory: Callable[..., AsyncTCPClient] = AsyncTCPClient,
    ):
        super().__init__(host, port, command, config, verbose)
        self._transport_factory = transport_factory

    async def _bounded(self, awaitable):
        if self.config.timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, self.config.timeout)

    async def run(self) -> str:
        """
        Perform the exchange.

        Returns:
            Decoded response text, empty if the peer sent nothing

        Raises:
            ValueError: If the command is empty or cannot be encoded
            RuntimeError: If the session already ran
            SessionError: If any phase fails
        """
        payload = self._begin()
        transport = self._transport_factory(self.host, self.port)
        try:
            try:
                addrinfo = await self._bounded(transport.resolve())
            except _RESOLVE_ERRORS + (asyncio.TimeoutError,) as e:
                raise AddressResolutionError(
                    f"Cannot resolve {self.host!r}: {e}"
                ) from e

            try:
                await self._bounded(transport.connect(addrinfo))
                peer = _format_address(transport.remote_address)
            except _IO_ERRORS as e:
                raise ConnectionFailedError(
                    f"Cannot connect to {self.host}:{self.port}: {e}"
                ) from e
            self._log(f"Socket connected to {peer}")

            self._state = SessionState.SENDING
            try:
                sent = await self._bounded(transport.send(payload))
            except _IO_ERRORS as e:
                raise SendFailedError(f"Send failed: {e}") from e
            self._log(f"Sent {sent} bytes to server.")

            self._state = SessionState.RECEIVING
            buffer = ResponseBuffer()
            try:
                while True:
                    chunk = await self._bounded(
                        transport.receive(self.config.buffer_size)
                    )
                    if not chunk:
                        break
                    buffer.append(chunk)
            except _IO_ERRORS as e:
                buffer.freeze()
                raise ReceiveFailedError(f"Receive failed: {e}") from e

            return self._finish(buffer)
        except SessionError as e:
            self._fail(e)
            raise
        finally:
            await transport.close()


def run(
    host: str,
    port: int,
    command: str,
    timeout: Optional[float] = None,
    verbose: bool = True,
) -> str:
    """Run one blocking exchange and return the response text."""
    config = ClientConfig(host=host, port=port, command=command, timeout=timeout)
    return ClientSession(config=config, verbose=verbose).run()


async def run_async(
    host: str,
    port: int,
    command: str,
    timeout: Optional[float] = None,
    verbose: bool = True,
) -> str:
    """Run one exchange on the current event loop and return the response text."""
    config = ClientConfig(host=host, port=port, command=command, timeout=timeout)
    return await AsyncClientSession(config=config, verbose=verbose).run()
