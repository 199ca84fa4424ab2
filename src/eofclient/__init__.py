"""Minimal TCP client for <EOF>-terminated command exchanges."""

from eofclient.config.settings import ClientConfig
from eofclient.errors import (
    AddressResolutionError,
    ConnectionFailedError,
    ErrorKind,
    ReceiveFailedError,
    SendFailedError,
    SessionError,
)
from eofclient.framing import END_MARKER, ResponseBuffer, frame_command
from eofclient.session import (
    AsyncClientSession,
    ClientSession,
    SessionState,
    run,
    run_async,
)

__version__ = "0.1.0"
__all__ = [
    "ClientSession",
    "AsyncClientSession",
    "SessionState",
    "ClientConfig",
    "ErrorKind",
    "SessionError",
    "AddressResolutionError",
    "ConnectionFailedError",
    "SendFailedError",
    "ReceiveFailedError",
    "END_MARKER",
    "ResponseBuffer",
    "frame_command",
    "run",
    "run_async",
    "__version__",
]
