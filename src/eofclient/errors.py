"""Session error taxonomy."""

from enum import Enum


class ErrorKind(Enum):
    """Phase in which a session failed."""

    ADDRESS_RESOLUTION = "address_resolution"
    CONNECTION_FAILED = "connection_failed"
    SEND_FAILED = "send_failed"
    RECEIVE_FAILED = "receive_failed"


class SessionError(Exception):
    """Base class for errors that end a client session."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class AddressResolutionError(SessionError):
    """Server address could not be resolved."""

    kind = ErrorKind.ADDRESS_RESOLUTION


class ConnectionFailedError(SessionError):
    """Connection to the server could not be established."""

    kind = ErrorKind.CONNECTION_FAILED


class SendFailedError(SessionError):
    """Command could not be written to the connection."""

    kind = ErrorKind.SEND_FAILED


class ReceiveFailedError(SessionError):
    """Reading the response failed before the peer closed."""

    kind = ErrorKind.RECEIVE_FAILED
