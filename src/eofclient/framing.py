"""
Request and response framing.

Requests are text terminated by a literal end marker. Responses carry no
terminator: the peer closing the connection marks the end of the message.
"""

END_MARKER = "<EOF>"
DEFAULT_BUFFER_SIZE = 256


def frame_command(
    command: str, end_marker: str = END_MARKER, encoding: str = "ascii"
) -> bytes:
    """
    Encode a command with the end marker appended.

    Args:
        command: Command text, must be non-empty
        end_marker: Marker appended after the command
        encoding: Text encoding for the payload

    Returns:
        Bytes ready to transmit

    Raises:
        ValueError: If command is empty or cannot be encoded
    """
    if not command:
        raise ValueError("Command must be non-empty")
    try:
        return (command + end_marker).encode(encoding)
    except UnicodeEncodeError as e:
        raise ValueError(f"Command cannot be encoded as {encoding}: {e}") from e


class ResponseBuffer:
    """Append-only accumulator for response bytes."""

    def __init__(self):
        self._data = bytearray()
        self._frozen = False

    def append(self, data: bytes) -> None:
        """
        Add received bytes to the end of the buffer.

        Args:
            data: Bytes from one read

        Raises:
            RuntimeError: If the buffer is frozen
        """
        if self._frozen:
            raise RuntimeError("Response buffer is frozen")
        self._data.extend(data)

    def freeze(self) -> None:
        """Stop accepting appends once receiving has ended."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def getvalue(self) -> bytes:
        """Return a copy of the accumulated bytes."""
        return bytes(self._data)

    def text(self, encoding: str = "ascii") -> str:
        """
        Decode the accumulated response.

        A buffer holding one byte or less yields an empty response.

        Raises:
            UnicodeDecodeError: If the bytes are not valid in encoding
        """
        if len(self._data) > 1:
            return self._data.decode(encoding)
        return ""

    def __len__(self) -> int:
        return len(self._data)
