"""Client configuration settings."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ClientConfig:
    """Client configuration."""

    host: str = "127.0.0.1"
    port: int = 3010
    command: str = "status"

    # Framing settings
    end_marker: str = "<EOF>"
    buffer_size: int = 256
    encoding: str = "ascii"

    # None waits forever on every phase
    timeout: Optional[float] = None

    def __post_init__(self):
        """
        Validate settings.

        Raises:
            ValueError: If buffer_size is not a positive integer
        """
        # a zero-byte read marks peer close, so reads must request at least one byte
        if self.buffer_size < 1:
            raise ValueError(f"buffer_size must be positive, got {self.buffer_size}")
