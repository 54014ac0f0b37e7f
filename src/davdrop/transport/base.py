"""File transport protocol for the remote storage service."""

from pathlib import Path
from typing import Protocol


class FileTransport(Protocol):
    """Protocol for remote file storage."""

    def exists(self, path: str) -> bool:
        """Check if a remote file or directory exists."""
        ...

    def mkdir(self, path: str, recursive: bool = True) -> None:
        """Create a remote directory."""
        ...

    def put(self, path: str, local_path: Path) -> None:
        """Stream a local file to a remote path."""
        ...

    def close(self) -> None:
        """Close the transport and release connections."""
        ...
