"""Abstract protocols for image file access and history persistence."""

from pathlib import Path
from typing import Any, List, Optional, Protocol, Union


class FileRepositoryProtocol(Protocol):
    """Protocol defining the file operations used to pick and read images.

    All image file I/O in services goes through this interface to enable
    testing with mocks and alternative implementations.
    """

    def is_file(self, path: Union[str, Path]) -> bool:
        """Check if path is a file."""
        ...

    def is_dir(self, path: Union[str, Path]) -> bool:
        """Check if path is a directory."""
        ...

    def read_binary(self, path: Union[str, Path]) -> bytes:
        """Read file contents as bytes."""
        ...

    def list_files(
        self,
        directory: Union[str, Path],
        pattern: str = "*",
        recursive: bool = False,
    ) -> List[Path]:
        """List files in directory matching pattern."""
        ...


class HistoryStoreProtocol(Protocol):
    """Protocol for the key-value store that holds the history logs.

    Each key maps to a JSON-serializable list. Implementations must be
    durable across process restarts and raise PersistError on failure.
    """

    def read(self, key: str) -> Optional[List[Any]]:
        """Return the stored list, or None if the key is absent."""
        ...

    def write(self, key: str, items: List[Any]) -> None:
        """Replace the list stored under key."""
        ...

    def clear(self, key: str) -> None:
        """Remove key. Clearing an absent key succeeds."""
        ...
