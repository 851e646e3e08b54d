"""Local filesystem implementation of FileRepositoryProtocol."""

from pathlib import Path
from typing import List, Union


class LocalFileRepository:
    """Implementation of FileRepositoryProtocol using local filesystem."""

    def is_file(self, path: Union[str, Path]) -> bool:
        """Check if path is a file."""
        return Path(path).is_file()

    def is_dir(self, path: Union[str, Path]) -> bool:
        """Check if path is a directory."""
        return Path(path).is_dir()

    def read_binary(self, path: Union[str, Path]) -> bytes:
        """Read file contents as bytes."""
        return Path(path).read_bytes()

    def list_files(
        self,
        directory: Union[str, Path],
        pattern: str = "*",
        recursive: bool = False,
    ) -> List[Path]:
        """List files in directory matching pattern, sorted by path."""
        dir_path = Path(directory)
        if not dir_path.exists():
            return []

        search_pattern = f"**/{pattern}" if recursive else pattern
        return sorted(p for p in dir_path.glob(search_pattern) if p.is_file())
