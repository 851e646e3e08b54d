"""Repository layer for dependency injection: image files and history store."""

from neurolens.repository.json_store import JsonHistoryStore
from neurolens.repository.local import LocalFileRepository
from neurolens.repository.protocol import FileRepositoryProtocol, HistoryStoreProtocol

__all__ = [
    "FileRepositoryProtocol",
    "HistoryStoreProtocol",
    "JsonHistoryStore",
    "LocalFileRepository",
]
