"""
JSON-based History Store
========================

Stores each history log as a JSON document in a storage directory:
<directory>/<key>.json

Writes go to a temporary file that atomically replaces the document, so a
crash mid-write leaves the previous log intact.

Usage:
    from neurolens.repository.json_store import JsonHistoryStore

    store = JsonHistoryStore("~/.local/share/neurolens")
    store.write("bulkPredictionHistory", [record.to_json_dict()])
    items = store.read("bulkPredictionHistory")
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, List, Optional, Union

from neurolens.core.exceptions import PersistError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonHistoryStore:
    """Durable key-value store holding one JSON list per key."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise PersistError(f"Invalid history key: {key!r}", key=key)
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[List[Any]]:
        """Return the stored list, or None if nothing is stored under key."""
        path = self._path(key)
        if not path.exists():
            return None

        try:
            items = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise PersistError(f"Could not read {key}: {e}", key=key) from e

        if items is None:
            return None
        if not isinstance(items, list):
            raise PersistError(f"Stored {key} is not a list", key=key)
        return items

    def write(self, key: str, items: List[Any]) -> None:
        """Atomically replace the list stored under key."""
        path = self._path(key)
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2)
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as e:
            raise PersistError(f"Could not write {key}: {e}", key=key) from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

        logger.debug(f"Wrote {len(items)} item(s) to {path}")

    def clear(self, key: str) -> None:
        """Remove the document for key. Missing documents are not an error."""
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistError(f"Could not clear {key}: {e}", key=key) from e
