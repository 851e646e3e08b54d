"""
Bounded History Logs
====================

A bounded log is an insertion-ordered, most-recent-first sequence with a
fixed capacity. Insertion is always at the head; anything past the cap is
dropped from the tail.

HistoryLog binds a log to a store key, a cap and a record type exposing
`from_json_dict` / `to_json_dict`. Stored entries that cannot be parsed are
hidden from readers but kept in place on every write; only the tail past the
cap is ever dropped.
"""

import logging
from typing import Any, Generic, List, Sequence, Tuple, Type, TypeVar

from neurolens.repository.protocol import HistoryStoreProtocol

logger = logging.getLogger(__name__)

R = TypeVar("R")


def prepend_bounded(items: Sequence[R], item: R, cap: int) -> List[R]:
    """Return a new list with item at the head, truncated to cap."""
    if cap < 1:
        raise ValueError(f"Log capacity must be positive, got {cap}")
    return [item, *items][:cap]


class HistoryLog(Generic[R]):
    """
    Read-modify-write access to one bounded log in a history store.

    Not protected by any lock: callers serialize operations on the same key.

    Args:
        store: Key-value store holding the log
        key: Store key of the log
        cap: Maximum number of records kept
        record_type: Class with `from_json_dict` classmethod and
            `to_json_dict` method
    """

    def __init__(
        self,
        store: HistoryStoreProtocol,
        key: str,
        cap: int,
        record_type: Type[R],
    ) -> None:
        self.store = store
        self.key = key
        self.cap = cap
        self.record_type = record_type

    def _read_raw(self) -> List[Any]:
        return list(self.store.read(self.key) or [])

    def _parse(self, raw: Sequence[Any]) -> List[Tuple[int, R]]:
        """Readable records within the cap, paired with their stored position."""
        parsed: List[Tuple[int, R]] = []
        for position, entry in enumerate(raw[: self.cap]):
            if not isinstance(entry, dict):
                logger.warning(f"Skipping malformed entry in {self.key}: {entry!r}")
                continue
            try:
                parsed.append((position, self.record_type.from_json_dict(entry)))
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping unreadable entry in {self.key}: {e}")
        return parsed

    def _position(self, raw: Sequence[Any], index: int) -> int:
        positions = [position for position, _ in self._parse(raw)]
        if not 0 <= index < len(positions):
            raise IndexError(f"No record at index {index} in {self.key}")
        return positions[index]

    def load(self) -> List[R]:
        """Read the log, skipping unreadable entries, capped to the log size."""
        return [record for _, record in self._parse(self._read_raw())]

    def prepend(self, record: R) -> List[R]:
        """Read, insert at the head, truncate and write back. Returns the new log."""
        raw = prepend_bounded(self._read_raw(), record.to_json_dict(), self.cap)
        self.store.write(self.key, raw)
        return [r for _, r in self._parse(raw)]

    def replace(self, index: int, record: R) -> None:
        """Overwrite the index-th readable record of the stored log."""
        raw = self._read_raw()
        raw[self._position(raw, index)] = record.to_json_dict()
        self.store.write(self.key, raw[: self.cap])

    def remove(self, index: int) -> List[R]:
        """Delete the index-th readable record. Returns the new log."""
        raw = self._read_raw()
        del raw[self._position(raw, index)]
        raw = raw[: self.cap]
        self.store.write(self.key, raw)
        return [r for _, r in self._parse(raw)]

    def clear(self) -> None:
        """Remove the whole log."""
        self.store.clear(self.key)
