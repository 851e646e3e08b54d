"""Bulk run state and result models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from neurolens.models.base import ToDictMixin
from neurolens.models.prediction import BulkAggregateRecord


class BulkRunState(str, Enum):
    """Lifecycle of a bulk run."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class BulkRunResult(ToDictMixin):
    """Outcome of one bulk run.

    `history` is the bulk log as written back to the store, or None when
    the commit failed.
    """

    record: BulkAggregateRecord
    state: BulkRunState
    total: int = 0
    processed: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)
    history: Optional[List[BulkAggregateRecord]] = None
    start_time: str = ""
    end_time: str = ""
    duration_seconds: float = 0.0

    @property
    def successful(self) -> int:
        return self.processed - self.failed
