# controllers/history.py
"""
History Controller
==================

Read, update and delete operations over the two history logs, with the
loaded logs kept in memory for display.

In-memory state changes only after the store accepted the change, except
note edits, which are rolled back by the recorder when the write fails.
"""

import logging
from typing import List, Optional, Sequence

from neurolens.core.constants import (
    BULK_HISTORY_CAP,
    BULK_HISTORY_KEY,
    CLASS_LABELS,
    PROBABILITY_FALLBACK_MESSAGE,
)
from neurolens.core.exceptions import PersistError
from neurolens.core.history import HistoryLog
from neurolens.models.prediction import BulkAggregateRecord, SinglePredictionRecord
from neurolens.repository.protocol import HistoryStoreProtocol
from neurolens.services.prediction import PredictionRecorder

from .base import ControllerResult

logger = logging.getLogger(__name__)


def format_probabilities(probabilities: Optional[Sequence[float]]) -> str:
    """One "Label: xx.xx%" line per class, or a fallback message for a bad vector."""
    if not probabilities or len(probabilities) != len(CLASS_LABELS):
        return PROBABILITY_FALLBACK_MESSAGE

    try:
        return "\n".join(
            f"{label}: {float(p) * 100:.2f}%" for label, p in zip(CLASS_LABELS, probabilities)
        )
    except (TypeError, ValueError):
        return PROBABILITY_FALLBACK_MESSAGE


class HistoryController:
    """
    Controller for the prediction history views.

    Args:
        store: History store shared with the prediction services
        recorder: Recorder owning the single-prediction log; built from
            store when None
        bulk_cap: Capacity of the bulk log

    Example:
        >>> controller = HistoryController(JsonHistoryStore("~/.neurolens"))
        >>> controller.load_bulk_history()
        >>> controller.delete_bulk_record("2024-05-01T10:00:00.000Z")
    """

    def __init__(
        self,
        store: HistoryStoreProtocol,
        recorder: Optional[PredictionRecorder] = None,
        bulk_cap: int = BULK_HISTORY_CAP,
    ) -> None:
        self.recorder = recorder or PredictionRecorder(store)
        self.bulk_log: HistoryLog[BulkAggregateRecord] = HistoryLog(
            store, BULK_HISTORY_KEY, bulk_cap, BulkAggregateRecord
        )
        self.single_history: List[SinglePredictionRecord] = []
        self.bulk_history: List[BulkAggregateRecord] = []

    # =========================================================================
    # Single predictions
    # =========================================================================

    def load_single_history(self) -> ControllerResult[List[SinglePredictionRecord]]:
        """Load the single-prediction log, capped to its size."""
        result = self.recorder.load()
        if not result.success:
            return ControllerResult.fail(result.error)

        self.single_history = result.data
        return ControllerResult.ok(data=self.single_history)

    def reset_single_history(self) -> ControllerResult[List[SinglePredictionRecord]]:
        """Clear the entire single-prediction log."""
        result = self.recorder.reset()
        if not result.success:
            return ControllerResult.fail(result.error)

        self.single_history = []
        return ControllerResult.ok(data=self.single_history, message=result.message)

    def update_note(self, index: int, note: str) -> ControllerResult[SinglePredictionRecord]:
        """Edit the note of the loaded record at index and persist the whole log."""
        result = self.recorder.update_note(self.single_history, index, note)
        if not result.success:
            return ControllerResult.fail(result.error)

        return ControllerResult.ok(data=self.single_history[index], message=result.message)

    # =========================================================================
    # Bulk aggregates
    # =========================================================================

    def load_bulk_history(self) -> ControllerResult[List[BulkAggregateRecord]]:
        """Load the bulk aggregate log."""
        try:
            records = self.bulk_log.load()
        except PersistError as e:
            logger.error(f"Failed to load bulk history: {e}")
            return ControllerResult.fail(f"Failed to load bulk history: {e}")

        self.bulk_history = records
        return ControllerResult.ok(data=self.bulk_history)

    def refresh_bulk_history(self) -> ControllerResult[List[BulkAggregateRecord]]:
        """Re-read the bulk log from the store, replacing the loaded copy."""
        result = self.load_bulk_history()
        if not result.success:
            return ControllerResult.fail(f"History could not be refreshed: {result.error}")
        return result

    def delete_bulk_record(self, created_at: str) -> ControllerResult[List[BulkAggregateRecord]]:
        """
        Remove the bulk record whose timestamp matches created_at.

        Timestamps identify records, so at most one record is removed. An
        unknown timestamp leaves the log unchanged and is not an error.
        """
        index = next(
            (i for i, r in enumerate(self.bulk_history) if r.created_at == created_at), None
        )
        if index is None:
            return ControllerResult.ok(
                data=self.bulk_history,
                message=f"No bulk record with timestamp {created_at}",
                deleted=0,
            )

        try:
            remaining = self.bulk_log.remove(index)
        except (PersistError, IndexError) as e:
            logger.error(f"Failed to delete bulk record: {e}")
            return ControllerResult.fail(f"History entry could not be deleted: {e}")

        self.bulk_history = remaining
        return ControllerResult.ok(
            data=self.bulk_history,
            message=f"Deleted bulk record {created_at}",
            deleted=1,
        )
