# controllers/__init__.py
"""
Controllers Package
===================

Controllers hold the in-memory view state that presentation code reads and
mutate it only through the history store.

Architecture:
    View (CLI)
        ↓
    Controller (HistoryController)
        ↓ (delegates to)
    Services (PredictionRecorder) and core (HistoryLog)
        ↓ (uses)
    History store (JsonHistoryStore)
"""

from neurolens.controllers.base import ControllerResult
from neurolens.controllers.history import HistoryController, format_probabilities

__all__ = [
    "ControllerResult",
    "HistoryController",
    "format_probabilities",
]
