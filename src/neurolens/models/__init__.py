"""Data models for neurolens."""

from neurolens.models.base import ToDictMixin
from neurolens.models.bulk import BulkRunResult, BulkRunState
from neurolens.models.prediction import (
    BulkAggregateRecord,
    ClassificationResult,
    ClassifierConfig,
    SinglePredictionRecord,
    utc_timestamp,
)

__all__ = [
    "ToDictMixin",
    "BulkAggregateRecord",
    "BulkRunResult",
    "BulkRunState",
    "ClassificationResult",
    "ClassifierConfig",
    "SinglePredictionRecord",
    "utc_timestamp",
]
