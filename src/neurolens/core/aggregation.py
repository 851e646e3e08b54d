"""
Bulk Aggregation
================

Tally state for a bulk run and the pure functions that fold one prediction
into it and compute per-class mean confidence.

A confidence sample is the maximum entry of an item's probability vector,
as a percentage, filed under the item's predicted label.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np

from neurolens.core.constants import CLASS_LABELS
from neurolens.models.prediction import BulkAggregateRecord, ClassificationResult, utc_timestamp


def confidence_sample(probabilities: Sequence[float]) -> float:
    """Maximum probability as a percentage."""
    return float(max(probabilities)) * 100


def mean_confidence(samples: Sequence[float]) -> float:
    """Arithmetic mean rounded to 2 decimals; 0 for an empty sequence."""
    if len(samples) == 0:
        return 0.0
    return round(float(np.mean(samples)), 2)


def _zero_counts() -> Dict[str, int]:
    return {label: 0 for label in CLASS_LABELS}


def _empty_samples() -> Dict[str, List[float]]:
    return {label: [] for label in CLASS_LABELS}


@dataclass
class BulkTally:
    """In-memory tallies of a running bulk job. Never persisted."""

    counts: Dict[str, int] = field(default_factory=_zero_counts)
    samples: Dict[str, List[float]] = field(default_factory=_empty_samples)
    failed: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def successful(self) -> int:
        return sum(self.counts.values())

    @property
    def processed(self) -> int:
        return self.successful + self.failed

    def record_success(self, result: ClassificationResult) -> None:
        """Count the predicted label and file its confidence sample."""
        self.counts[result.label] += 1
        self.samples[result.label].append(confidence_sample(result.probabilities))

    def record_failure(self, item: str, message: str) -> None:
        """Count a skipped item and keep its error message."""
        self.failed += 1
        self.errors.append(f"{item}: {message}")

    def mean_confidences(self) -> Dict[str, float]:
        return {label: mean_confidence(self.samples[label]) for label in CLASS_LABELS}

    def to_record(
        self,
        model_name: str,
        grayscale: bool,
        resolution: str,
        cancelled: bool = False,
    ) -> BulkAggregateRecord:
        """Assemble the aggregate record, stamped with the current time."""
        return BulkAggregateRecord(
            counts=dict(self.counts),
            mean_confidence=self.mean_confidences(),
            model_name=model_name,
            grayscale_enabled=grayscale,
            created_at=utc_timestamp(),
            resolution=resolution,
            total=self.processed,
            failed=self.failed,
            cancelled=cancelled,
        )
