"""Prediction and history record models.

Stored records keep the JSON key names of the mobile application's
history documents so existing `predictionHistory` and
`bulkPredictionHistory` payloads load unchanged.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from numbers import Real
from typing import Any, Dict, List, Optional, Sequence

from neurolens.core.constants import CLASS_LABELS, RESOLUTIONS
from neurolens.core.exceptions import ValidationError
from neurolens.models.base import ToDictMixin

# Label -> key prefix used by stored bulk records
BULK_KEY_PREFIXES: Dict[str, str] = {
    "Glioma": "glioma",
    "No Tumor": "noTumor",
    "Meningioma": "meningioma",
    "Pituitary": "pituitary",
}


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def validate_probabilities(probabilities: Any) -> List[float]:
    """
    Check that a probability vector has one numeric entry per label.

    Values must be finite but are not required to lie in [0, 1] or to sum
    to one.

    Raises:
        ValidationError: If the vector has the wrong length or a non-numeric
            or non-finite entry
    """
    if not isinstance(probabilities, (list, tuple)):
        raise ValidationError("Probability vector is missing or not a list")
    if len(probabilities) != len(CLASS_LABELS):
        raise ValidationError(
            f"Expected {len(CLASS_LABELS)} probabilities, got {len(probabilities)}"
        )
    for value in probabilities:
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ValidationError(f"Non-numeric probability: {value!r}")
        if not math.isfinite(value):
            raise ValidationError(f"Non-finite probability: {value!r}")
    return [float(v) for v in probabilities]


@dataclass(frozen=True)
class ClassifierConfig(ToDictMixin):
    """Request options sent with every image."""

    resolution: str = "150x150"
    grayscale: bool = False

    def __post_init__(self) -> None:
        if self.resolution not in RESOLUTIONS:
            raise ValidationError(
                f"Unsupported resolution '{self.resolution}'. "
                f"Choose one of: {', '.join(RESOLUTIONS)}"
            )

    def to_form(self) -> Dict[str, str]:
        """Form fields expected by the /predict endpoint."""
        return {
            "isGrayscale": "true" if self.grayscale else "false",
            "resolution": self.resolution,
        }


@dataclass(frozen=True)
class ClassificationResult(ToDictMixin):
    """Label and probability vector for one image."""

    label: str
    probabilities: Sequence[float]
    preprocess_function: Optional[str] = None

    @property
    def confidence(self) -> float:
        """Maximum probability expressed as a percentage."""
        return max(self.probabilities) * 100

    @classmethod
    def from_response(cls, body: Any) -> "ClassificationResult":
        """
        Build a result from a /predict response body.

        Raises:
            ValidationError: If the label is unknown or the probability
                vector is malformed
        """
        if not isinstance(body, dict):
            raise ValidationError("Prediction response is not a JSON object")

        label = body.get("class")
        if label not in CLASS_LABELS:
            raise ValidationError(f"Unknown class label: {label!r}")

        probabilities = validate_probabilities(body.get("probability"))
        return cls(
            label=label,
            probabilities=tuple(probabilities),
            preprocess_function=body.get("preprocess_function"),
        )


@dataclass
class SinglePredictionRecord(ToDictMixin):
    """One entry of the single-prediction history log."""

    label: str
    probabilities: List[float]
    image_reference: str
    model_name: str
    preprocess_function: Optional[str] = None
    note: str = ""
    created_at: str = field(default_factory=utc_timestamp)

    @classmethod
    def from_result(
        cls,
        result: ClassificationResult,
        image_reference: str,
        model_name: str,
    ) -> "SinglePredictionRecord":
        """Create a fresh record with an empty note."""
        return cls(
            label=result.label,
            probabilities=list(result.probabilities),
            image_reference=image_reference,
            model_name=model_name,
            preprocess_function=result.preprocess_function,
        )

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize using the stored document keys."""
        return {
            "class": self.label,
            "probability": list(self.probabilities),
            "imageUri": self.image_reference,
            "modelName": self.model_name,
            "preprocessFunction": self.preprocess_function,
            "note": self.note,
            "timestamp": self.created_at,
        }

    @classmethod
    def from_json_dict(cls, data: Dict[str, Any]) -> "SinglePredictionRecord":
        """Load a stored document. The probability vector is kept as stored."""
        probabilities = data.get("probability")
        return cls(
            label=data.get("class", ""),
            probabilities=list(probabilities) if isinstance(probabilities, list) else [],
            image_reference=data.get("imageUri", ""),
            model_name=data.get("modelName", ""),
            preprocess_function=data.get("preprocessFunction"),
            note=data.get("note") or "",
            created_at=data.get("timestamp", ""),
        )


@dataclass
class BulkAggregateRecord(ToDictMixin):
    """
    Aggregate of one bulk run.

    Attributes:
        counts: Successful predictions per label
        mean_confidence: Mean max-probability percentage per label,
            rounded to 2 decimals, 0 for labels without samples
        model_name: Model active on the server when the run started
        grayscale_enabled: Grayscale flag sent with every image
        created_at: Run timestamp, also the identity key for deletion
        resolution: Resolution sent with every image
        total: Items attempted
        failed: Items skipped because classification failed
        cancelled: Whether the run was stopped before the last item
    """

    counts: Dict[str, int]
    mean_confidence: Dict[str, float]
    model_name: str
    grayscale_enabled: bool
    created_at: str = field(default_factory=utc_timestamp)
    resolution: Optional[str] = None
    total: int = 0
    failed: int = 0
    cancelled: bool = False

    @property
    def successful(self) -> int:
        return sum(self.counts.values())

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize using the stored document keys."""
        data: Dict[str, Any] = {}
        for label in CLASS_LABELS:
            prefix = BULK_KEY_PREFIXES[label]
            data[prefix] = self.counts.get(label, 0)
            data[f"{prefix}Accuracy"] = self.mean_confidence.get(label, 0)
        data.update(
            {
                "modelName": self.model_name,
                "isGrayscale": self.grayscale_enabled,
                "timestamp": self.created_at,
                "resolution": self.resolution,
                "total": self.total,
                "failed": self.failed,
                "cancelled": self.cancelled,
            }
        )
        return data

    @classmethod
    def from_json_dict(cls, data: Dict[str, Any]) -> "BulkAggregateRecord":
        """Load a stored document, defaulting keys older documents lack."""
        counts = {}
        mean_confidence = {}
        for label in CLASS_LABELS:
            prefix = BULK_KEY_PREFIXES[label]
            counts[label] = int(data.get(prefix, 0) or 0)
            mean_confidence[label] = float(data.get(f"{prefix}Accuracy", 0) or 0)

        successful = sum(counts.values())
        failed = int(data.get("failed", 0) or 0)
        return cls(
            counts=counts,
            mean_confidence=mean_confidence,
            model_name=data.get("modelName", ""),
            grayscale_enabled=bool(data.get("isGrayscale", False)),
            created_at=data.get("timestamp", ""),
            resolution=data.get("resolution"),
            total=int(data.get("total", successful + failed) or 0),
            failed=failed,
            cancelled=bool(data.get("cancelled", False)),
        )
