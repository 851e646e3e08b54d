"""Builders for classifier results used across tests."""

from neurolens.models import ClassificationResult

DEFAULT_PROBABILITIES = {
    "Glioma": (0.9, 0.05, 0.03, 0.02),
    "No Tumor": (0.1, 0.8, 0.05, 0.05),
    "Meningioma": (0.1, 0.1, 0.7, 0.1),
    "Pituitary": (0.05, 0.05, 0.05, 0.85),
}


def make_result(label: str = "Glioma", probabilities=None) -> ClassificationResult:
    """Build a ClassificationResult; the default vector favours the label."""
    if probabilities is None:
        probabilities = DEFAULT_PROBABILITIES[label]
    return ClassificationResult(label=label, probabilities=tuple(probabilities))
