"""
Constants
=========

Fixed label set, resolutions, storage keys and caps shared across neurolens.
"""

from typing import List, Tuple

# Label order matches the probability vector returned by the service
CLASS_LABELS: Tuple[str, ...] = ("Glioma", "No Tumor", "Meningioma", "Pituitary")

RESOLUTIONS: Tuple[str, ...] = (
    "128x128",
    "150x150",
    "160x160",
    "192x192",
    "224x224",
    "299x299",
)
DEFAULT_RESOLUTION: str = "150x150"

# History store keys
SINGLE_HISTORY_KEY: str = "predictionHistory"
BULK_HISTORY_KEY: str = "bulkPredictionHistory"

# Bounded log caps
SINGLE_HISTORY_CAP: int = 10
BULK_HISTORY_CAP: int = 50

# Bulk runs
MAX_BULK_IMAGES: int = 500
SECONDS_PER_IMAGE: int = 2

SUPPORTED_IMAGE_EXTENSIONS: List[str] = [
    ".jpg",
    ".jpeg",
    ".png",
    ".bmp",
    ".tif",
    ".tiff",
    ".webp",
]

PROBABILITY_FALLBACK_MESSAGE: str = "Probabilities could not be calculated."
