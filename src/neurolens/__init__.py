"""
Neurolens - Brain MRI Classification Client
===========================================

Version: 0.1.0
"""

__version__ = "0.1.0"

from neurolens.core.constants import CLASS_LABELS, MAX_BULK_IMAGES, RESOLUTIONS

__all__ = [
    "__version__",
    "CLASS_LABELS",
    "MAX_BULK_IMAGES",
    "RESOLUTIONS",
]
