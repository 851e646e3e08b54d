"""CLI command modules for neurolens."""

from .bulk import bulk
from .config import config
from .history import history
from .models import models
from .predict import predict

__all__ = [
    "bulk",
    "config",
    "history",
    "models",
    "predict",
]
