# services/__init__.py
"""
Services Package
================

Application services that orchestrate between views (CLI) and core logic.

Services provide:
- A clean interface for views to invoke operations
- Error handling: expected failures come back as ServiceResult.fail
- Progress reporting and logging

Architecture:
    View (CLI)
        ↓ (references, ClassifierConfig)
    Service
        ↓ (delegates to)
    Core (ClassifierClient, BulkTally, HistoryLog)
        ↓ (uses)
    Repository (history store, image files)

Usage:
    from neurolens.services import ServiceFactory

    factory = ServiceFactory()
    selection = factory.images.select(["scans/"])
    result = factory.bulk.run(selection.data, ClassifierConfig("150x150"))
"""

from neurolens.services.base import BaseService, BatchProgress, ServiceResult
from neurolens.services.bulk import BulkPredictionService
from neurolens.services.factory import ServiceFactory
from neurolens.services.images import ImageSourceService
from neurolens.services.models import ModelService
from neurolens.services.prediction import PredictionRecorder, PredictionService

__all__ = [
    "BaseService",
    "BatchProgress",
    "BulkPredictionService",
    "ImageSourceService",
    "ModelService",
    "PredictionRecorder",
    "PredictionService",
    "ServiceFactory",
    "ServiceResult",
]
