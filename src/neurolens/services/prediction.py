# services/prediction.py
"""
Single-image prediction and the single-prediction history log.

PredictionRecorder owns the bounded `predictionHistory` log (cap 10).
PredictionService classifies one image and records the result.
"""

import logging
from typing import List, Optional

from neurolens.core.client import ClassifierClient
from neurolens.core.constants import SINGLE_HISTORY_CAP, SINGLE_HISTORY_KEY
from neurolens.core.exceptions import NeurolensError, PersistError
from neurolens.core.history import HistoryLog
from neurolens.models.prediction import (
    ClassificationResult,
    ClassifierConfig,
    SinglePredictionRecord,
)
from neurolens.repository.protocol import HistoryStoreProtocol

from .base import BaseService, ServiceResult
from .images import ImageSourceService, reference_name
from .models import ModelService

logger = logging.getLogger(__name__)


class PredictionRecorder(BaseService):
    """
    Service for the single-prediction history log.

    Note edits persist the whole log. If the write fails the edit is rolled
    back in memory so the loaded log always matches the store.
    """

    def __init__(self, store: HistoryStoreProtocol, cap: int = SINGLE_HISTORY_CAP) -> None:
        super().__init__()
        self.log: HistoryLog[SinglePredictionRecord] = HistoryLog(
            store, SINGLE_HISTORY_KEY, cap, SinglePredictionRecord
        )

    def record(
        self,
        result: ClassificationResult,
        image_reference: str,
        model_name: str,
    ) -> ServiceResult[List[SinglePredictionRecord]]:
        """Prepend a new record with an empty note and persist the log."""
        entry = SinglePredictionRecord.from_result(result, image_reference, model_name)
        try:
            history = self.log.prepend(entry)
        except PersistError as e:
            logger.error(f"Prediction history could not be saved: {e}")
            return ServiceResult.fail(f"Prediction history could not be saved: {e}", record=entry)

        return ServiceResult.ok(data=history, record=entry)

    def load(self) -> ServiceResult[List[SinglePredictionRecord]]:
        """Read the log from the store."""
        try:
            history = self.log.load()
        except PersistError as e:
            logger.error(f"Failed to load history: {e}")
            return ServiceResult.fail(f"Failed to load history: {e}")
        return ServiceResult.ok(data=history)

    def reset(self) -> ServiceResult[None]:
        """Remove the whole log."""
        try:
            self.log.clear()
        except PersistError as e:
            logger.error(f"Failed to reset history: {e}")
            return ServiceResult.fail(f"Failed to reset history: {e}")
        logger.info("Prediction history cleared.")
        return ServiceResult.ok(message="Prediction history cleared.")

    def update_note(
        self,
        history: List[SinglePredictionRecord],
        index: int,
        note: str,
    ) -> ServiceResult[List[SinglePredictionRecord]]:
        """
        Set the note of history[index] and persist it to the stored log.

        Args:
            history: The loaded, already capped log; edited in place
            index: Position in that log
            note: New note text

        Returns:
            ServiceResult with the log; failed if index is out of range or
            the write failed (the note is rolled back in that case)
        """
        if not 0 <= index < len(history):
            return ServiceResult.fail(f"No prediction at index {index} (history has {len(history)})")

        entry = history[index]
        previous = entry.note
        entry.note = note
        try:
            self.log.replace(index, entry)
        except (PersistError, IndexError) as e:
            entry.note = previous
            logger.error(f"Failed to save note: {e}")
            return ServiceResult.fail(f"Note not saved: {e}")

        return ServiceResult.ok(data=history, message="Note saved")


class PredictionService(BaseService):
    """
    Service for classifying a single image.

    Example:
        >>> service = PredictionService(client, images, models, recorder)
        >>> result = service.predict("scan.jpg", ClassifierConfig("224x224"))
        >>> if result.success:
        ...     print(result.data.label)
    """

    def __init__(
        self,
        client: ClassifierClient,
        images: ImageSourceService,
        models: ModelService,
        recorder: PredictionRecorder,
    ) -> None:
        super().__init__()
        self.client = client
        self.images = images
        self.models = models
        self.recorder = recorder

    def predict(
        self,
        image_reference: str,
        config: ClassifierConfig,
        model_name: Optional[str] = None,
    ) -> ServiceResult[SinglePredictionRecord]:
        """
        Classify one image and prepend it to the prediction history.

        A history write failure does not fail the prediction; it is reported
        as a warning.
        """
        try:
            image_bytes = self.images.read_bytes(image_reference)
        except OSError as e:
            return ServiceResult.fail(f"Could not read image {image_reference}: {e}")

        try:
            result = self.client.classify(image_bytes, config, reference_name(image_reference))
        except NeurolensError as e:
            logger.warning(f"Prediction failed for {image_reference}: {e}")
            return ServiceResult.fail(str(e))

        model = self.models.resolve_model_name(model_name)
        warnings = list(model.warnings)

        recorded = self.recorder.record(result, image_reference, model.data)
        if not recorded.success:
            warnings.append(recorded.error)

        return ServiceResult.ok(
            data=recorded.metadata["record"],
            message=f"Prediction: {result.label}",
            warnings=warnings,
        )
