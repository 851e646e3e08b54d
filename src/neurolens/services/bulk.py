# services/bulk.py
"""
Bulk prediction service.

Runs one batch of images through the classifier strictly one at a time,
folds each outcome into per-class tallies, and commits a single aggregate
record to the bounded `bulkPredictionHistory` log (cap 50).

Run lifecycle:

    IDLE -> RUNNING -> COMPLETED
                    -> CANCELLED

A failed item (transport, remote, validation or unreadable image) is
counted and skipped; it never aborts the run. cancel() is checked between
items, and a cancelled run still commits the aggregate of the items
processed so far.
"""

import logging
import threading
from datetime import datetime
from typing import List, Optional, Sequence

from neurolens.core.aggregation import BulkTally
from neurolens.core.client import ClassifierClient
from neurolens.core.constants import (
    BULK_HISTORY_CAP,
    BULK_HISTORY_KEY,
    MAX_BULK_IMAGES,
    SECONDS_PER_IMAGE,
)
from neurolens.core.exceptions import NeurolensError, PersistError
from neurolens.core.history import HistoryLog
from neurolens.models.bulk import BulkRunResult, BulkRunState
from neurolens.models.prediction import BulkAggregateRecord, ClassifierConfig
from neurolens.repository.protocol import HistoryStoreProtocol

from .base import BaseService, BatchProgress, ServiceResult
from .images import ImageSourceService, reference_name
from .models import ModelService

logger = logging.getLogger(__name__)


class BulkPredictionService(BaseService):
    """
    Service for bulk classification runs.

    Only one run at a time per instance. cancel() may be called from another
    thread or a signal handler.

    Example:
        >>> service = BulkPredictionService(client, store, images, models)
        >>> service.set_progress_callback(lambda p: print(p.completed, p.total))
        >>> result = service.run(references, ClassifierConfig("150x150"))
        >>> result.data.record.counts
    """

    def __init__(
        self,
        client: ClassifierClient,
        store: HistoryStoreProtocol,
        images: ImageSourceService,
        models: ModelService,
        cap: int = BULK_HISTORY_CAP,
        max_images: int = MAX_BULK_IMAGES,
        seconds_per_image: float = SECONDS_PER_IMAGE,
    ) -> None:
        super().__init__()
        self.client = client
        self.images = images
        self.models = models
        self.log: HistoryLog[BulkAggregateRecord] = HistoryLog(
            store, BULK_HISTORY_KEY, cap, BulkAggregateRecord
        )
        self.max_images = max_images
        self.seconds_per_image = seconds_per_image

        self._state = BulkRunState.IDLE
        self._cancel = threading.Event()

    @property
    def state(self) -> BulkRunState:
        return self._state

    def estimate_seconds(self, count: int) -> float:
        """Advisory duration shown before a run: a fixed cost per image."""
        return min(count, self.max_images) * self.seconds_per_image

    def cancel(self) -> bool:
        """
        Ask the running job to stop after the current item.

        Returns:
            True if a run was in progress
        """
        if self._state is not BulkRunState.RUNNING:
            return False
        logger.info("Cancelling bulk run")
        self._cancel.set()
        return True

    def run(
        self,
        references: Sequence[str],
        config: ClassifierConfig,
        model_name: Optional[str] = None,
    ) -> ServiceResult[BulkRunResult]:
        """
        Classify every image and commit one aggregate record.

        Args:
            references: Ordered image references; only the first
                `max_images` are processed
            config: Resolution and grayscale flag sent with every image
            model_name: Model name to record; queried from the server if None

        Returns:
            ServiceResult with a BulkRunResult. A failed history write is
            reported as a warning; the computed record is still returned.
        """
        if self._state is BulkRunState.RUNNING:
            return ServiceResult.fail("A bulk run is already in progress")
        if not references:
            return ServiceResult.fail("Please select images first")

        warnings: List[str] = []
        batch = list(references)
        if len(batch) > self.max_images:
            warnings.append(
                f"Only the first {self.max_images} of {len(batch)} images will be processed."
            )
            batch = batch[: self.max_images]

        model = self.models.resolve_model_name(model_name)
        warnings.extend(model.warnings)

        start_time = datetime.now()
        self._cancel.clear()
        tally = BulkTally()
        self._state = BulkRunState.RUNNING
        logger.info(f"Bulk run started: {len(batch)} image(s), {config.resolution}, grayscale={config.grayscale}")

        try:
            self._process(batch, config, tally)
        except BaseException:
            self._state = BulkRunState.IDLE
            raise

        cancelled = self._cancel.is_set() and tally.processed < len(batch)
        self._state = BulkRunState.CANCELLED if cancelled else BulkRunState.COMPLETED

        record = tally.to_record(
            model_name=model.data,
            grayscale=config.grayscale,
            resolution=config.resolution,
            cancelled=cancelled,
        )

        history = None
        try:
            history = self.log.prepend(record)
        except PersistError as e:
            logger.error(f"Bulk prediction history could not be saved: {e}")
            warnings.append(f"Bulk prediction history could not be saved: {e}")

        end_time = datetime.now()
        result = BulkRunResult(
            record=record,
            state=self._state,
            total=len(batch),
            processed=tally.processed,
            failed=tally.failed,
            errors=list(tally.errors),
            history=history,
            start_time=start_time.isoformat(),
            end_time=end_time.isoformat(),
            duration_seconds=(end_time - start_time).total_seconds(),
        )

        summary = (
            f"{tally.successful} of {len(batch)} image(s) classified, {tally.failed} failed"
        )
        if cancelled:
            summary += f", cancelled after {tally.processed}"
        logger.info(f"Bulk run {self._state.value}: {summary}")

        return ServiceResult.ok(data=result, message=summary, warnings=warnings)

    def _process(self, batch: List[str], config: ClassifierConfig, tally: BulkTally) -> None:
        """Sequential per-item loop. Each call finishes before the next starts."""
        progress = BatchProgress(total=len(batch))
        self._report_progress(progress)

        for reference in batch:
            if self._cancel.is_set():
                break

            progress.current_file = reference
            try:
                image_bytes = self.images.read_bytes(reference)
                result = self.client.classify(image_bytes, config, reference_name(reference))
            except (NeurolensError, OSError) as e:
                tally.record_failure(reference, str(e))
                progress.errors.append(f"{reference}: {e}")
                logger.warning(f"Image upload error for {reference}: {e}")
            else:
                tally.record_success(result)

            progress.completed += 1
            progress.failed = tally.failed
            self._report_progress(progress)

