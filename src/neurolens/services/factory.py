"""
Service Factory
===============

Reusable factory for instantiating services with proper dependency injection.

Architecture Principle:
- Factory provides sensible defaults built from the loaded Config
  (ClassifierClient for the configured server, JsonHistoryStore in the
  configured history directory, LocalFileRepository for images)
- Applications and tests override any of them through the constructor
- Services remain decoupled from concrete implementations

Usage:
    from neurolens.services.factory import ServiceFactory

    factory = ServiceFactory()
    bulk_svc = factory.bulk
    history = factory.create_history_controller()

    # Tests - inject an in-memory store and a fake client
    factory = ServiceFactory(store=MemoryHistoryStore(), client=fake_client)
"""

from typing import TYPE_CHECKING, Optional

from neurolens.core.client import ClassifierClient
from neurolens.core.config import Config, get_config
from neurolens.repository import JsonHistoryStore, LocalFileRepository
from neurolens.repository.protocol import FileRepositoryProtocol, HistoryStoreProtocol

from .bulk import BulkPredictionService
from .images import ImageSourceService
from .models import ModelService
from .prediction import PredictionRecorder, PredictionService

if TYPE_CHECKING:
    from neurolens.controllers.history import HistoryController


class ServiceFactory:
    """
    Factory for creating service instances with proper dependency injection.

    Services are created on first access and shared afterwards, so the bulk
    service's run state and the model service's cached model name are seen
    by every caller using the same factory.

    Attributes:
        config: Configuration the defaults are built from
        file_repository: File repository used to read images
        store: History store holding both logs
        client: Remote classifier client
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        file_repository: Optional[FileRepositoryProtocol] = None,
        store: Optional[HistoryStoreProtocol] = None,
        client: Optional[ClassifierClient] = None,
    ):
        self.config = config or get_config()
        self.file_repository = file_repository or LocalFileRepository()
        self.store = store or JsonHistoryStore(self.config.history_dir)
        self._client = client

        self._images: Optional[ImageSourceService] = None
        self._models: Optional[ModelService] = None
        self._recorder: Optional[PredictionRecorder] = None
        self._prediction: Optional[PredictionService] = None
        self._bulk: Optional[BulkPredictionService] = None

    @property
    def client(self) -> ClassifierClient:
        if self._client is None:
            self._client = ClassifierClient(
                base_url=self.config.server_url,
                timeout=self.config.get("server", "timeout", 30),
                max_retries=self.config.get("api", "max_retries", 2),
                user_agent=self.config.get("api", "user_agent", "neurolens/0.1"),
            )
        return self._client

    @property
    def images(self) -> ImageSourceService:
        if self._images is None:
            self._images = ImageSourceService(self.file_repository)
        return self._images

    @property
    def models(self) -> ModelService:
        if self._models is None:
            self._models = ModelService(self.client)
        return self._models

    @property
    def recorder(self) -> PredictionRecorder:
        if self._recorder is None:
            self._recorder = PredictionRecorder(
                self.store, cap=self.config.get("history", "single_cap", 10)
            )
        return self._recorder

    @property
    def prediction(self) -> PredictionService:
        if self._prediction is None:
            self._prediction = PredictionService(
                self.client, self.images, self.models, self.recorder
            )
        return self._prediction

    @property
    def bulk(self) -> BulkPredictionService:
        if self._bulk is None:
            self._bulk = BulkPredictionService(
                self.client,
                self.store,
                self.images,
                self.models,
                cap=self.config.get("history", "bulk_cap", 50),
                max_images=self.config.get("bulk", "max_images", 500),
                seconds_per_image=self.config.get("bulk", "seconds_per_image", 2),
            )
        return self._bulk

    def create_history_controller(self) -> "HistoryController":
        """Create a HistoryController sharing this factory's store and recorder."""
        from neurolens.controllers.history import HistoryController

        return HistoryController(
            self.store,
            recorder=self.recorder,
            bulk_cap=self.config.get("history", "bulk_cap", 50),
        )
