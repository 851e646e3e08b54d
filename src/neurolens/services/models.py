# services/models.py
"""
Service for the classification server's model metadata.

Wraps the model-info, model-list and set-model endpoints, turning client
errors into failed ServiceResults for display.
"""

import logging
from typing import List, Optional

from neurolens.core.client import ClassifierClient
from neurolens.core.exceptions import NeurolensError

from .base import BaseService, ServiceResult

logger = logging.getLogger(__name__)

UNKNOWN_MODEL = "unknown"


class ModelService(BaseService):
    """
    Service for model metadata.

    Keeps the last known active model name so predictions can be recorded
    against it without a round trip per image.
    """

    def __init__(self, client: ClassifierClient) -> None:
        super().__init__()
        self.client = client
        self._current: Optional[str] = None

    def get_current_model(self, refresh: bool = False) -> ServiceResult[str]:
        """Get the active model name, querying the server if not known yet."""
        if self._current is not None and not refresh:
            return ServiceResult.ok(data=self._current)

        try:
            self._current = self.client.get_model_name()
        except NeurolensError as e:
            logger.warning(f"Could not get model name: {e}")
            return ServiceResult.fail(f"Could not get model name: {e}")

        return ServiceResult.ok(data=self._current)

    def list_models(self) -> ServiceResult[List[str]]:
        """List the models available on the server."""
        try:
            models = self.client.list_models()
        except NeurolensError as e:
            logger.warning(f"Could not get model list: {e}")
            return ServiceResult.fail(f"Could not get model list: {e}")

        return ServiceResult.ok(data=models, message=f"{len(models)} model(s) available")

    def select_model(self, model_name: str) -> ServiceResult[str]:
        """Activate a model on the server."""
        try:
            active = self.client.select_model(model_name)
        except NeurolensError as e:
            logger.warning(f"Could not set model {model_name}: {e}")
            return ServiceResult.fail(f"Could not set model: {e}")

        self._current = active
        logger.info(f"Active model: {active}")
        return ServiceResult.ok(data=active, message=f"Active model: {active}")

    def resolve_model_name(self, model_name: Optional[str] = None) -> ServiceResult[str]:
        """
        Model name to stamp on records.

        An explicit name wins. Otherwise the server is asked; if that fails,
        the result is still successful with UNKNOWN_MODEL and a warning.
        """
        if model_name:
            return ServiceResult.ok(data=model_name)

        result = self.get_current_model()
        if result.success:
            return result
        return ServiceResult.ok(data=UNKNOWN_MODEL, warnings=[result.error])
