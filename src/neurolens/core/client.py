"""
Remote Classifier Client
========================

Thin wrapper over the classification service endpoints:

    POST /predict     multipart image + resolution + isGrayscale
    GET  /model-info  {"model_name": ...}
    GET  /model-list  {"models": [...]}
    POST /set-model   {"model_name": ...} -> {"model_name": ...}

Every method raises TransportError, RemoteError or ValidationError; callers
decide whether to absorb or surface them.
"""

import logging
from typing import List, Optional

from neurolens.core.exceptions import ValidationError
from neurolens.core.http import APIClient
from neurolens.models.prediction import ClassificationResult, ClassifierConfig

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "image.jpg"


class ClassifierClient:
    """
    Client for the remote classification service.

    Args:
        base_url: Server base URL, e.g. http://localhost:5000
        timeout: Per-request timeout in seconds
        max_retries: Retries for the metadata GET endpoints
        user_agent: User-Agent header value
        http: Pre-built APIClient, mainly for tests

    Example:
        >>> client = ClassifierClient("http://localhost:5000")
        >>> result = client.classify(image_bytes, ClassifierConfig("224x224"))
        >>> result.label, result.confidence
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30,
        max_retries: int = 2,
        user_agent: str = "neurolens/0.1",
        http: Optional[APIClient] = None,
    ) -> None:
        self.http = http or APIClient(
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            user_agent=user_agent,
        )

    def classify(
        self,
        image_bytes: bytes,
        config: ClassifierConfig,
        filename: str = DEFAULT_FILENAME,
    ) -> ClassificationResult:
        """
        Classify one image.

        Raises:
            TransportError: Network failure, timeout or malformed body
            RemoteError: Non-success response
            ValidationError: Response with an unknown label or a bad
                probability vector
        """
        body = self.http.post(
            "/predict",
            data=config.to_form(),
            files={"file": (filename or DEFAULT_FILENAME, image_bytes)},
        )
        result = ClassificationResult.from_response(body)
        logger.debug(f"{filename}: {result.label} ({result.confidence:.2f}%)")
        return result

    def get_model_name(self) -> str:
        """Name of the model currently active on the server."""
        body = self.http.get("/model-info")
        name = body.get("model_name") if isinstance(body, dict) else None
        if not isinstance(name, str):
            raise ValidationError("Model info response has no model_name")
        return name

    def list_models(self) -> List[str]:
        """Names of the models the server can switch to."""
        body = self.http.get("/model-list")
        models = body.get("models") if isinstance(body, dict) else None
        if not isinstance(models, list):
            raise ValidationError("Model list response has no models list")
        return [str(m) for m in models]

    def select_model(self, model_name: str) -> str:
        """Activate a model on the server and return the active model name."""
        body = self.http.post("/set-model", json_data={"model_name": model_name})
        name = body.get("model_name") if isinstance(body, dict) else None
        if not isinstance(name, str):
            raise ValidationError("Model selection response has no model_name")
        return name

    def close(self) -> None:
        self.http.close()
