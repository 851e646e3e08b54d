"""
HTTP Client Utilities
=====================

Provides common HTTP client functionality for interfacing with the
classification service.

Features:
- Requests session with a shared User-Agent and timeout
- Automatic retry with exponential backoff for GET requests only
- Mapping of network failures to TransportError and of non-2xx
  responses to RemoteError
"""

import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from neurolens.core.exceptions import RemoteError, TransportError

logger = logging.getLogger(__name__)


class APIClient:
    """
    HTTP client with retry and error mapping.

    GET requests are retried with exponential backoff on 502/503/504.
    POST requests are never retried: a prediction upload is issued exactly
    once and its failure is reported to the caller.

    Args:
        base_url: Base URL for API requests.
        timeout: Request timeout in seconds (default: 30).
        max_retries: Maximum number of retries for GET requests (default: 2).
        user_agent: User-Agent header value.

    Example:
        >>> client = APIClient(base_url="http://localhost:5000")
        >>> info = client.get("/model-info")
        >>> info["model_name"]
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30,
        max_retries: int = 2,
        user_agent: str = "neurolens/0.1",
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent

        self.session = requests.Session()
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=0.5,
            status_forcelist=[502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}" if self.base_url else endpoint

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        """
        Make a GET request.

        Args:
            endpoint: API endpoint (appended to base_url).
            params: Query parameters.
            **kwargs: Additional arguments passed to requests.

        Returns:
            Decoded JSON body.

        Raises:
            TransportError: On network failure, timeout or non-JSON body.
            RemoteError: On a non-2xx response.
        """
        return self._request("GET", endpoint, params=params, **kwargs)

    def post(
        self,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> Any:
        """
        Make a POST request.

        Args:
            endpoint: API endpoint.
            data: Form data.
            json_data: JSON data.
            files: Multipart file fields.
            **kwargs: Additional arguments passed to requests.

        Returns:
            Decoded JSON body.

        Raises:
            TransportError: On network failure, timeout or non-JSON body.
            RemoteError: On a non-2xx response.
        """
        return self._request("POST", endpoint, data=data, json=json_data, files=files, **kwargs)

    def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        url = self._url(endpoint)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            raise TransportError(f"Request to {url} timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        ok = 200 <= response.status_code < 300
        try:
            body = response.json()
        except ValueError as e:
            if not ok:
                raise RemoteError(response.status_code, response.reason) from e
            raise TransportError(f"Malformed response body from {url}") from e

        if not ok:
            message = body.get("error") if isinstance(body, dict) else None
            logger.debug(f"{method} {url} -> {response.status_code}: {message}")
            raise RemoteError(response.status_code, message)

        return body

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
