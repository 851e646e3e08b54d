"""Tests for APIClient error mapping."""

import pytest
import requests

from neurolens.core.exceptions import RemoteError, TransportError
from neurolens.core.http import APIClient


def _response(mocker, status=200, body=None, json_error=False, reason="OK"):
    response = mocker.Mock()
    response.status_code = status
    response.ok = status < 400
    response.reason = reason
    if json_error:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def client():
    return APIClient(base_url="http://server:5000/", timeout=5)


class TestAPIClient:
    def test_builds_url_and_returns_body(self, client, mocker):
        request = mocker.patch.object(
            client.session, "request", return_value=_response(mocker, body={"model_name": "m"})
        )

        assert client.get("/model-info") == {"model_name": "m"}
        request.assert_called_once_with("GET", "http://server:5000/model-info", timeout=5, params=None)

    def test_post_passes_form_and_files(self, client, mocker):
        request = mocker.patch.object(
            client.session, "request", return_value=_response(mocker, body={"class": "Glioma"})
        )

        client.post("/predict", data={"resolution": "150x150"}, files={"file": ("a.jpg", b"x")})

        _, kwargs = request.call_args
        assert kwargs["data"] == {"resolution": "150x150"}
        assert kwargs["files"] == {"file": ("a.jpg", b"x")}
        assert kwargs["json"] is None

    def test_connection_error_is_transport_error(self, client, mocker):
        mocker.patch.object(
            client.session, "request", side_effect=requests.ConnectionError("refused")
        )

        with pytest.raises(TransportError):
            client.get("/model-info")

    def test_timeout_is_transport_error(self, client, mocker):
        mocker.patch.object(client.session, "request", side_effect=requests.Timeout())

        with pytest.raises(TransportError, match="timed out"):
            client.post("/predict")

    def test_error_status_carries_server_message(self, client, mocker):
        mocker.patch.object(
            client.session,
            "request",
            return_value=_response(mocker, status=400, body={"error": "No file part"}),
        )

        with pytest.raises(RemoteError) as exc_info:
            client.post("/predict")

        assert exc_info.value.status == 400
        assert exc_info.value.message == "No file part"
        assert str(exc_info.value) == "Server error (400): No file part"

    def test_error_status_without_message(self, client, mocker):
        mocker.patch.object(
            client.session, "request", return_value=_response(mocker, status=500, body={})
        )

        with pytest.raises(RemoteError) as exc_info:
            client.post("/predict")
        assert exc_info.value.message == "Unknown error"

    def test_error_status_with_html_body(self, client, mocker):
        mocker.patch.object(
            client.session,
            "request",
            return_value=_response(mocker, status=502, json_error=True, reason="Bad Gateway"),
        )

        with pytest.raises(RemoteError) as exc_info:
            client.get("/model-list")
        assert exc_info.value.status == 502

    def test_redirect_status_is_not_success(self, client, mocker):
        mocker.patch.object(
            client.session,
            "request",
            return_value=_response(mocker, status=302, body={}, reason="Found"),
        )

        with pytest.raises(RemoteError) as exc_info:
            client.get("/model-info")
        assert exc_info.value.status == 302

    def test_malformed_success_body_is_transport_error(self, client, mocker):
        mocker.patch.object(
            client.session, "request", return_value=_response(mocker, json_error=True)
        )

        with pytest.raises(TransportError, match="Malformed"):
            client.post("/predict")
