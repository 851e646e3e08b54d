"""Tests for image selection and model services."""

import pytest

from neurolens.core.exceptions import RemoteError, TransportError
from neurolens.services.images import ImageSourceService, reference_name, reference_to_path
from neurolens.services.models import ModelService


class TestImageSourceService:
    def test_directory_expands_to_sorted_images(self, mock_repository):
        mock_repository.add_image("/scans/notes.txt", b"text")
        service = ImageSourceService(mock_repository)

        result = service.select(["/scans"])

        assert result.data == ["/scans/a.jpg", "/scans/b.jpg", "/scans/c.png"]

    def test_duplicates_dropped(self, mock_repository):
        service = ImageSourceService(mock_repository)

        result = service.select(["/scans/b.jpg", "/scans", "/scans/b.jpg"])

        assert result.data == ["/scans/b.jpg", "/scans/a.jpg", "/scans/c.png"]

    def test_nothing_found_fails(self, mock_repository):
        result = ImageSourceService(mock_repository).select(["/nowhere"])

        assert not result.success
        assert result.warnings == ["Not found: /nowhere"]

    def test_limit_truncates_with_warning(self, mock_repository):
        result = ImageSourceService(mock_repository).select(["/scans"], limit=2)

        assert result.data == ["/scans/a.jpg", "/scans/b.jpg"]
        assert result.warnings

    def test_file_uri_references(self, mock_repository):
        service = ImageSourceService(mock_repository)

        assert service.read_bytes("file:///scans/a.jpg").startswith(b"\xff\xd8")
        assert reference_to_path("file:///scans/my%20scan.jpg").name == "my scan.jpg"
        assert reference_name("/scans/a.jpg") == "a.jpg"

    def test_read_missing_raises_oserror(self, mock_repository):
        with pytest.raises(OSError):
            ImageSourceService(mock_repository).read_bytes("/scans/zzz.jpg")


class TestModelService:
    def test_current_model_is_cached(self, mock_client):
        service = ModelService(mock_client)

        service.get_current_model()
        service.get_current_model()

        assert mock_client.get_model_name.call_count == 1

    def test_refresh_queries_again(self, mock_client):
        service = ModelService(mock_client)
        service.get_current_model()

        service.get_current_model(refresh=True)

        assert mock_client.get_model_name.call_count == 2

    def test_select_updates_cache(self, mock_client):
        service = ModelService(mock_client)

        result = service.select_model("efficientnet")

        assert result.success
        assert service.get_current_model().data == "efficientnet"
        mock_client.get_model_name.assert_not_called()

    def test_failures_become_results(self, mock_client):
        mock_client.list_models.side_effect = TransportError("down")
        mock_client.select_model.side_effect = RemoteError(404, "Model not found")
        service = ModelService(mock_client)

        assert not service.list_models().success
        failed = service.select_model("nope")
        assert not failed.success
        assert "Model not found" in failed.error
