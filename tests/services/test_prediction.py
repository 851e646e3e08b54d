"""Tests for PredictionService and PredictionRecorder."""

import pytest

from neurolens.core.constants import SINGLE_HISTORY_KEY
from neurolens.core.exceptions import RemoteError
from neurolens.models import SinglePredictionRecord
from neurolens.services.images import ImageSourceService
from neurolens.services.models import ModelService
from neurolens.services.prediction import PredictionRecorder, PredictionService
from tests.mocks.results import make_result


@pytest.fixture
def recorder(memory_store):
    return PredictionRecorder(memory_store)


@pytest.fixture
def service(mock_client, mock_repository, recorder):
    return PredictionService(
        mock_client, ImageSourceService(mock_repository), ModelService(mock_client), recorder
    )


class TestPredictionService:
    def test_predict_records_result(self, service, memory_store, classifier_config):
        result = service.predict("/scans/a.jpg", classifier_config)

        assert result.success
        record = result.data
        assert isinstance(record, SinglePredictionRecord)
        assert record.label == "Glioma"
        assert record.note == ""
        assert record.model_name == "resnet50"
        assert result.message == "Prediction: Glioma"

        stored = memory_store.read(SINGLE_HISTORY_KEY)
        assert stored[0]["imageUri"] == "/scans/a.jpg"

    def test_remote_failure_records_nothing(self, service, mock_client, memory_store, classifier_config):
        mock_client.classify.side_effect = RemoteError(500, "model crashed")

        result = service.predict("/scans/a.jpg", classifier_config)

        assert not result.success
        assert "model crashed" in result.error
        assert memory_store.read(SINGLE_HISTORY_KEY) is None

    def test_unreadable_image(self, service, mock_client, classifier_config):
        result = service.predict("/scans/nope.jpg", classifier_config)

        assert not result.success
        mock_client.classify.assert_not_called()

    def test_history_write_failure_is_warning(self, mock_client, mock_repository, failing_store, classifier_config):
        service = PredictionService(
            mock_client,
            ImageSourceService(mock_repository),
            ModelService(mock_client),
            PredictionRecorder(failing_store),
        )

        result = service.predict("/scans/a.jpg", classifier_config)

        assert result.success
        assert result.data.label == "Glioma"
        assert any("could not be saved" in w for w in result.warnings)


class TestPredictionRecorder:
    def test_eleventh_prediction_evicts_oldest(self, recorder):
        for n in range(11):
            recorder.record(make_result("Pituitary"), f"/scans/{n}.jpg", "m")

        history = recorder.load().data

        assert len(history) == 10
        assert history[0].image_reference == "/scans/10.jpg"
        assert "/scans/0.jpg" not in [r.image_reference for r in history]

    def test_update_note_persists(self, recorder, memory_store):
        recorder.record(make_result(), "/scans/a.jpg", "m")
        history = recorder.load().data

        result = recorder.update_note(history, 0, "follow up in 3 months")

        assert result.success
        assert memory_store.read(SINGLE_HISTORY_KEY)[0]["note"] == "follow up in 3 months"

    def test_update_note_rolls_back_on_write_failure(self, failing_store):
        failing_store.fail_writes = False
        recorder = PredictionRecorder(failing_store)
        recorder.record(make_result(), "/scans/a.jpg", "m")
        history = recorder.load().data
        failing_store.fail_writes = True

        result = recorder.update_note(history, 0, "lost")

        assert not result.success
        assert history[0].note == ""
        assert failing_store.read(SINGLE_HISTORY_KEY)[0]["note"] == ""

    def test_update_note_out_of_range(self, recorder):
        result = recorder.update_note([], 0, "x")
        assert not result.success

    def test_reset(self, recorder, memory_store):
        recorder.record(make_result(), "/scans/a.jpg", "m")

        result = recorder.reset()

        assert result.success
        assert memory_store.read(SINGLE_HISTORY_KEY) is None
        assert recorder.load().data == []
