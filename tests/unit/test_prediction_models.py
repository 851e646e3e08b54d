"""Tests for prediction and history record models."""

import re

import pytest

from neurolens.core.exceptions import ValidationError
from neurolens.models import (
    BulkAggregateRecord,
    ClassificationResult,
    ClassifierConfig,
    SinglePredictionRecord,
    utc_timestamp,
)


class TestClassifierConfig:
    def test_form_fields(self):
        config = ClassifierConfig(resolution="224x224", grayscale=True)
        assert config.to_form() == {"isGrayscale": "true", "resolution": "224x224"}

    def test_grayscale_false_is_lowercase_string(self):
        assert ClassifierConfig().to_form()["isGrayscale"] == "false"

    def test_rejects_unknown_resolution(self):
        with pytest.raises(ValidationError):
            ClassifierConfig(resolution="100x100")


class TestClassificationResult:
    def test_from_response(self):
        result = ClassificationResult.from_response(
            {"class": "Meningioma", "probability": [0.1, 0.1, 0.7, 0.1], "preprocess_function": "resnet"}
        )

        assert result.label == "Meningioma"
        assert result.probabilities == (0.1, 0.1, 0.7, 0.1)
        assert result.preprocess_function == "resnet"
        assert result.confidence == pytest.approx(70.0)

    def test_unknown_label(self):
        with pytest.raises(ValidationError):
            ClassificationResult.from_response({"class": "Astrocytoma", "probability": [0.25] * 4})

    @pytest.mark.parametrize(
        "probability",
        [None, [0.5, 0.5], [0.2, 0.2, 0.2, 0.2, 0.2], [0.1, "x", 0.4, 0.5], [True, 0, 0, 0],
         [float("nan"), 0.1, 0.1, 0.1], [float("inf"), 0, 0, 0]],
    )
    def test_malformed_probability_vector(self, probability):
        with pytest.raises(ValidationError):
            ClassificationResult.from_response({"class": "Glioma", "probability": probability})


class TestSinglePredictionRecord:
    def test_json_keys(self):
        record = SinglePredictionRecord(
            label="Glioma",
            probabilities=[0.9, 0.05, 0.03, 0.02],
            image_reference="file:///scans/a.jpg",
            model_name="resnet50",
            created_at="2024-05-01T10:00:00.000Z",
        )

        data = record.to_json_dict()

        assert data == {
            "class": "Glioma",
            "probability": [0.9, 0.05, 0.03, 0.02],
            "imageUri": "file:///scans/a.jpg",
            "modelName": "resnet50",
            "preprocessFunction": None,
            "note": "",
            "timestamp": "2024-05-01T10:00:00.000Z",
        }
        assert SinglePredictionRecord.from_json_dict(data) == record

    def test_missing_note_loads_empty(self):
        record = SinglePredictionRecord.from_json_dict(
            {"class": "Glioma", "probability": [1, 0, 0, 0], "imageUri": "x", "modelName": "m", "timestamp": "t"}
        )
        assert record.note == ""


class TestBulkAggregateRecord:
    def test_stored_document_keys(self):
        record = BulkAggregateRecord(
            counts={"Glioma": 2, "No Tumor": 1, "Meningioma": 0, "Pituitary": 0},
            mean_confidence={"Glioma": 80.0, "No Tumor": 65.5, "Meningioma": 0, "Pituitary": 0},
            model_name="resnet50",
            grayscale_enabled=True,
            created_at="2024-05-01T10:00:00.000Z",
            resolution="150x150",
            total=4,
            failed=1,
        )

        data = record.to_json_dict()

        assert data["glioma"] == 2
        assert data["noTumor"] == 1
        assert data["gliomaAccuracy"] == 80.0
        assert data["noTumorAccuracy"] == 65.5
        assert data["isGrayscale"] is True
        assert data["timestamp"] == "2024-05-01T10:00:00.000Z"
        assert BulkAggregateRecord.from_json_dict(data) == record

    def test_older_documents_default_added_keys(self):
        record = BulkAggregateRecord.from_json_dict(
            {
                "glioma": 3,
                "noTumor": 0,
                "meningioma": 1,
                "pituitary": 0,
                "gliomaAccuracy": 91.2,
                "noTumorAccuracy": 0,
                "meningiomaAccuracy": 77.0,
                "pituitaryAccuracy": 0,
                "modelName": "resnet50",
                "isGrayscale": False,
                "timestamp": "2024-05-01T10:00:00.000Z",
            }
        )

        assert record.successful == 4
        assert record.total == 4
        assert record.failed == 0
        assert record.resolution is None
        assert record.cancelled is False


def test_utc_timestamp_format():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", utc_timestamp())
