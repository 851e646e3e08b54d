"""Tests for the JSON history store."""

import json

import pytest

from neurolens.core.constants import BULK_HISTORY_KEY, SINGLE_HISTORY_KEY
from neurolens.core.exceptions import PersistError
from neurolens.models import BulkAggregateRecord, SinglePredictionRecord
from neurolens.repository import JsonHistoryStore


@pytest.fixture
def store(tmp_path):
    return JsonHistoryStore(tmp_path / "history")


class TestJsonHistoryStore:
    def test_read_missing_returns_none(self, store):
        assert store.read("predictionHistory") is None

    def test_write_then_read(self, store, tmp_path):
        store.write("predictionHistory", [{"class": "Glioma"}])

        assert store.read("predictionHistory") == [{"class": "Glioma"}]
        assert (tmp_path / "history" / "predictionHistory.json").exists()

    def test_write_replaces_previous_document(self, store, tmp_path):
        store.write("bulkPredictionHistory", [{"n": 1}, {"n": 2}])
        store.write("bulkPredictionHistory", [{"n": 3}])

        assert store.read("bulkPredictionHistory") == [{"n": 3}]
        leftovers = [p.name for p in (tmp_path / "history").iterdir() if p.suffix == ".tmp"]
        assert leftovers == []

    def test_corrupt_document_raises(self, store, tmp_path):
        (tmp_path / "history").mkdir()
        (tmp_path / "history" / "predictionHistory.json").write_text("{not json")

        with pytest.raises(PersistError) as exc_info:
            store.read("predictionHistory")
        assert exc_info.value.key == "predictionHistory"

    def test_non_list_document_raises(self, store, tmp_path):
        (tmp_path / "history").mkdir()
        (tmp_path / "history" / "predictionHistory.json").write_text(json.dumps({"a": 1}))

        with pytest.raises(PersistError):
            store.read("predictionHistory")

    def test_unserializable_items_raise(self, store):
        with pytest.raises(PersistError):
            store.write("predictionHistory", [object()])

    def test_clear_missing_is_not_an_error(self, store):
        store.clear("predictionHistory")
        store.write("predictionHistory", [])
        store.clear("predictionHistory")

        assert store.read("predictionHistory") is None

    def test_rejects_path_like_keys(self, store):
        with pytest.raises(PersistError):
            store.read("../escape")


class TestRecordsThroughStore:
    def test_bulk_record_survives_disk(self, store):
        record = BulkAggregateRecord(
            counts={"Glioma": 2, "No Tumor": 0, "Meningioma": 1, "Pituitary": 0},
            mean_confidence={"Glioma": 80.0, "No Tumor": 0, "Meningioma": 66.67, "Pituitary": 0},
            model_name="resnet50",
            grayscale_enabled=True,
            created_at="2024-05-01T10:00:00.000Z",
            resolution="224x224",
            total=4,
            failed=1,
            cancelled=True,
        )

        store.write(BULK_HISTORY_KEY, [record.to_json_dict()])
        loaded = BulkAggregateRecord.from_json_dict(store.read(BULK_HISTORY_KEY)[0])

        assert loaded == record

    def test_single_record_survives_disk(self, store):
        record = SinglePredictionRecord(
            label="Pituitary",
            probabilities=[0.01, 0.02, 0.03, 0.94],
            image_reference="/scans/a.jpg",
            model_name="efficientnet",
            preprocess_function="grayscale",
            note="follow up",
            created_at="2024-05-01T10:00:00.000Z",
        )

        store.write(SINGLE_HISTORY_KEY, [record.to_json_dict()])
        loaded = SinglePredictionRecord.from_json_dict(store.read(SINGLE_HISTORY_KEY)[0])

        assert loaded == record
