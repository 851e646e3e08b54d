# tests/controllers/test_controller_result.py
"""
Tests for ControllerResult.
"""

from neurolens.controllers.base import ControllerResult
from neurolens.models import SinglePredictionRecord


class TestControllerResult:
    def test_ok_creates_successful_result(self):
        result = ControllerResult.ok(data={"key": "value"}, message="Success", deleted=1)

        assert result.success is True
        assert result.data == {"key": "value"}
        assert result.message == "Success"
        assert result.metadata == {"deleted": 1}
        assert result.error is None

    def test_fail_creates_failed_result(self):
        result = ControllerResult.fail("Something went wrong")

        assert result.success is False
        assert result.error == "Something went wrong"
        assert result.data is None

    def test_to_dict_serializes_record_lists(self):
        record = SinglePredictionRecord("Glioma", [1.0, 0.0, 0.0, 0.0], "/a.jpg", "m", created_at="t")
        result = ControllerResult.ok(data=[record])

        result_dict = result.to_dict()

        assert result_dict["success"] is True
        assert result_dict["data"][0]["label"] == "Glioma"
        assert result_dict["data"][0]["image_reference"] == "/a.jpg"
