# tests/conftest.py
"""
Global pytest fixtures for neurolens tests.
"""

import pytest

from neurolens.core.client import ClassifierClient
from neurolens.core.config import reset_config
from neurolens.models import ClassifierConfig
from tests.mocks.memory_store import FailingHistoryStore, MemoryHistoryStore
from tests.mocks.mock_repository import MockFileRepository
from tests.mocks.results import make_result


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from real config files, history and the server URL env var."""
    monkeypatch.delenv("NEUROLENS_SERVER_URL", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("neurolens.core.config.CONFIG_LOCATIONS", [tmp_path / "neurolens.toml"])
    reset_config()
    yield
    reset_config()


@pytest.fixture
def memory_store() -> MemoryHistoryStore:
    return MemoryHistoryStore()


@pytest.fixture
def failing_store() -> FailingHistoryStore:
    return FailingHistoryStore()


@pytest.fixture
def mock_repository() -> MockFileRepository:
    """Mock repository with three images in /scans."""
    repo = MockFileRepository()
    for name in ("a.jpg", "b.jpg", "c.png"):
        repo.add_image(f"/scans/{name}")
    return repo


@pytest.fixture
def classifier_config() -> ClassifierConfig:
    return ClassifierConfig(resolution="150x150", grayscale=False)


@pytest.fixture
def mock_client(mocker):
    """ClassifierClient double; every image is classified as Glioma by default."""
    client = mocker.Mock(spec=ClassifierClient)
    client.classify.return_value = make_result("Glioma")
    client.get_model_name.return_value = "resnet50"
    client.list_models.return_value = ["resnet50", "efficientnet"]
    client.select_model.side_effect = lambda name: name
    return client
