"""Tests for configuration loading."""

import logging

from neurolens.core.config import (
    Config,
    create_default_config_file,
    get_config,
    get_default_config,
    load_config_cascade,
    load_toml,
)
from neurolens.core.logger import PACKAGE_NAME, get_logger, set_level


class TestConfig:
    def test_defaults(self):
        config = get_default_config()

        assert config.server_url == "http://localhost:5000"
        assert config.get("classifier", "resolution") == "150x150"
        assert config.get("history", "single_cap") == 10
        assert config.get("history", "bulk_cap") == 50
        assert config.get("bulk", "max_images") == 500
        assert config.get("bulk", "seconds_per_image") == 2

    def test_env_var_overrides_server_url(self, monkeypatch):
        monkeypatch.setenv("NEUROLENS_SERVER_URL", "http://gpu-box:8000")
        assert get_default_config().server_url == "http://gpu-box:8000"

    def test_history_dir_expands_user(self):
        config = Config.from_dict({"history": {"dir": "~/neuro"}})
        assert "~" not in str(config.history_dir)

    def test_cascade_merges_explicit_file(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text('[server]\nurl = "http://example:9000"\n\n[classifier]\ngrayscale = true\n')

        config = load_config_cascade(str(path))

        assert config.server_url == "http://example:9000"
        assert config.get("server", "timeout") == 30
        assert config.get("classifier", "grayscale") is True
        assert config._source == str(path)

    def test_current_directory_file_is_picked_up(self, tmp_path):
        (tmp_path / "neurolens.toml").write_text('[history]\nbulk_cap = 5\n')

        assert get_config().get("history", "bulk_cap") == 5

    def test_default_file_round_trips(self, tmp_path):
        path = create_default_config_file(str(tmp_path / "out.toml"))

        data = load_toml(path)

        assert data["server"]["url"] == "http://localhost:5000"
        assert data["classifier"]["grayscale"] is False


class TestLogger:
    def test_set_level_accepts_names(self):
        set_level("DEBUG")
        assert logging.getLogger(PACKAGE_NAME).level == logging.DEBUG

        set_level("not-a-level")
        assert logging.getLogger(PACKAGE_NAME).level == logging.WARNING

    def test_get_logger_is_under_package(self):
        logger = get_logger("neurolens.services.bulk")

        assert logger.name == "neurolens.services.bulk"
        assert logging.getLogger(PACKAGE_NAME).handlers
