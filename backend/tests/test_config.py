"""
Unit tests for pipeline configuration loading.
"""

import os
from pathlib import Path

import pytest

from faxbridge.config import (
    DEFAULT_UPLOAD_ENDPOINT,
    PipelineConfig,
    ensure_directories,
    load_config,
)
from faxbridge.exceptions import ConfigError

_ENV_VARS = [
    "INCOMING_DIR", "PROCESSED_DIR", "FAILED_DIR",
    "BATCH_SIZE", "UPLOAD_ENDPOINT", "REQUEST_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Environment, .env and override precedence."""

    def test_defaults(self, tmp_path):
        config = load_config(str(tmp_path / "missing.env"))

        assert config.incoming_dir == Path("pdf_files")
        assert config.processed_dir == Path("processed")
        assert config.failed_dir == Path("failed-uploads")
        assert config.batch_size == 100
        assert config.upload_endpoint == DEFAULT_UPLOAD_ENDPOINT

    def test_environment_variables(self, monkeypatch, tmp_path):
        monkeypatch.setenv("INCOMING_DIR", str(tmp_path / "in"))
        monkeypatch.setenv("BATCH_SIZE", "25")
        monkeypatch.setenv("UPLOAD_ENDPOINT", "http://localhost/humblefax/upload_bulk")

        config = load_config(str(tmp_path / "missing.env"))

        assert config.incoming_dir == tmp_path / "in"
        assert config.batch_size == 25
        assert config.upload_endpoint == "http://localhost/humblefax/upload_bulk"

    def test_dotenv_file_is_read(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("BATCH_SIZE=10\nFAILED_DIR=failed uploads for sent\n")

        try:
            config = load_config(str(env_file))
        finally:
            # load_dotenv writes straight into os.environ
            os.environ.pop("BATCH_SIZE", None)
            os.environ.pop("FAILED_DIR", None)

        assert config.batch_size == 10
        assert config.failed_dir == Path("failed uploads for sent")

    def test_dotenv_does_not_override_environment(self, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("BATCH_SIZE=10\n")
        monkeypatch.setenv("BATCH_SIZE", "40")

        assert load_config(str(env_file)).batch_size == 40

    def test_overrides_win_and_none_is_ignored(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BATCH_SIZE", "25")

        config = load_config(str(tmp_path / "missing.env"), batch_size=5, incoming_dir=None)

        assert config.batch_size == 5
        assert config.incoming_dir == Path("pdf_files")

    @pytest.mark.parametrize("value", ["0", "-3", "many"])
    def test_invalid_batch_size_raises_config_error(self, monkeypatch, tmp_path, value):
        monkeypatch.setenv("BATCH_SIZE", value)

        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "missing.env"))


class TestEnsureDirectories:
    """Explicit, idempotent setup step."""

    def test_creates_processed_and_failed(self, tmp_path):
        config = PipelineConfig(
            incoming_dir=tmp_path / "in",
            processed_dir=tmp_path / "out" / "processed",
            failed_dir=tmp_path / "out" / "failed",
        )

        ensure_directories(config)
        ensure_directories(config)

        assert config.processed_dir.is_dir()
        assert config.failed_dir.is_dir()
        assert not config.incoming_dir.exists()
