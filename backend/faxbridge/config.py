"""
Pipeline configuration.

Values come from environment variables (optionally via a .env file). Nothing
here touches the filesystem at import time; directories are created by
``ensure_directories`` once per run.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from faxbridge.exceptions import ConfigError

DEFAULT_UPLOAD_ENDPOINT = "https://humble-fax.com/upload_bulk"
DEFAULT_BATCH_SIZE = 100

# Environment variable -> PipelineConfig field
_ENV_FIELDS = {
    "INCOMING_DIR": "incoming_dir",
    "PROCESSED_DIR": "processed_dir",
    "FAILED_DIR": "failed_dir",
    "BATCH_SIZE": "batch_size",
    "UPLOAD_ENDPOINT": "upload_endpoint",
    "REQUEST_TIMEOUT": "request_timeout",
}


class PipelineConfig(BaseModel):
    """Everything a single pipeline run needs to know about its environment."""

    incoming_dir: Path = Path("pdf_files")
    processed_dir: Path = Path("processed")
    failed_dir: Path = Path("failed-uploads")
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    upload_endpoint: str = DEFAULT_UPLOAD_ENDPOINT
    request_timeout: float = Field(default=30.0, gt=0)
    file_extension: str = "pdf"


def load_config(env_file: str | None = None, **overrides) -> PipelineConfig:
    """
    Build a PipelineConfig from the environment.

    Priority (highest first):
      1. keyword overrides (used by the CLI flags and tests)
      2. environment variables
      3. .env file (never overrides variables already set)
      4. PipelineConfig defaults

    Raises ConfigError when a value fails validation.
    """
    load_dotenv(env_file, override=False)

    values = {}
    for env_name, field_name in _ENV_FIELDS.items():
        raw = os.getenv(env_name, "").strip()
        if raw:
            values[field_name] = raw

    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return PipelineConfig(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid pipeline configuration: {exc}") from exc


def ensure_directories(config: PipelineConfig) -> None:
    """Create the processed and failed directories if they don't exist."""
    for directory in (config.processed_dir, config.failed_dir):
        directory.mkdir(parents=True, exist_ok=True)
