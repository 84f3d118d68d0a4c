"""Configuration management for the travel document OCR service.

Loads and validates YAML configuration with sensible defaults for OCR,
identity verification, progress publishing, result reporting, and the
batch pipeline. A handful of deployment settings and secrets can be
overridden from the environment.
"""

import logging
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Environment variable -> (section, key)
_ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    "GRIDLINES_API_KEY": ("verification", "api_key"),
    "GRIDLINES_AUTH_TYPE": ("verification", "auth_type"),
    "REDIS_URL": ("progress", "redis_url"),
    "OCR_PROGRESS_CHANNEL": ("progress", "channel_prefix"),
    "MAIN_BACKEND_URL": ("reporting", "backend_url"),
    "PORT": ("server", "port"),
    "LOGGER_LEVEL": (None, "log_level"),
}


class OCRConfig(BaseModel):
    """Configuration for the Tesseract OCR engine."""

    tesseract_cmd: str | None = None
    default_lang: str = "eng"
    psm: int = 3
    pdf_dpi: int = 300
    char_whitelist: str = (
        "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789 :/-.,\n"
    )


class VerificationConfig(BaseModel):
    """Configuration for the passport verification API."""

    api_url: str = "https://api.gridlines.io/passport-api/ocr"
    api_key: str = ""
    auth_type: str = ""
    consent: str = "Y"
    timeout_s: float = 60.0


class FetchConfig(BaseModel):
    """Configuration for downloading documents from their source URLs."""

    timeout_s: float = 30.0


class ProgressConfig(BaseModel):
    """Configuration for the pub/sub progress channel."""

    enabled: bool = True
    redis_url: str = "redis://localhost:6379"
    channel_prefix: str = "ocr_progress"


class ReportingConfig(BaseModel):
    """Configuration for the result webhook."""

    backend_url: str = "http://localhost:3000"
    timeout_s: float = 30.0


class PipelineConfig(BaseModel):
    """Configuration for batch orchestration and extraction heuristics."""

    max_concurrency: int = Field(default=4, ge=1)
    max_parallel_batches: int = Field(default=2, ge=1)
    min_keyword_hits: int = Field(default=3, ge=1)
    name_match_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    unpaired_passport_policy: Literal["drop", "fail"] = "drop"


class ServerConfig(BaseModel):
    """Configuration for the HTTP server."""

    host: str = "0.0.0.0"
    port: int = 8001


class AppConfig(BaseModel):
    """Top-level application configuration."""

    ocr: OCRConfig = Field(default_factory=OCRConfig)
    verification: VerificationConfig = Field(default_factory=VerificationConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    progress: ProgressConfig = Field(default_factory=ProgressConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    log_level: str = "INFO"


def _apply_env_overrides(raw: dict) -> dict:
    """Overlay environment variables onto raw configuration data."""
    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if not value:
            continue
        if section is None:
            raw[key] = value
        else:
            raw.setdefault(section, {})[key] = value
        logger.debug("Applied %s from environment", env_name)
    return raw


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    raw: dict = {}
    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    else:
        logger.info("No config file found at %s, using defaults", path)

    return AppConfig(**_apply_env_overrides(raw))
