"""ConvertiQ application configuration.

Loads settings from a single YAML file:
  * convertiq.settings.yaml: non-secret configuration

The file path can be overridden with ``CONVERTIQ_SETTINGS`` and the staging
environment with ``CONVERTIQ_ENV`` (``development`` or ``production``).
Components never read this module directly; the lifespan hands each of them
an explicit ``StagingConfig`` built by ``AppConfig.staging_config()``.
"""
from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SETTINGS_FILE = Path("convertiq.settings.yaml")
SETTINGS_ENV_VAR = "CONVERTIQ_SETTINGS"
ENVIRONMENT_ENV_VAR = "CONVERTIQ_ENV"

DEFAULT_PROD_DIR = str(Path(tempfile.gettempdir()) / "file-converter-uploads")


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000


class LoggingSettings(BaseModel):
    level: str = "info"


class StagingSettings(BaseModel):
    """Where uploaded and converted files live while they are needed."""
    environment:       Literal["development", "production"] = "development"
    dev_dir:           str            = "temp/upload"
    prod_dir:          str            = DEFAULT_PROD_DIR
    directory:         Optional[str]  = None
    retention_seconds: float          = 3600.0

    @field_validator("retention_seconds")
    @classmethod
    def _positive_retention(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("retention_seconds must be positive")
        return v


class ConversionSettings(BaseModel):
    document_delay_seconds: float = 1.5
    image_delay_seconds:    float = 1.0
    media_delay_seconds:    float = 3.0


class UploadSettings(BaseModel):
    max_upload_bytes: int = 100 * 1024 * 1024


class CleanupSettings(BaseModel):
    orphan_sweep_enabled:   bool  = False
    sweep_interval_seconds: float = 600.0
    orphan_max_age_seconds: float = 3600.0


@dataclass(frozen=True)
class StagingConfig:
    """Resolved staging location passed explicitly into every component."""
    directory: Path
    retention_seconds: float = 3600.0


class AppConfig(BaseModel):
    server:     ServerSettings     = Field(default_factory=ServerSettings)
    logging:    LoggingSettings    = Field(default_factory=LoggingSettings)
    staging:    StagingSettings    = Field(default_factory=StagingSettings)
    conversion: ConversionSettings = Field(default_factory=ConversionSettings)
    uploads:    UploadSettings     = Field(default_factory=UploadSettings)
    cleanup:    CleanupSettings    = Field(default_factory=CleanupSettings)

    def staging_dir(self) -> Path:
        staging = self.staging
        if staging.directory:
            return Path(staging.directory)
        if staging.environment == "production":
            return Path(staging.prod_dir)
        return Path(staging.dev_dir)

    def staging_config(self) -> StagingConfig:
        return StagingConfig(
            directory=self.staging_dir(),
            retention_seconds=self.staging.retention_seconds,
        )


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def _resolve_relative(value: str, base_dir: Path) -> str:
    path = Path(value)
    if path.is_absolute():
        return str(path)
    return str(base_dir / path)


def load_config(settings_path: Optional[Path] = None) -> AppConfig:
    """Load *settings_path* (or the default settings file) into an AppConfig.

    Relative staging directories resolve from the settings file's directory,
    so the development staging area sits next to the config it came from.
    """
    if settings_path is None:
        settings_path = Path(os.environ.get(SETTINGS_ENV_VAR, SETTINGS_FILE))
    settings_path = Path(settings_path)
    data = _load_yaml(settings_path)

    env_override = os.environ.get(ENVIRONMENT_ENV_VAR)
    if env_override:
        data.setdefault("staging", {})["environment"] = env_override

    config = AppConfig(**data)

    base_dir = settings_path.resolve().parent
    staging = config.staging
    staging.dev_dir = _resolve_relative(staging.dev_dir, base_dir)
    if staging.directory:
        staging.directory = _resolve_relative(staging.directory, base_dir)

    logger.info(
        "Settings loaded (server=%s:%s, staging=%s, environment=%s)",
        config.server.host,
        config.server.port,
        config.staging_dir(),
        staging.environment,
    )
    return config


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Return the process-wide config, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
