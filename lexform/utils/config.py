"""Configuration for the LexForm service.

Settings are read from a YAML file and validated with pydantic. Every
section has defaults, so a missing file yields a working configuration.
The file is taken from, in order: the ``path`` argument, the
``LEXFORM_CONFIG`` environment variable, ``configs/config.yaml``.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LEXFORM_CONFIG"
DEFAULT_CONFIG_PATH = Path("configs/config.yaml")


class PreprocessingConfig(BaseModel):
    """Image cleanup applied to scans before OCR."""

    enabled: bool = True
    denoise_enabled: bool = True
    denoise_strength: int = 10
    binarize_enabled: bool = True
    binarize_method: str = "otsu"


class OCRConfig(BaseModel):
    """Tesseract binary, language and rendering settings."""

    tesseract_cmd: str | None = None
    default_lang: str = "eng"
    psm: int = 3
    pdf_dpi: int = 300


class TemplateConfig(BaseModel):
    templates_path: str = "configs/templates.yaml"


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000


class ExportConfig(BaseModel):
    """Rendering options for exported documents."""

    font_size: int = 12
    line_gap: int = 5
    signature_label: str = "Digital Signature:"


class AppConfig(BaseModel):
    """Top-level application configuration."""

    log_level: str = "INFO"
    preprocessing: PreprocessingConfig = Field(default_factory=PreprocessingConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    templates: TemplateConfig = Field(default_factory=TemplateConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


def resolve_config_path(path: Path | None = None) -> Path:
    """Pick the config file to read, without checking that it exists."""
    if path is not None:
        return path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    return Path(env_path) if env_path else DEFAULT_CONFIG_PATH


def load_config(path: Path | None = None) -> AppConfig:
    """Read and validate the application configuration.

    Args:
        path: YAML file to read. See the module docstring for the fallbacks.

    Returns:
        The validated configuration, or all defaults if the file is absent.

    Raises:
        pydantic.ValidationError: If a setting has the wrong type.
    """
    config_path = resolve_config_path(path)
    if not config_path.is_file():
        logger.info("Config file %s not found, using defaults", config_path)
        return AppConfig()

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    logger.info("Loaded configuration from %s", config_path)
    return AppConfig.model_validate(raw)
