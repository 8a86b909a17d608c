"""
Configuration management for novelsieve using Pydantic.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, ClassVar, List, Literal, cast

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from novelsieve.extractor.content_text import DEFAULT_SCRUB_PATTERNS
from novelsieve.extractor.density_resolver import DensityThresholds

log = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ("config.yaml", "config.yml")

# --- Nested Configuration Models ---


class ExtractionSettings(BaseModel):
    """Thresholds and parser choice for the heuristic extraction engine."""

    parser: Literal["html.parser", "lxml"] = Field(
        default="html.parser", description="BeautifulSoup tree builder used to parse pages."
    )
    min_text_length: int = Field(default=50, ge=0, description="Minimum text length of a content node.")
    min_text_density: float = Field(
        default=0.3, description="Minimum ratio of visible text to inner markup for a content node."
    )
    strict_min_text_length: int = Field(
        default=100, ge=0, description="Below this length the adjusted density of a candidate is halved."
    )
    min_adjusted_density: float = Field(
        default=0.5, ge=0.0, description="Minimum non-link text per descendant tag during the density scan."
    )
    min_punctuation_density: float = Field(
        default=0.02, description="Below this CJK punctuation ratio the adjusted density is halved."
    )
    min_chapter_links: int = Field(
        default=3, ge=1, description="Chapter-titled links required before a catalog container is accepted."
    )
    scrub_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SCRUB_PATTERNS),
        description="Regular expressions removed from rendered chapter text.",
    )

    @field_validator("min_text_density", "min_punctuation_density")
    @classmethod
    def validate_ratio(cls, v: float) -> float:
        """Ensure ratio thresholds are in valid range."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("ratio thresholds must be between 0.0 and 1.0")
        return v

    def density_thresholds(self) -> DensityThresholds:
        return DensityThresholds(
            min_text_length=self.min_text_length,
            min_text_density=self.min_text_density,
            strict_min_text_length=self.strict_min_text_length,
            min_adjusted_density=self.min_adjusted_density,
            min_punctuation_density=self.min_punctuation_density,
        )


class MonitoringConfig(BaseModel):
    """Where and how verbosely the extraction engine logs."""

    log_level: str = Field(default="INFO", description="Root log level: DEBUG, INFO, WARNING, ERROR or CRITICAL.")
    log_file: str | None = Field(
        default=None,
        description="JSON log destination. Logs go to stderr when unset.",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def ensure_log_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        log_path = Path(v)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return str(log_path)


# --- Root Configuration ---


class Config(BaseSettings):
    """
    Effective novelsieve configuration.

    Values come from the constructor, ``NOVELSIEVE_*`` environment variables
    (``NOVELSIEVE_EXTRACTION__MIN_CHAPTER_LINKS=5``) or a YAML file.
    """

    project_name: str = "novelsieve"
    version: str = "0.1.0"
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="NOVELSIEVE_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        """Build a config from a YAML mapping; an empty file yields defaults."""
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"No configuration file at {path}")
        log.debug("Reading configuration from %s", path)
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not data:
            log.warning("Configuration file %s is empty, using defaults", path)
            data = {}
        return cls.model_validate(data)


def find_config_file() -> Path | None:
    """First of ``config.yaml`` / ``config.yml`` in the working directory."""
    cwd = Path.cwd()
    for name in CONFIG_FILE_NAMES:
        candidate = cwd / name
        if candidate.exists():
            return candidate
    return None


# --- Lazily Loaded Global Settings ---


class LazyConfig:
    """
    Stand-in for ``Config`` that loads on first attribute access.

    Importing the package never fails on a broken config file; the first
    reader gets defaults and an error in the log instead.
    """

    _config: ClassVar[Config | None] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __getattr__(self, name: str) -> Any:
        cls = type(self)
        if cls._config is None:
            with cls._lock:
                if cls._config is None:
                    cls._config = cls._load()
        return getattr(cls._config, name)

    @classmethod
    def reset(cls) -> None:
        """Forget the loaded configuration so the next access reloads it."""
        with cls._lock:
            cls._config = None

    @staticmethod
    def _load() -> Config:
        config_path = find_config_file()
        if config_path is None:
            log.info("No config file in %s, using defaults", Path.cwd())
        else:
            try:
                config = Config.from_yaml(config_path)
                log.info("Loaded configuration from %s", config_path)
                return config
            except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
                log.error(
                    "Invalid configuration in %s, using defaults: %s",
                    config_path,
                    e,
                    exc_info=log.isEnabledFor(logging.DEBUG),
                )

        try:
            return Config()
        except ValidationError as e:
            log.critical("Environment produces an invalid configuration: %s", e)
            raise RuntimeError(f"Cannot build novelsieve configuration: {e}") from e


settings: "Config" = cast("Config", LazyConfig())
