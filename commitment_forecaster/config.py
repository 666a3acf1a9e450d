"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      : committed static defaults
  2. ``config/local.toml``        : optional local overrides (gitignored)
  3. ``.env``                     : local secrets and env overrides (gitignored)
  4. Environment variables        : ``COMMITMENT_FORECASTER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The engine functions take their tunables from an ``AppConfig`` instance (or
the defaults of ``AppConfig()`` when none is passed), never from scattered
env var lookups.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class HistoryConfig(BaseModel):
    """Parameters of the synthesized consumption history.

    ``noise_low`` / ``noise_high`` bound the multiplicative perturbation
    applied to every historical month. ``seed`` makes the perturbation
    reproducible; ``None`` draws a fresh seed per run.
    """

    model_config = ConfigDict(frozen=True)

    monthly_growth: float = 0.03
    max_months: int = 24
    noise_low: float = 0.9
    noise_high: float = 1.1
    seed: Optional[int] = None

    @model_validator(mode="after")
    def validate_noise_band(self) -> "HistoryConfig":
        if not 0.0 < self.noise_low <= self.noise_high:
            raise ValueError(
                f"noise band must satisfy 0 < noise_low <= noise_high, "
                f"got ({self.noise_low}, {self.noise_high})."
            )
        if self.max_months < 0:
            raise ValueError(f"max_months must be >= 0, got {self.max_months}.")
        return self


class RiskConfig(BaseModel):
    """Consumption-ratio thresholds for risk classification."""

    model_config = ConfigDict(frozen=True)

    high_ratio: float = 0.7
    medium_ratio: float = 0.9

    @model_validator(mode="after")
    def validate_ordering(self) -> "RiskConfig":
        if not 0.0 < self.high_ratio < self.medium_ratio:
            raise ValueError(
                f"Expected 0 < high_ratio < medium_ratio, "
                f"got ({self.high_ratio}, {self.medium_ratio})."
            )
        return self


class NarrativeConfig(BaseModel):
    """Text-completion service used to narrate a projection summary."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = "http://localhost:8080/"
    deployment: str = "gpt-5-nano"
    api_version: str = "2024-10-21"
    secret_name: str = "ai-foundry"
    temperature: float = 0.7
    max_tokens: int = 1000
    timeout_s: float = 30.0

    @field_validator("endpoint")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        return v if v.endswith("/") else v + "/"


class SecretsConfig(BaseModel):
    """Credential cache settings."""

    model_config = ConfigDict(frozen=True)

    ttl_seconds: float = 3600.0

    @field_validator("ttl_seconds")
    @classmethod
    def validate_ttl(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class ReportConfig(BaseModel):
    """Where CLI report files are written."""

    model_config = ConfigDict(frozen=True)

    output_dir: str = "data/outputs"


class AppConfig(BaseModel):
    """Complete application configuration: the single source of truth."""

    model_config = ConfigDict(frozen=True)

    history: HistoryConfig = HistoryConfig()
    risk: RiskConfig = RiskConfig()
    narrative: NarrativeConfig = NarrativeConfig()
    secrets: SecretsConfig = SecretsConfig()
    logging: LoggingConfig = LoggingConfig()
    report: ReportConfig = ReportConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply COMMITMENT_FORECASTER_* env vars to the raw config dict.

    Supported overrides:
      COMMITMENT_FORECASTER_LOG_LEVEL          → raw["logging"]["level"]
      COMMITMENT_FORECASTER_HISTORY_SEED       → raw["history"]["seed"]
      COMMITMENT_FORECASTER_NARRATIVE_ENDPOINT → raw["narrative"]["endpoint"]
      COMMITMENT_FORECASTER_DEBUG              → raw["debug"]
    """
    if log_level := os.environ.get("COMMITMENT_FORECASTER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if seed := os.environ.get("COMMITMENT_FORECASTER_HISTORY_SEED"):
        raw.setdefault("history", {})["seed"] = int(seed)

    if endpoint := os.environ.get("COMMITMENT_FORECASTER_NARRATIVE_ENDPOINT"):
        raw.setdefault("narrative", {})["endpoint"] = endpoint

    if debug := os.environ.get("COMMITMENT_FORECASTER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        history=HistoryConfig(**raw.get("history", {})),
        risk=RiskConfig(**raw.get("risk", {})),
        narrative=NarrativeConfig(**raw.get("narrative", {})),
        secrets=SecretsConfig(**raw.get("secrets", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        report=ReportConfig(**raw.get("report", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
