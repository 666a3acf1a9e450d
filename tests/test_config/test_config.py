"""
Tests for commitment_forecaster/config.py.

What we test
------------
Sub-config validation:
  - Inverted noise band, non-positive TTL, misordered risk thresholds and
    unknown log levels are rejected.
  - Narrative endpoint always ends with a slash.

load_config():
  - Reads the committed default.toml.
  - Explicit file overrides defaults; missing sections fall back.
  - local.toml next to the config file is merged on top.
  - COMMITMENT_FORECASTER_* env vars override file values.
  - Missing file -> FileNotFoundError.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from commitment_forecaster.config import (
    AppConfig,
    HistoryConfig,
    LoggingConfig,
    NarrativeConfig,
    RiskConfig,
    SecretsConfig,
    load_config,
)


_ENV_VARS = (
    "COMMITMENT_FORECASTER_LOG_LEVEL",
    "COMMITMENT_FORECASTER_HISTORY_SEED",
    "COMMITMENT_FORECASTER_NARRATIVE_ENDPOINT",
    "COMMITMENT_FORECASTER_DEBUG",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSubConfigs:
    def test_defaults(self):
        cfg = AppConfig()
        assert cfg.history.monthly_growth == 0.03
        assert cfg.history.max_months == 24
        assert cfg.risk.high_ratio == 0.7
        assert cfg.risk.medium_ratio == 0.9
        assert cfg.secrets.ttl_seconds == 3600.0

    def test_inverted_noise_band(self):
        with pytest.raises(ValidationError, match="noise band"):
            HistoryConfig(noise_low=1.2, noise_high=1.0)

    def test_risk_ordering(self):
        with pytest.raises(ValidationError):
            RiskConfig(high_ratio=0.9, medium_ratio=0.7)

    def test_ttl_positive(self):
        with pytest.raises(ValidationError):
            SecretsConfig(ttl_seconds=0)

    def test_log_level_normalized(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="VERBOSE")

    def test_endpoint_trailing_slash(self):
        assert NarrativeConfig(endpoint="https://ai.example.com").endpoint == (
            "https://ai.example.com/"
        )


class TestLoadConfig:
    def test_default_file(self):
        cfg = load_config()
        assert cfg.narrative.secret_name == "ai-foundry"
        assert cfg.risk.medium_ratio == 0.9

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text('[risk]\nhigh_ratio = 0.5\nmedium_ratio = 0.8\n', encoding="utf-8")
        cfg = load_config(path)
        assert cfg.risk.high_ratio == 0.5
        assert cfg.history.max_months == 24

    def test_local_override(self, tmp_path):
        path = tmp_path / "default.toml"
        path.write_text('[history]\nmax_months = 12\nseed = 1\n', encoding="utf-8")
        (tmp_path / "local.toml").write_text('[history]\nseed = 9\n', encoding="utf-8")
        cfg = load_config(path)
        assert cfg.history.max_months == 12
        assert cfg.history.seed == 9

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.toml"
        path.write_text('[logging]\nlevel = "INFO"\n', encoding="utf-8")
        monkeypatch.setenv("COMMITMENT_FORECASTER_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("COMMITMENT_FORECASTER_HISTORY_SEED", "42")
        monkeypatch.setenv("COMMITMENT_FORECASTER_NARRATIVE_ENDPOINT", "https://x.example")
        monkeypatch.setenv("COMMITMENT_FORECASTER_DEBUG", "true")

        cfg = load_config(path)
        assert cfg.logging.level == "ERROR"
        assert cfg.history.seed == 42
        assert cfg.narrative.endpoint == "https://x.example/"
        assert cfg.debug is True

    def test_project_debug_flag(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text('[project]\ndebug = true\n', encoding="utf-8")
        assert load_config(path).debug is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")
