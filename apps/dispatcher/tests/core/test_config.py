"""Tests for DispatchConfig loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from dispatcher.core.config import DispatchConfig, get_config


class TestDefaults:
    def test_documented_defaults(self, monkeypatch):
        for name in ("FAIL_FAST", "DRY_RUN", "BINDINGS_FILE", "JSON_LOGS", "LOG_LEVEL"):
            monkeypatch.delenv(f"CICD_DISPATCH_{name}", raising=False)
        config = DispatchConfig()
        assert config.fail_fast is False
        assert config.dry_run is False
        assert config.bindings_file is None
        assert config.json_logs is False
        assert config.log_level == "INFO"


class TestEnvironment:
    def test_env_vars_are_read(self, monkeypatch):
        monkeypatch.setenv("CICD_DISPATCH_FAIL_FAST", "true")
        monkeypatch.setenv("CICD_DISPATCH_BINDINGS_FILE", "/tmp/bindings.yml")
        config = DispatchConfig()
        assert config.fail_fast is True
        assert config.bindings_file == Path("/tmp/bindings.yml")

    def test_log_level_is_normalised(self, monkeypatch):
        monkeypatch.setenv("CICD_DISPATCH_LOG_LEVEL", "debug")
        assert DispatchConfig().log_level == "DEBUG"

    def test_unknown_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("CICD_DISPATCH_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            DispatchConfig()


class TestGetConfig:
    def test_overrides_win_over_env(self, monkeypatch):
        monkeypatch.setenv("CICD_DISPATCH_FAIL_FAST", "true")
        assert get_config(fail_fast=False).fail_fast is False

    def test_none_overrides_fall_back_to_env(self, monkeypatch):
        monkeypatch.setenv("CICD_DISPATCH_DRY_RUN", "1")
        assert get_config(dry_run=None).dry_run is True
