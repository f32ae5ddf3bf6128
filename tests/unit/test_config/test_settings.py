"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from fpb.config.settings import (
    InterpreterConfig,
    LoggingConfig,
    ServerConfig,
    Settings,
    load_settings,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FPB_SERVER__PORT", "FPB_INTERPRETER__TIMEOUT", "FPB_LOGGING__LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_default_settings(self) -> None:
        """Defaults reproduce the stock helper."""
        settings = Settings()
        assert settings.server.host == "127.0.0.1"
        assert settings.server.port == 6914
        assert settings.server.max_workers == 1
        assert settings.interpreter.executable == "python"
        assert settings.interpreter.scratch_dir_name == "fpb"
        assert settings.interpreter.timeout is None
        assert settings.logging.level == "WARNING"

    def test_section_defaults(self) -> None:
        assert ServerConfig().backlog == 100
        assert InterpreterConfig().scratch_root is None
        assert LoggingConfig().file is None

    @pytest.mark.parametrize("port", [-1, 0, 70000])
    def test_invalid_port(self, port: int) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(port=port)

    def test_invalid_timeout(self) -> None:
        with pytest.raises(ValidationError):
            InterpreterConfig(timeout=0)

    def test_invalid_worker_count(self) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(max_workers=0)


class TestLoadSettings:
    def test_missing_file(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "nonexistent.yaml")
        assert settings.server.port == 6914

    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "fpb.yaml"
        path.write_text(
            "server:\n  port: 7000\n  max_workers: 2\n"
            "interpreter:\n  executable: python3\n  timeout: 5\n"
        )
        settings = load_settings(path)
        assert settings.server.port == 7000
        assert settings.server.max_workers == 2
        assert settings.server.host == "127.0.0.1"
        assert settings.interpreter.executable == "python3"
        assert settings.interpreter.timeout == 5.0

    def test_empty_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "fpb.yaml"
        path.write_text("")
        assert load_settings(path).server.port == 6914

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "fpb.yaml"
        path.write_text("server:\n  port: 7000\n  max_workers: 2\n")
        monkeypatch.setenv("FPB_SERVER__PORT", "7100")
        settings = load_settings(path)
        assert settings.server.port == 7100
        assert settings.server.max_workers == 2
