"""Tests for configuration loading."""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from config.settings import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep host DEVKIT_* variables and .env files out of the tests."""
    for key in list(os.environ):
        if key.startswith("DEVKIT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


class TestDefaults:

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.installer.ordering == "pinned"
        assert settings.installer.foundation_tool == "nodejs"
        assert settings.installer.capstone_tool == "claude_code"
        assert settings.installer.catalog_path is None
        assert settings.logging.level == "WARNING"
        assert settings.dry_run is False


class TestValidation:

    def test_bad_ordering(self) -> None:
        with pytest.raises(ValidationError):
            Settings(installer={"ordering": "random"})

    def test_missing_catalog_file(self, tmp_path) -> None:
        with pytest.raises(ValidationError, match="Catalog file not found"):
            Settings(installer={"catalog_path": str(tmp_path / "missing.json")})

    def test_existing_catalog_file(self, tmp_path) -> None:
        path = tmp_path / "catalog.json"
        path.write_text("[]")
        assert Settings(installer={"catalog_path": str(path)}).installer.catalog_path == path

    def test_log_level_normalized(self) -> None:
        assert Settings(logging={"level": "debug"}).logging.level == "DEBUG"

    def test_bad_log_level(self) -> None:
        with pytest.raises(ValidationError):
            Settings(logging={"level": "LOUD"})


class TestEnvironment:

    def test_prefixed_env(self, monkeypatch) -> None:
        monkeypatch.setenv("DEVKIT_DRY_RUN", "true")
        monkeypatch.setenv("DEVKIT_INSTALLER__ORDERING", "topological")
        monkeypatch.setenv("DEVKIT_BACKEND__PROBE_TIMEOUT", "2.5")

        settings = Settings()

        assert settings.dry_run is True
        assert settings.installer.ordering == "topological"
        assert settings.backend.probe_timeout == 2.5

    def test_dotenv_file(self, tmp_path) -> None:
        (tmp_path / ".env").write_text("DEVKIT_LOGGING__LEVEL=ERROR\n")
        assert Settings().logging.level == "ERROR"

    def test_init_overrides_env(self, monkeypatch) -> None:
        monkeypatch.setenv("DEVKIT_DRY_RUN", "false")
        assert Settings(dry_run=True).dry_run is True

    def test_log_file_path(self) -> None:
        assert Settings().logging.file_path == Path("logs/devkit_installer.log")
