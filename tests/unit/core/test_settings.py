"""Tests for settings loading and validation."""

from __future__ import annotations

import pytest

from pydantic import ValidationError

from aipi.core.constants import (
    DEFAULT_PRIORITY,
    DEFAULT_RESOURCE_PRIORITY,
    PERSISTER_TAG_PREFIX,
    Settings,
    get_settings,
)


class TestConstants:
    """Tests for module constants."""

    def test_preset_priority_is_lower_than_default(self) -> None:
        assert DEFAULT_RESOURCE_PRIORITY < DEFAULT_PRIORITY

    def test_tag_prefix(self) -> None:
        assert PERSISTER_TAG_PREFIX == "$$"


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.debug is False
        assert settings.log_dir is None
        assert settings.default_priority == DEFAULT_PRIORITY
        assert settings.default_resource_priority == DEFAULT_RESOURCE_PRIORITY
        assert settings.id_length == 8

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AIPI_DEFAULT_PRIORITY", "7")
        monkeypatch.setenv("AIPI_PRINT_REGISTRY", "true")
        settings = get_settings()
        assert settings.default_priority == 7
        assert settings.print_registry is True

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_negative_priority_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(default_priority=-1)

    def test_id_length_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Settings(id_length=0)
