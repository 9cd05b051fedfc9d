"""Tests for generator settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from autoinject.config import DEFAULT_EXCLUDE_DIRS, GeneratorSettings
from autoinject.errors import ConfigurationError


class TestGeneratorSettings:
    def test_defaults(self) -> None:
        settings = GeneratorSettings()

        assert settings.output_name == "auto_injector"
        assert settings.routine_name == "auto_inject"
        assert settings.registration_prefix == "add_"
        assert settings.exclude_dirs == list(DEFAULT_EXCLUDE_DIRS)
        assert settings.artifact_name == "auto_injector.py"

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTOINJECT_ROUTINE_NAME", "register_all")
        monkeypatch.setenv("AUTOINJECT_EXCLUDE_DIRS", '["vendor"]')

        settings = GeneratorSettings.load()

        assert settings.routine_name == "register_all"
        assert settings.exclude_dirs == ["vendor"]

    def test_explicit_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTOINJECT_OUTPUT_NAME", "from_env")

        assert GeneratorSettings.load(output_name="explicit").output_name == "explicit"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"routine_name": "not valid"},
            {"output_name": "class"},
            {"output_name": "9lives"},
            {"registration_prefix": "add-"},
        ],
    )
    def test_invalid_values(self, overrides: dict[str, str]) -> None:
        with pytest.raises(ValidationError):
            GeneratorSettings(**overrides)
        with pytest.raises(ConfigurationError) as exc_info:
            GeneratorSettings.load(**overrides)
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_settings_are_frozen(self) -> None:
        settings = GeneratorSettings()

        with pytest.raises(ValidationError):
            settings.routine_name = "other"
