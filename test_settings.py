"""
Test Loader Settings
====================

YAML settings loading and validation.
"""

import pytest

from envcontext.config.settings import CONFIG_ENV_VAR, LoaderSettings
from envcontext.exceptions import EnvContextLoaderError


def test_defaults():
    settings = LoaderSettings()
    assert settings.sources == []
    assert settings.encoding == "utf-8"
    assert settings.use_environment and settings.use_properties
    assert not settings.export_to_environ
    assert settings.validate() == []


def test_missing_file_yields_defaults(tmp_path):
    settings = LoaderSettings.from_file(tmp_path / "missing.yaml")
    assert settings == LoaderSettings()


def test_from_file_resolves_relative_sources(tmp_path):
    config = tmp_path / "envcontext.yaml"
    config.write_text(
        "sources:\n"
        "  - .env\n"
        "  - /etc/app/.env\n"
        "use_properties: false\n"
        "logging:\n"
        "  level: DEBUG\n",
        encoding="utf-8",
    )

    settings = LoaderSettings.from_file(config)

    assert settings.sources == [str(tmp_path / ".env"), "/etc/app/.env"]
    assert settings.use_properties is False
    assert settings.logging == {"level": "DEBUG"}
    assert settings.as_config() == {"logging": {"level": "DEBUG"}}


def test_from_dict_accepts_single_source():
    assert LoaderSettings.from_dict({"sources": ".env"}).sources == [".env"]


def test_from_env(tmp_path, monkeypatch):
    config = tmp_path / "custom.yaml"
    config.write_text("encoding: latin-1\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config))

    assert LoaderSettings.from_env().encoding == "latin-1"


def test_invalid_yaml(tmp_path):
    config = tmp_path / "broken.yaml"
    config.write_text("sources: [unclosed\n", encoding="utf-8")

    with pytest.raises(EnvContextLoaderError):
        LoaderSettings.from_file(config)


def test_non_mapping_yaml(tmp_path):
    config = tmp_path / "list.yaml"
    config.write_text("- .env\n", encoding="utf-8")

    with pytest.raises(EnvContextLoaderError):
        LoaderSettings.from_file(config)


def test_validate_reports_errors():
    settings = LoaderSettings(
        sources=[" "],
        encoding="no-such-codec",
        override_environ=True,
        logging={"level": "LOUD"},
    )
    errors = settings.validate()

    assert len(errors) == 4
    assert any("encoding" in e for e in errors)
    assert any("override_environ" in e for e in errors)
    assert any("LOUD" in e for e in errors)
