"""
Test Command Line
=================
"""

import json
import logging
import os

import pytest
import yaml

from envcontext.cli import format_properties, main


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run from an empty directory and restore root logging afterwards."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ENVCONTEXT_CONFIG", raising=False)

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _write(directory, name, content):
    path = directory / name
    path.write_text(content, encoding="utf-8")
    return str(path)


def test_json_output(tmp_path, capsys):
    env = _write(tmp_path, ".env", "HOST=sysr.io\nURL=https://${HOST}:2024\n")

    assert main([env, "--format", "json", "--no-environment", "--no-properties"]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out == {"HOST": "sysr.io", "URL": "https://sysr.io:2024"}


def test_env_output_is_sorted_and_quoted(tmp_path, capsys):
    env = _write(tmp_path, ".env", "NAME='John Doe'\nAGE=42\n")

    assert main([env, "--no-environment", "--no-properties"]) == 0
    assert capsys.readouterr().out.splitlines() == ["AGE=42", 'NAME="John Doe"']


def test_later_source_overrides(tmp_path, capsys):
    first = _write(tmp_path, ".env", "KEY=old\n")
    second = _write(tmp_path, ".env.local", "KEY=new\n")

    assert main([first, second, "--format", "yaml", "--no-environment", "--no-properties"]) == 0
    assert yaml.safe_load(capsys.readouterr().out) == {"KEY": "new"}


def test_circular_reference_exits_with_error(tmp_path, capsys):
    env = _write(tmp_path, ".env", "A=${B}\nB=${A}\n")

    assert main([env]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Circular dependency detected" in captured.err


def test_missing_source_exits_with_error(tmp_path, capsys):
    assert main([str(tmp_path / "missing.env")]) == 1
    assert "missing.env" in capsys.readouterr().err


def test_no_sources_prints_help(capsys):
    assert main([]) == 2
    assert "usage:" in capsys.readouterr().out


def test_invalid_log_level(tmp_path, capsys):
    env = _write(tmp_path, ".env", "KEY=value\n")
    assert main([env, "--log-level", "LOUD"]) == 2
    assert "Invalid logging level" in capsys.readouterr().err


def test_sources_from_config_file(tmp_path, capsys):
    _write(tmp_path, "app.env", "KEY=from-config\n")
    config = _write(tmp_path, "settings.yaml", "sources:\n  - app.env\nuse_environment: false\n")

    assert main(["--config", config, "--format", "json"]) == 0
    assert json.loads(capsys.readouterr().out)["KEY"] == "from-config"


def test_no_environment_disables_fallback(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("ENVCONTEXT_CLI_HOST", "env-host")
    env = _write(tmp_path, ".env", "URL=http://${ENVCONTEXT_CLI_HOST}\n")

    assert main([env, "--format", "json", "--no-properties"]) == 0
    assert json.loads(capsys.readouterr().out) == {"URL": "http://env-host"}

    assert main([env, "--format", "json", "--no-environment", "--no-properties"]) == 0
    assert json.loads(capsys.readouterr().out) == {}


def test_dotenv_bootstrap(tmp_path, capsys):
    bootstrap = _write(tmp_path, "bootstrap.env", "ENVCONTEXT_CLI_REGION=eu-west-1\n")
    env = _write(tmp_path, ".env", "BUCKET=logs-${ENVCONTEXT_CLI_REGION}\n")

    try:
        assert main([env, "--dotenv", bootstrap, "--format", "json", "--no-properties"]) == 0
        assert json.loads(capsys.readouterr().out) == {"BUCKET": "logs-eu-west-1"}
    finally:
        os.environ.pop("ENVCONTEXT_CLI_REGION", None)


def test_format_properties_rejects_unknown_format():
    with pytest.raises(ValueError):
        format_properties({"A": "1"}, "toml")
