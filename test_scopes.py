"""
Test Fallback Scopes
====================

Environment view and process-level properties.
"""

import os
import sys

from envcontext.config.scopes import (
    EnvironmentScope,
    SystemProperties,
    detect_host_info,
    system_properties,
)


def test_environment_scope_is_live(monkeypatch):
    scope = EnvironmentScope()
    monkeypatch.setenv("ENVCONTEXT_SCOPE_TEST", "value")

    assert scope["ENVCONTEXT_SCOPE_TEST"] == "value"
    assert scope.get("ENVCONTEXT_SCOPE_MISSING") is None
    assert "ENVCONTEXT_SCOPE_TEST" in scope


def test_environment_scope_over_custom_mapping():
    scope = EnvironmentScope({"A": "1"})
    assert dict(scope) == {"A": "1"}
    assert len(scope) == 1


def test_detect_host_info():
    info = detect_host_info()

    assert info.user_dir == os.getcwd()
    assert info.python_version.startswith(f"{sys.version_info.major}.{sys.version_info.minor}.")
    assert info.cpu_count >= 1
    assert info.total_memory_gb > 0


def test_detected_properties():
    props = SystemProperties()

    assert props["file_separator"] == os.sep
    assert props["path_separator"] == os.pathsep
    assert props["user_dir"] == os.getcwd()
    assert int(props["cpu_count"]) >= 1
    assert "python_version" in props


def test_property_names_follow_the_name_grammar():
    from envcontext.resolution.scanner import is_valid_name

    assert all(is_valid_name(name) for name in SystemProperties())


def test_set_and_clear_property():
    props = SystemProperties(detect=False)
    assert len(props) == 0

    assert props.set_property("app_mode", "test") is None
    assert props["app_mode"] == "test"
    assert props.set_property("app_mode", "prod") == "test"

    assert props.clear_property("app_mode") == "prod"
    assert props.get("app_mode") is None


def test_explicit_property_shadows_detected_one():
    props = SystemProperties()
    detected = props["os_name"]

    props.set_property("os_name", "Plan9")
    assert props["os_name"] == "Plan9"

    props.clear_property("os_name")
    assert props["os_name"] == detected


def test_system_properties_is_process_wide():
    assert system_properties() is system_properties()
