from pathlib import Path

from msbcore.env import (
    DEFAULT_OCI_REGISTRY,
    MICROSANDBOX_HOME_ENV_VAR,
    OCI_REGISTRY_ENV_VAR,
    get_microsandbox_home_path,
    get_oci_registry,
)


def test_home_path_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv(MICROSANDBOX_HOME_ENV_VAR, str(tmp_path))
    assert get_microsandbox_home_path() == tmp_path


def test_home_path_default(monkeypatch, tmp_path):
    monkeypatch.delenv(MICROSANDBOX_HOME_ENV_VAR, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert get_microsandbox_home_path() == Path.home() / ".microsandbox"


def test_registry_from_environment(monkeypatch):
    monkeypatch.setenv(OCI_REGISTRY_ENV_VAR, "registry.example.com:5000")
    assert get_oci_registry() == "registry.example.com:5000"


def test_registry_default(monkeypatch):
    monkeypatch.delenv(OCI_REGISTRY_ENV_VAR, raising=False)
    assert get_oci_registry() == "docker.io"
    assert get_oci_registry() == DEFAULT_OCI_REGISTRY


def test_empty_registry_variable_is_used(monkeypatch):
    monkeypatch.setenv(OCI_REGISTRY_ENV_VAR, "")
    assert get_oci_registry() == ""