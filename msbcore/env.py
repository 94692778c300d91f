"""Environment-derived settings: the home directory and the OCI registry."""

from __future__ import annotations

import os
from pathlib import Path

MICROSANDBOX_HOME_ENV_VAR = "MICROSANDBOX_HOME"
"""Environment variable that overrides the microsandbox home directory."""

OCI_REGISTRY_ENV_VAR = "OCI_REGISTRY_DOMAIN"
"""Environment variable that overrides the OCI registry domain."""

MSBRUN_EXE_ENV_VAR = "MSBRUN_EXE"
"""Environment variable that points at the msbrun executable."""

DEFAULT_OCI_REGISTRY = "docker.io"
"""Registry used when none is configured."""

DEFAULT_OCI_REFERENCE_TAG = "latest"
"""Tag used when an image reference names none."""

DEFAULT_OCI_REFERENCE_REPO_NAMESPACE = "library"
"""Namespace prepended to single-segment repository names."""

_MICROSANDBOX_HOME_DIR = ".microsandbox"


def _default_microsandbox_home() -> Path:
    return Path.home() / _MICROSANDBOX_HOME_DIR


def get_microsandbox_home_path() -> Path:
    """Return the microsandbox home directory, honouring MICROSANDBOX_HOME."""
    value = os.environ.get(MICROSANDBOX_HOME_ENV_VAR)
    if value is not None:
        return Path(value)
    return _default_microsandbox_home()


def get_oci_registry() -> str:
    """Return the OCI registry domain, honouring OCI_REGISTRY_DOMAIN."""
    value = os.environ.get(OCI_REGISTRY_ENV_VAR)
    if value is not None:
        return value
    return DEFAULT_OCI_REGISTRY