"""Directory and file names used by microsandbox, and path helpers."""

from __future__ import annotations

from pathlib import Path

MICROSANDBOX_ENV_DIR = ".menv"
"""Directory name for project-specific data."""

MICROSANDBOX_HOME_DIR = ".microsandbox"
"""Directory name for global data."""

RW_SUBDIR = "rw"
"""Where project read-write layers are stored."""

PATCH_SUBDIR = "patch"
"""Where project patch layers are stored."""

BLOCKS_SUBDIR = "blocks"
"""Where base store blocks are stored."""

LOG_SUBDIR = "log"
"""Where project logs are stored."""

LAYERS_SUBDIR = "layers"
"""Where global image layers are stored."""

BIN_SUBDIR = "bin"
"""Where installed binaries are stored."""

SANDBOX_DB_FILENAME = "sandbox.db"
"""Project database of active sandboxes."""

OCI_DB_FILENAME = "oci.db"
"""Global OCI database."""

SANDBOX_SCRIPT_DIR = ".sandbox_scripts"
"""Directory inside the microVM that holds sandbox scripts."""

EXTRACTED_LAYER_SUFFIX = "extracted"
"""Suffix appended to extracted layer directories."""

MICROSANDBOX_CONFIG_FILENAME = "Sandboxfile"
"""Name of the microsandbox config file."""

SHELL_SCRIPT_NAME = "shell"
"""Name of the shell script."""

NAMESPACES_SUBDIR = "namespaces"
"""Directory for server namespaces."""

SERVER_PID_FILE = "server.pid"
"""PID file of the server."""

SERVER_KEY_FILE = "server.key"
"""File holding the server secret key."""

XDG_BIN_DIR = "bin"
"""bin subdirectory under the XDG home directory."""

XDG_LIB_DIR = "lib"
"""lib subdirectory under the XDG home directory."""


def xdg_home_dir() -> Path:
    """Return ``~/.local``."""
    return Path.home() / ".local"


def paths_overlap(path1: str, path2: str) -> bool:
    """Tell whether two paths are equal or one lies inside the other."""
    first = path1 if path1.endswith("/") else path1 + "/"
    second = path2 if path2.endswith("/") else path2 + "/"
    return first.startswith(second) or second.startswith(first)