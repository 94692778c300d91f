"""Docker registry constants, wire models and the pure helpers used when pulling."""

from __future__ import annotations

import json
import platform
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from msbcore.conversion import U64_MAX, convert_bounds
from msbcore.oci_types import DigestSelector, ReferenceSelector

DOCKER_REFERENCE_REGISTRY_DOMAIN = "docker.io"
"""Registry domain used to build image references."""

DOCKER_REGISTRY_URL = "https://registry-1.docker.io"
"""Base URL of the Docker Registry v2 API."""

DOCKER_AUTH_SERVICE = "registry.docker.io"
"""Service name used during token authentication."""

DOCKER_AUTH_REALM = "https://auth.docker.io/token"
"""Endpoint that issues authentication tokens."""

DOCKER_MANIFEST_MIME_TYPE = "application/vnd.docker.distribution.manifest.v2+json"
"""Media type of a v2 image manifest."""

DOCKER_MANIFEST_LIST_MIME_TYPE = "application/vnd.docker.distribution.manifest.list.v2+json"
"""Media type of a v2 manifest list."""

DOCKER_IMAGE_BLOB_MIME_TYPE = "application/vnd.docker.image.rootfs.diff.tar.gzip"
"""Media type of a layer blob."""

DOCKER_CONFIG_MIME_TYPE = "application/vnd.docker.container.image.v1+json"
"""Media type of an image configuration blob."""

DOCKER_REFERENCE_TYPE_ANNOTATION = "vnd.docker.reference.type"
"""Annotation that marks attestation manifests."""

_U32_MAX = 2**32 - 1

_RFC3339_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt ](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})$"
)

_MACHINE_TO_ARCH = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv7l": "arm",
    "armv6l": "arm",
    "arm": "arm",
    "ppc64le": "ppc64le",
    "ppc64": "ppc64",
    "s390x": "s390x",
    "riscv64": "riscv64",
    "mips64": "mips64",
}


class DockerRegistryResponseError(Exception):
    """An error body returned by the Docker registry."""

    def __init__(self, errors: Any) -> None:
        self.errors = errors
        super().__init__(
            f"docker registry error: {json.dumps(errors, separators=(',', ':'))}"
        )


class ImageLayerDownloadFailed(Exception):
    """Raised when a downloaded layer does not match its expected digest."""


class ManifestNotFound(LookupError):
    """Raised when no manifest in an index suits the target platform."""

    def __init__(self, message: str = "manifest not found") -> None:
        super().__init__(message)


def _parse_timestamp(text: str) -> datetime:
    match = _RFC3339_RE.match(text)
    if match is None:
        raise ValueError(f"invalid timestamp: {text}")
    date, time, fraction, offset = match.groups()
    iso = f"{date}T{time}"
    if fraction:
        iso += "." + fraction[:6].ljust(6, "0")
    iso += "+00:00" if offset in ("Z", "z") else offset
    return datetime.fromisoformat(iso)


@dataclass(frozen=True)
class DockerAuthMaterial:
    """Credentials issued by the Docker token endpoint."""

    token: str
    access_token: str
    expires_in: int
    issued_at: datetime

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DockerAuthMaterial:
        """Build the credentials from the decoded token response."""
        if not isinstance(data, Mapping):
            raise ValueError("auth response must be an object")
        for key in ("token", "access_token", "expires_in", "issued_at"):
            if key not in data:
                raise ValueError(f"missing field '{key}'")
        token, access_token = data["token"], data["access_token"]
        if not isinstance(token, str) or not isinstance(access_token, str):
            raise ValueError("token fields must be strings")
        expires_in = data["expires_in"]
        if (
            isinstance(expires_in, bool)
            or not isinstance(expires_in, int)
            or not 0 <= expires_in <= _U32_MAX
        ):
            raise ValueError(f"invalid expires_in: {expires_in!r}")
        issued_at = data["issued_at"]
        if not isinstance(issued_at, str):
            raise ValueError("field 'issued_at' must be a string")
        return cls(token, access_token, expires_in, _parse_timestamp(issued_at))


def unwrap_registry_response(data: Any) -> dict[str, Any]:
    """Return a successful registry body, or raise the error it carries."""
    if not isinstance(data, Mapping):
        raise ValueError("registry response must be an object")
    if "errors" in data and "schemaVersion" not in data:
        raise DockerRegistryResponseError(data["errors"])
    return dict(data)


def _digest_suffix(selector: ReferenceSelector) -> str:
    digest = selector.digest
    if digest is None:
        return ""
    return f"@{digest.algorithm}:{digest.digest}"


def image_reference_string(repository: str, selector: ReferenceSelector) -> str:
    """Return the reference under which a pulled image is recorded."""
    base = f"{DOCKER_REFERENCE_REGISTRY_DOMAIN}/{repository}"
    if isinstance(selector, DigestSelector):
        return base + _digest_suffix(selector)
    return f"{base}:{selector.tag}{_digest_suffix(selector)}"


def manifest_reference(selector: ReferenceSelector) -> str:
    """Return the reference part of a manifests URL for ``selector``."""
    if isinstance(selector, DigestSelector):
        return _digest_suffix(selector)
    return f"{selector.tag}{_digest_suffix(selector)}"


def range_header(start: int | None = None, end: int | None = None) -> str:
    """Return a ``Range`` header value for the inclusive range ``start``..``end``."""
    first, last = convert_bounds(start, end, inclusive=True)
    last_text = "" if last == U64_MAX else str(last)
    return f"bytes={first}-{last_text}"


def _host_architecture() -> str:
    machine = platform.machine().lower()
    return _MACHINE_TO_ARCH.get(machine, machine)


def _is_attestation(descriptor: Mapping[str, Any]) -> bool:
    annotations = descriptor.get("annotations") or {}
    return DOCKER_REFERENCE_TYPE_ANNOTATION in annotations


def select_platform_manifest(
    index: Mapping[str, Any], architecture: str | None = None
) -> dict[str, Any]:
    """Pick the manifest descriptor for ``architecture`` (the host's by default).

    A Linux manifest of that architecture is preferred; otherwise any manifest
    of that architecture. Attestation manifests are never chosen.
    """
    arch = architecture if architecture is not None else _host_architecture()
    candidates = [
        descriptor
        for descriptor in index.get("manifests") or []
        if isinstance(descriptor.get("platform"), Mapping)
        and descriptor["platform"].get("architecture") == arch
        and not _is_attestation(descriptor)
    ]
    for descriptor in candidates:
        if descriptor["platform"].get("os") == "linux":
            return dict(descriptor)
    if candidates:
        return dict(candidates[0])
    raise ManifestNotFound(f"manifest not found for architecture {arch}")