"""Parsing and formatting of OCI image references."""

from __future__ import annotations

import re
from dataclasses import dataclass

from msbcore.env import (
    DEFAULT_OCI_REFERENCE_REPO_NAMESPACE,
    DEFAULT_OCI_REFERENCE_TAG,
    get_oci_registry,
)
from msbcore.oci_types import (
    DigestSelector,
    ImageReferenceError,
    ReferenceSelector,
    TagSelector,
    parse_digest,
)

_REGISTRY_RE = re.compile(r"[a-zA-Z0-9.-]+(:[0-9]+)?")
_REPOSITORY_RE = re.compile(
    r"([a-z0-9]+(?:[._-][a-z0-9]+)*)(/[a-z0-9]+(?:[._-][a-z0-9]+)*)*"
)
_TAG_RE = re.compile(r"\w[\w.-]{0,127}")


@dataclass(frozen=True)
class Reference:
    """An OCI image reference: registry, repository and a selector."""

    registry: str
    repository: str
    selector: ReferenceSelector

    def __str__(self) -> str:
        base = f"{self.registry}/{self.repository}"
        selector = self.selector
        if isinstance(selector, DigestSelector):
            return f"{base}@{selector.digest}"
        if selector.digest is not None:
            return f"{base}:{selector.tag}@{selector.digest}"
        return f"{base}:{selector.tag}"


def _validate_registry(registry: str) -> None:
    if not _REGISTRY_RE.fullmatch(registry):
        raise ImageReferenceError(f"invalid registry: {registry}")


def _validate_repository(repository: str) -> None:
    if not _REPOSITORY_RE.fullmatch(repository):
        raise ImageReferenceError(f"invalid repository: {repository}")


def _validate_tag(tag: str) -> None:
    if not _TAG_RE.fullmatch(tag):
        raise ImageReferenceError(f"invalid tag: {tag}")


def _split_registry(reference: str, default_registry: str) -> tuple[str, str]:
    head, sep, rest = reference.partition("/")
    if sep and ("." in head or ":" in head or head == "localhost"):
        return head, rest
    return default_registry, reference


def _with_namespace(repository: str) -> str:
    if "/" in repository:
        return repository
    return f"{DEFAULT_OCI_REFERENCE_REPO_NAMESPACE}/{repository}"


def _split_repository_and_tag(path: str) -> tuple[str, str]:
    repo_part, sep, tag_part = path.rpartition(":")
    if not sep:
        return _with_namespace(path), DEFAULT_OCI_REFERENCE_TAG
    if not repo_part:
        raise ImageReferenceError("repository is empty")
    return _with_namespace(repo_part), tag_part


def _parse_name(text: str, default_registry: str) -> tuple[str, str, str]:
    registry, remainder = _split_registry(text, default_registry)
    repository, tag = _split_repository_and_tag(remainder)
    _validate_registry(registry)
    _validate_repository(repository)
    _validate_tag(tag)
    return registry, repository, tag


def parse_reference(text: str) -> Reference:
    """Parse an image reference such as ``registry/repo:tag@sha256:...``.

    A missing registry defaults to the configured OCI registry, a missing tag
    to ``latest``, and a single-segment repository gains the ``library``
    namespace.
    """
    text = text.strip()
    default_registry = get_oci_registry()

    if not text:
        raise ImageReferenceError("input string is empty")

    name, at, digest_text = text.partition("@")
    if at:
        if ":" not in digest_text:
            raise ImageReferenceError(f"invalid digest: {digest_text}")
        digest = parse_digest(digest_text)
        registry, repository, tag = _parse_name(name, default_registry)
        return Reference(registry, repository, TagSelector(tag, digest))

    registry, repository, tag = _parse_name(text, default_registry)
    return Reference(registry, repository, TagSelector(tag))