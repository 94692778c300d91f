"""Core OCI types: content digests, reference selectors and the registry interface."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Union

_ALGORITHM_RE = re.compile(r"^[a-z0-9]+(?:[.+_-][a-z0-9]+)*$")
_ENCODED_RE = re.compile(r"^[a-zA-Z0-9=_-]+$")
_REGISTERED_HEX_LENGTHS = {"sha256": 64, "sha384": 96, "sha512": 128}
_HEX_RE = re.compile(r"^[a-f0-9]+$")


class ImageReferenceError(ValueError):
    """Raised when an image reference or one of its parts cannot be parsed."""


@dataclass(frozen=True)
class Digest:
    """A content digest of the form ``algorithm:encoded``."""

    algorithm: str
    digest: str

    def __str__(self) -> str:
        return f"{self.algorithm}:{self.digest}"


def parse_digest(text: str) -> Digest:
    """Parse ``algorithm:encoded`` into a :class:`Digest`.

    Registered algorithms (sha256, sha384, sha512) require lowercase hex of
    the matching length.
    """
    algorithm, sep, encoded = text.partition(":")
    if not sep:
        raise ImageReferenceError(f"invalid digest: {text}: missing ':' separator")
    if not _ALGORITHM_RE.match(algorithm):
        raise ImageReferenceError(f"invalid digest: {text}: bad algorithm")
    if not _ENCODED_RE.match(encoded):
        raise ImageReferenceError(f"invalid digest: {text}: bad encoded value")
    expected_len = _REGISTERED_HEX_LENGTHS.get(algorithm)
    if expected_len is not None and (
        len(encoded) != expected_len or not _HEX_RE.match(encoded)
    ):
        raise ImageReferenceError(
            f"invalid digest: {text}: {algorithm} needs {expected_len} lowercase hex digits"
        )
    return Digest(algorithm, encoded)


@dataclass(frozen=True)
class TagSelector:
    """Selects an image by tag, optionally pinned to a digest."""

    tag: str
    digest: Digest | None = None


@dataclass(frozen=True)
class DigestSelector:
    """Selects an image by digest alone."""

    digest: Digest


ReferenceSelector = Union[TagSelector, DigestSelector]


class OciRegistryPull(ABC):
    """Operations for reading images from an OCI-compliant registry."""

    @abstractmethod
    def fetch_index(self, repository: str, selector: ReferenceSelector) -> dict[str, Any]:
        """Fetch the image index (manifest list) chosen by ``selector``."""

    @abstractmethod
    def fetch_manifest(self, repository: str, digest: Digest) -> dict[str, Any]:
        """Fetch the image manifest with the given digest."""

    @abstractmethod
    def fetch_config(self, repository: str, digest: Digest) -> dict[str, Any]:
        """Fetch the image configuration with the given digest."""

    @abstractmethod
    def fetch_image_blob(
        self,
        repository: str,
        digest: Digest,
        start: int | None = None,
        end: int | None = None,
    ) -> Iterator[bytes]:
        """Stream a blob, or the inclusive byte range ``start``..``end`` of it."""