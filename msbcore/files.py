"""File hashing for verifying downloaded image blobs."""

from __future__ import annotations

import hashlib
import os
from enum import Enum

_CHUNK_SIZE = 1 << 16


class DigestAlgorithm(str, Enum):
    """Hash algorithms that image digests may use."""

    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"

    def __str__(self) -> str:
        return self.value


class UnsupportedImageHashAlgorithm(ValueError):
    """Raised when a digest names a hash algorithm that is not supported."""


def _resolve(algorithm: DigestAlgorithm | str) -> DigestAlgorithm:
    try:
        return DigestAlgorithm(algorithm)
    except ValueError:
        raise UnsupportedImageHashAlgorithm(
            f"Unsupported algorithm: {algorithm}"
        ) from None


def get_file_hash(
    path: str | os.PathLike[str], algorithm: DigestAlgorithm | str
) -> bytes:
    """Return the raw digest of the file at ``path``."""
    resolved = _resolve(algorithm)
    hasher = hashlib.new(resolved.value)
    with open(path, "rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.digest()