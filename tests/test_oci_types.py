from collections.abc import Iterator

import pytest

from msbcore.oci_types import (
    Digest,
    DigestSelector,
    ImageReferenceError,
    OciRegistryPull,
    TagSelector,
    parse_digest,
)

VALID_HEX = "deadbeefdeadbeefdeadbeefdeadbeefdeadbeefdeadbeefdeadbeefdeadbeef"


def test_parse_sha256_digest():
    digest = parse_digest(f"sha256:{VALID_HEX}")
    assert digest.algorithm == "sha256"
    assert digest.digest == VALID_HEX
    assert str(digest) == f"sha256:{VALID_HEX}"


@pytest.mark.parametrize("algorithm,length", [("sha256", 64), ("sha384", 96), ("sha512", 128)])
def test_round_trip_registered(algorithm, length):
    text = f"{algorithm}:{'a' * length}"
    assert str(parse_digest(text)) == text


def test_unregistered_algorithm_accepted():
    text = "blake3:Abc_123="
    assert str(parse_digest(text)) == text


@pytest.mark.parametrize(
    "text",
    [
        "",
        VALID_HEX,
        f"sha256:{VALID_HEX[:-1]}",
        f"sha256:{VALID_HEX.upper()}",
        "sha256:",
        f"SHA256:{VALID_HEX}",
        "sha256:zz" + VALID_HEX[2:],
        "sha384:" + "a" * 64,
    ],
)
def test_invalid_digests(text):
    with pytest.raises(ImageReferenceError, match="invalid digest"):
        parse_digest(text)


def test_image_reference_error_is_value_error():
    with pytest.raises(ValueError):
        parse_digest("nocolon")


def test_digest_equality_and_hash():
    a = parse_digest(f"sha256:{VALID_HEX}")
    b = Digest("sha256", VALID_HEX)
    assert a == b
    assert len({a, b}) == 1


def test_tag_selector_defaults():
    selector = TagSelector("latest")
    assert selector.tag == "latest"
    assert selector.digest is None
    assert selector == TagSelector("latest", None)


def test_selectors_with_digest():
    digest = parse_digest(f"sha256:{VALID_HEX}")
    tagged = TagSelector("mytag", digest)
    only = DigestSelector(digest)
    assert tagged.digest == only.digest
    assert tagged != only


class _MemoryRegistry(OciRegistryPull):
    def __init__(self, blob: bytes):
        self.blob = blob

    def fetch_index(self, repository, selector):
        return {"repository": repository, "selector": selector}

    def fetch_manifest(self, repository, digest):
        return {"digest": str(digest)}

    def fetch_config(self, repository, digest):
        return {"config": str(digest)}

    def fetch_image_blob(self, repository, digest, start=None, end=None) -> Iterator[bytes]:
        first = 0 if start is None else start
        last = len(self.blob) - 1 if end is None else end
        yield self.blob[first : last + 1]


def test_abstract_interface_cannot_be_instantiated():
    with pytest.raises(TypeError):
        OciRegistryPull()


def test_concrete_subclass_works():
    registry = _MemoryRegistry(b"hello world")
    digest = parse_digest(f"sha256:{VALID_HEX}")
    assert registry.fetch_manifest("library/alpine", digest) == {"digest": str(digest)}
    assert b"".join(registry.fetch_image_blob("library/alpine", digest, 6)) == b"world"
    index = registry.fetch_index("library/alpine", TagSelector("latest"))
    assert index["selector"] == TagSelector("latest")