"""Client for the Docker Registry HTTP API v2."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

import httpx

from msbcore.docker_models import (
    DOCKER_AUTH_REALM,
    DOCKER_AUTH_SERVICE,
    DOCKER_CONFIG_MIME_TYPE,
    DOCKER_IMAGE_BLOB_MIME_TYPE,
    DOCKER_MANIFEST_LIST_MIME_TYPE,
    DOCKER_MANIFEST_MIME_TYPE,
    DOCKER_REGISTRY_URL,
    DockerAuthMaterial,
    ImageLayerDownloadFailed,
    manifest_reference,
    range_header,
    unwrap_registry_response,
)
from msbcore.env import get_microsandbox_home_path
from msbcore.files import get_file_hash
from msbcore.oci_types import Digest, OciRegistryPull, ReferenceSelector
from msbcore.paths import EXTRACTED_LAYER_SUFFIX, LAYERS_SUBDIR

logger = logging.getLogger(__name__)

_MAX_RETRIES = 3


class DockerRegistry(OciRegistryPull):
    """Reads image indexes, manifests, configs and blobs from Docker Hub.

    Blobs are downloaded into ``layer_download_dir``, resuming partial files.
    """

    def __init__(
        self,
        layer_download_dir: str | os.PathLike[str],
        client: httpx.Client | None = None,
    ) -> None:
        self.layer_download_dir = Path(layer_download_dir)
        self._owns_client = client is None
        self.client = (
            client
            if client is not None
            else httpx.Client(transport=httpx.HTTPTransport(retries=_MAX_RETRIES))
        )

    def __enter__(self) -> DockerRegistry:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this registry created it."""
        if self._owns_client:
            self.client.close()

    def _download_path(self, digest: Digest) -> Path:
        return self.layer_download_dir / str(digest)

    def _downloaded_file_size(self, digest: Digest) -> int:
        path = self._download_path(digest)
        return path.stat().st_size if path.exists() else 0

    def _get_access_credentials(
        self, repository: str, service: str, scopes: Sequence[str]
    ) -> DockerAuthMaterial:
        response = self.client.get(
            DOCKER_AUTH_REALM,
            params={
                "service": service,
                "scope": f"repository:{repository}:{','.join(scopes)}",
            },
        )
        return DockerAuthMaterial.from_dict(response.json())

    def _pull_token(self, repository: str) -> str:
        return self._get_access_credentials(
            repository, DOCKER_AUTH_SERVICE, ["pull"]
        ).token

    def _get_json(self, repository: str, url: str, accept: str) -> dict[str, Any]:
        token = self._pull_token(repository)
        response = self.client.get(
            url,
            headers={"Authorization": f"Bearer {token}", "Accept": accept},
        )
        return unwrap_registry_response(response.json())

    def fetch_index(
        self, repository: str, selector: ReferenceSelector
    ) -> dict[str, Any]:
        url = (
            f"{DOCKER_REGISTRY_URL}/v2/{repository}/manifests/"
            f"{manifest_reference(selector)}"
        )
        return self._get_json(repository, url, DOCKER_MANIFEST_LIST_MIME_TYPE)

    def fetch_manifest(self, repository: str, digest: Digest) -> dict[str, Any]:
        url = f"{DOCKER_REGISTRY_URL}/v2/{repository}/manifests/{digest}"
        return self._get_json(repository, url, DOCKER_MANIFEST_MIME_TYPE)

    def fetch_config(self, repository: str, digest: Digest) -> dict[str, Any]:
        url = f"{DOCKER_REGISTRY_URL}/v2/{repository}/blobs/{digest}"
        return self._get_json(repository, url, DOCKER_CONFIG_MIME_TYPE)

    def fetch_image_blob(
        self,
        repository: str,
        digest: Digest,
        start: int | None = None,
        end: int | None = None,
    ) -> Iterator[bytes]:
        byte_range = range_header(start, end)
        logger.info("fetching blob: %s %s", digest, byte_range)
        token = self._pull_token(repository)
        request = self.client.build_request(
            "GET",
            f"{DOCKER_REGISTRY_URL}/v2/{repository}/blobs/{digest}",
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": DOCKER_IMAGE_BLOB_MIME_TYPE,
                "Range": byte_range,
            },
        )
        response = self.client.send(request, stream=True)

        def chunks() -> Iterator[bytes]:
            try:
                yield from response.iter_bytes()
            finally:
                response.close()

        return chunks()

    def _extracted_layer_present(self, digest: Digest) -> bool:
        extracted = (
            get_microsandbox_home_path()
            / LAYERS_SUBDIR
            / f"{digest}.{EXTRACTED_LAYER_SUFFIX}"
        )
        if not extracted.exists():
            return False
        try:
            with os.scandir(extracted) as entries:
                if next(entries, None) is not None:
                    logger.info(
                        "extracted layer already exists: %s, skipping download",
                        extracted,
                    )
                    return True
        except OSError as error:
            logger.warning("error checking extracted layer directory: %s", error)
        return False

    def download_image_blob(
        self, repository: str, digest: Digest, download_size: int
    ) -> bool:
        """Download a layer blob, resuming a partial file.

        Returns True if bytes were downloaded and False if the layer was
        already present. Raises :class:`ImageLayerDownloadFailed` when the
        file does not match its digest; the file is then removed.
        """
        download_path = self._download_path(digest)

        if self._extracted_layer_present(digest):
            return False

        download_path.parent.mkdir(parents=True, exist_ok=True)
        downloaded_size = self._downloaded_file_size(digest)

        if downloaded_size == 0:
            logger.info("layer %s does not exist, downloading", digest)
            mode = "wb"
        elif downloaded_size < download_size:
            logger.info("layer %s exists, but is incomplete, downloading", digest)
            mode = "ab"
        else:
            logger.info("file already exists skipping download: %s", download_path)
            return False

        with open(download_path, mode) as handle:
            for chunk in self.fetch_image_blob(
                repository, digest, start=downloaded_size
            ):
                handle.write(chunk)

        expected_hash = digest.digest
        actual_hash = get_file_hash(download_path, digest.algorithm).hex()
        if actual_hash != expected_hash:
            download_path.unlink()
            raise ImageLayerDownloadFailed(
                f"({repository}:{digest}) file hash {actual_hash} "
                f"does not match expected hash {expected_hash}"
            )
        return True