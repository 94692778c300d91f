# msbcore

Building blocks for working with OCI container images and sandbox
environments:

- `msbcore.reference`: parsing and validating image references such as
  `docker.io/library/alpine:3.12` or `registry.example.com/app@sha256:...`
- `msbcore.oci_types`: digests, reference selectors and the abstract
  `OciRegistryPull` interface
- `msbcore.docker`: a Docker Hub (Registry v2) client that fetches indexes,
  manifests, configs and layer blobs, with resumable, hash-checked layer
  downloads
- `msbcore.docker_models`: the registry's wire models and pure helpers
  (manifest selection by architecture, `Range` headers, error unwrapping)
- small helpers: file hashing (`msbcore.files`), `ls -l`-style mode strings
  and byte-range conversion (`msbcore.conversion`), path overlap checks and
  directory names (`msbcore.paths`), environment-based defaults
  (`msbcore.env`)
- `msbcore.server_data`: plain data types for a sandbox management API's
  requests and responses

## Installation

```
pip install msbcore
```

Python 3.10 or newer is required. The only dependency is `httpx`.

## Parsing image references

```python
from msbcore.reference import parse_reference

ref = parse_reference("alpine")
print(ref)              # docker.io/library/alpine:latest (default registry)
print(ref.repository)   # library/alpine

ref = parse_reference("192.168.1.1:5000/org/repo:version")
print(ref.registry)     # 192.168.1.1:5000
```

If no registry is given, the value of the `OCI_REGISTRY_DOMAIN` environment
variable is used, falling back to `docker.io`. A repository with no namespace
gets `library/` added, and a missing tag becomes `latest`. A reference ending
in `@algorithm:hex` keeps that digest alongside the tag. Invalid input raises
`msbcore.oci_types.ImageReferenceError`.

Digests on their own are parsed with `msbcore.oci_types.parse_digest`;
`sha256`, `sha384` and `sha512` digests must be lowercase hex of the right
length.

## Fetching from Docker Hub

```python
from msbcore.docker import DockerRegistry
from msbcore.docker_models import select_platform_manifest
from msbcore.oci_types import TagSelector, parse_digest

with DockerRegistry("/tmp/layers") as registry:
    index = registry.fetch_index("library/alpine", TagSelector("latest"))
    descriptor = select_platform_manifest(index)
    manifest = registry.fetch_manifest(
        "library/alpine", parse_digest(descriptor["digest"])
    )
    for layer in manifest["layers"]:
        registry.download_image_blob(
            "library/alpine", parse_digest(layer["digest"]), layer["size"]
        )
```

Every request first obtains a pull token from Docker's token endpoint. Index,
manifest and config are returned as decoded JSON dictionaries; an error body
from the registry raises `DockerRegistryResponseError`.

`DockerRegistry.fetch_image_blob` streams a blob, or an inclusive byte range
of it, as an iterator of `bytes`.

`DockerRegistry.download_image_blob` writes the blob to
`<layer_download_dir>/<digest>`. It returns `False` without downloading when
the file is already complete or when an extracted, non-empty layer directory
`<MICROSANDBOX_HOME>/layers/<digest>.extracted` exists; it resumes a partial
file; and after downloading it checks the file's hash, removing the file and
raising `ImageLayerDownloadFailed` on a mismatch.

An `httpx.Client` may be passed in; otherwise the registry creates one with
three connection retries and closes it in `close()` or on leaving the `with`
block.

## Utilities

```python
from msbcore.conversion import format_mode, convert_bounds
from msbcore.files import get_file_hash
from msbcore.paths import paths_overlap

format_mode(0o40755)                  # 'drwxr-xr-x'
convert_bounds(1, 10)                 # (1, 9)
paths_overlap("/data", "/data/app")   # True
paths_overlap("/data", "/database")   # False
get_file_hash("layer.tar.gz", "sha256").hex()
```

## API data types

`UpRequest.from_dict` and `DownRequest.from_dict` validate a decoded JSON
body. `StatusResponse.success("started", ["a", "b"])` gives the message
`Successfully started sandbox(es): a, b`. `ErrorResponse.with_details`
attaches details only to errors below 500; `to_dict` produces the JSON body,
with `error_type` in snake_case.

## Environment variables

- `MICROSANDBOX_HOME`: home directory for global data (default
  `~/.microsandbox`)
- `OCI_REGISTRY_DOMAIN`: default registry for references that name none

## What this package does not do

It provides no command-line tool and no running server: the management API
is present only as its request and response types. It does not run or
supervise sandboxes, does not store pulled images in a database, and does not
extract layers; `DockerRegistry` only fetches metadata and downloads blobs
from Docker Hub.

## Running the tests

```
pip install -e ".[test]"
pytest
```