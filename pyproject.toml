[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "msbcore"
version = "0.1.0"
description = "OCI image references, a Docker Hub registry client and sandbox helper utilities"
requires-python = ">=3.10"
dependencies = [
    "httpx",
]
keywords = ["oci", "docker", "registry", "container", "image", "sandbox"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Software Distribution",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["msbcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
