"""OCI image references, a Docker Hub registry client and sandbox utilities."""

__version__ = "0.1.0"