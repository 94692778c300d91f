"""Request and response bodies of the sandbox management API."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class ErrorType(str, Enum):
    """Categories of API errors, serialised in snake_case."""

    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    NAMESPACE_ERROR = "namespace_error"
    SANDBOX_ERROR = "sandbox_error"
    AUTHENTICATION_ERROR = "authentication_error"
    INTERNAL_ERROR = "internal_error"


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string")
    return value


def _parse_request_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a decoded JSON request body and return its fields."""
    if not isinstance(data, Mapping):
        raise ValueError("request body must be an object")
    if "sandboxes" not in data:
        raise ValueError("missing field 'sandboxes'")
    sandboxes = data["sandboxes"]
    if not isinstance(sandboxes, list) or not all(
        isinstance(name, str) for name in sandboxes
    ):
        raise ValueError("field 'sandboxes' must be a list of strings")
    return {
        "sandboxes": list(sandboxes),
        "namespace": _optional_str(data, "namespace"),
        "config_file": _optional_str(data, "config_file"),
    }


@dataclass
class UpRequest:
    """Body of a request to start sandboxes."""

    sandboxes: list[str] = field(default_factory=list)
    namespace: str | None = None
    config_file: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UpRequest:
        """Build the request from a decoded JSON body, validating its fields."""
        return cls(**_parse_request_fields(data))


@dataclass
class DownRequest:
    """Body of a request to stop sandboxes."""

    sandboxes: list[str] = field(default_factory=list)
    namespace: str | None = None
    config_file: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DownRequest:
        """Build the request from a decoded JSON body, validating its fields."""
        return cls(**_parse_request_fields(data))


@dataclass
class StatusResponse:
    """Body of a status reply."""

    message: str

    @classmethod
    def success(cls, action: str, sandboxes: list[str]) -> StatusResponse:
        """Report that ``action`` succeeded on the given sandboxes."""
        return cls(f"Successfully {action} sandbox(es): {', '.join(sandboxes)}")

    @classmethod
    def ok(cls) -> StatusResponse:
        """Report plain success."""
        return cls("OK")

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


@dataclass(frozen=True)
class ErrorResponse:
    """Standard error body."""

    code: int
    message: str
    error_type: ErrorType
    details: str | None = None

    def with_details(self, details: str) -> ErrorResponse:
        """Return a copy carrying ``details``; server errors (5xx) never carry them."""
        if self.code < 500:
            return dataclasses.replace(self, details=details)
        return self

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "error_type": ErrorType(self.error_type).value,
        }
        if self.details is not None:
            body["details"] = self.details
        return body