import pytest

from msbcore.server_data import (
    DownRequest,
    ErrorResponse,
    ErrorType,
    StatusResponse,
    UpRequest,
)


def test_up_request_from_dict_full():
    request = UpRequest.from_dict(
        {"namespace": "team", "config_file": "Sandboxfile", "sandboxes": ["a", "b"]}
    )
    assert request.namespace == "team"
    assert request.config_file == "Sandboxfile"
    assert request.sandboxes == ["a", "b"]


def test_down_request_optional_fields_absent():
    request = DownRequest.from_dict({"sandboxes": ["web"], "extra": 1})
    assert request.namespace is None
    assert request.config_file is None
    assert request.sandboxes == ["web"]


def test_request_missing_sandboxes():
    with pytest.raises(ValueError, match="sandboxes"):
        UpRequest.from_dict({"namespace": "team"})


@pytest.mark.parametrize(
    "body",
    [
        {"sandboxes": "web"},
        {"sandboxes": [1, 2]},
        {"sandboxes": [], "namespace": 3},
        ["web"],
    ],
)
def test_request_invalid_bodies(body):
    with pytest.raises(ValueError):
        DownRequest.from_dict(body)


def test_status_success_message():
    response = StatusResponse.success("started", ["a", "b"])
    assert response.message == "Successfully started sandbox(es): a, b"
    assert response.to_dict() == {"message": response.message}


def test_status_ok():
    assert StatusResponse.ok().to_dict() == {"message": "OK"}


def test_error_details_kept_below_500():
    response = ErrorResponse(404, "missing", ErrorType.NOT_FOUND).with_details("why")
    assert response.details == "why"
    assert response.to_dict() == {
        "code": 404,
        "message": "missing",
        "error_type": "not_found",
        "details": "why",
    }


def test_error_details_dropped_for_server_errors():
    original = ErrorResponse(500, "boom", ErrorType.INTERNAL_ERROR)
    response = original.with_details("stack trace")
    assert response.details is None
    assert "details" not in response.to_dict()
    assert response.to_dict()["error_type"] == ErrorType.INTERNAL_ERROR.value


def test_with_details_does_not_mutate_original():
    original = ErrorResponse(400, "bad", ErrorType.VALIDATION_ERROR)
    updated = original.with_details("field x")
    assert original.details is None
    assert updated.code == original.code
    assert updated.message == original.message


@pytest.mark.parametrize(
    "error_type, expected",
    [
        (ErrorType.VALIDATION_ERROR, "validation_error"),
        (ErrorType.NOT_FOUND, "not_found"),
        (ErrorType.NAMESPACE_ERROR, "namespace_error"),
        (ErrorType.SANDBOX_ERROR, "sandbox_error"),
        (ErrorType.AUTHENTICATION_ERROR, "authentication_error"),
        (ErrorType.INTERNAL_ERROR, "internal_error"),
    ],
)
def test_error_type_serialised_in_snake_case(error_type, expected):
    body = ErrorResponse(400, "bad", error_type).to_dict()
    assert body["error_type"] == expected