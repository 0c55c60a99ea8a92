"""Tests for the error taxonomy."""

import pytest

from cep_weather.errors import (
    GENERIC_ERROR_MESSAGE,
    ErrorCategory,
    RemoteServiceError,
    ServiceError,
)


@pytest.mark.parametrize(
    ("category", "status_code"),
    [
        (ErrorCategory.INVALID_ZIPCODE, 422),
        (ErrorCategory.ZIPCODE_NOT_FOUND, 404),
        (ErrorCategory.INVALID_LOCATION, 400),
        (ErrorCategory.WEATHER_NOT_FOUND, 404),
        (ErrorCategory.UPSTREAM_AUTH_FAILURE, 500),
        (ErrorCategory.UPSTREAM_UNAVAILABLE, 500),
        (ErrorCategory.INTERNAL, 500),
    ],
)
def test_status_codes(category: ErrorCategory, status_code: int) -> None:
    """Test every category maps to its HTTP status."""
    assert ServiceError(category).status_code == status_code


@pytest.mark.parametrize(
    ("category", "message"),
    [
        (ErrorCategory.INVALID_ZIPCODE, "invalid zipcode"),
        (ErrorCategory.ZIPCODE_NOT_FOUND, "can not find zipcode"),
        (ErrorCategory.INVALID_LOCATION, "invalid location"),
        (ErrorCategory.WEATHER_NOT_FOUND, "weather not found"),
    ],
)
def test_client_errors_expose_message(category: ErrorCategory, message: str) -> None:
    """Test 4xx categories expose their message."""
    error = ServiceError(category)
    assert error.message == message
    assert error.public_message == message


@pytest.mark.parametrize(
    "category",
    [
        ErrorCategory.UPSTREAM_AUTH_FAILURE,
        ErrorCategory.UPSTREAM_UNAVAILABLE,
        ErrorCategory.INTERNAL,
    ],
)
def test_server_errors_hide_detail(category: ErrorCategory) -> None:
    """Test 5xx categories never expose their detail text."""
    error = ServiceError(category, "upstream said: key=abc123 is invalid")
    assert error.public_message == GENERIC_ERROR_MESSAGE


def test_structural_equality() -> None:
    """Test errors compare by category and message."""
    assert ServiceError(ErrorCategory.ZIPCODE_NOT_FOUND) == ServiceError(
        ErrorCategory.ZIPCODE_NOT_FOUND
    )
    assert ServiceError(ErrorCategory.ZIPCODE_NOT_FOUND) != ServiceError(
        ErrorCategory.WEATHER_NOT_FOUND
    )
    assert ServiceError(ErrorCategory.INTERNAL, "a") != ServiceError(ErrorCategory.INTERNAL, "b")
    assert len({ServiceError(ErrorCategory.INTERNAL), ServiceError(ErrorCategory.INTERNAL)}) == 1


def test_remote_error_keeps_status_and_message() -> None:
    error = RemoteServiceError(404, "can not find zipcode")
    assert error.status_code == 404
    assert error.message == "can not find zipcode"
    assert str(error) == "can not find zipcode"
