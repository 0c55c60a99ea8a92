"""Error taxonomy shared by both services.

Errors are raised where they are detected and only turned into an HTTP
status at the route boundary. ``ServiceError`` instances compare by value,
so two independently raised "zipcode not found" errors are equal.
"""

from enum import StrEnum
from http import HTTPStatus

GENERIC_ERROR_MESSAGE = "internal server error"


class ErrorCategory(StrEnum):
    """Closed set of failure categories."""

    INVALID_ZIPCODE = "invalid_zipcode"
    ZIPCODE_NOT_FOUND = "zipcode_not_found"
    INVALID_LOCATION = "invalid_location"
    WEATHER_NOT_FOUND = "weather_not_found"
    UPSTREAM_AUTH_FAILURE = "upstream_auth_failure"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    INTERNAL = "internal"

    @property
    def status_code(self) -> int:
        """HTTP status this category is served with."""
        return _STATUS_CODES[self]

    @property
    def default_message(self) -> str:
        return _DEFAULT_MESSAGES[self]


_STATUS_CODES: dict[ErrorCategory, HTTPStatus] = {
    ErrorCategory.INVALID_ZIPCODE: HTTPStatus.UNPROCESSABLE_ENTITY,
    ErrorCategory.ZIPCODE_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorCategory.INVALID_LOCATION: HTTPStatus.BAD_REQUEST,
    ErrorCategory.WEATHER_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorCategory.UPSTREAM_AUTH_FAILURE: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorCategory.UPSTREAM_UNAVAILABLE: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorCategory.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
}

_DEFAULT_MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.INVALID_ZIPCODE: "invalid zipcode",
    ErrorCategory.ZIPCODE_NOT_FOUND: "can not find zipcode",
    ErrorCategory.INVALID_LOCATION: "invalid location",
    ErrorCategory.WEATHER_NOT_FOUND: "weather not found",
    ErrorCategory.UPSTREAM_AUTH_FAILURE: "weather service rejected the API key",
    ErrorCategory.UPSTREAM_UNAVAILABLE: "weather service unavailable",
    ErrorCategory.INTERNAL: GENERIC_ERROR_MESSAGE,
}


class ServiceError(Exception):
    """A categorized failure raised by the lookup pipeline."""

    def __init__(self, category: ErrorCategory, message: str | None = None) -> None:
        self.category = category
        self.message = message or category.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.category.status_code

    @property
    def public_message(self) -> str:
        """Message safe to send to clients.

        Server-side categories never expose their detail text.
        """
        if self.status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
            return GENERIC_ERROR_MESSAGE
        return self.message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServiceError):
            return NotImplemented
        return (self.category, self.message) == (other.category, other.message)

    def __hash__(self) -> int:
        return hash((self.category, self.message))

    def __repr__(self) -> str:
        return f"ServiceError({self.category.name}, {self.message!r})"


class RemoteServiceError(Exception):
    """Non-success answer from the downstream orchestrator.

    Carries the remote status code and message so the gateway can relay
    them without re-classifying.
    """

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
