"""
Error taxonomy for the Google Contacts feed client.

Every public operation either returns a value or raises exactly one of these.
"""

from typing import Any


class GoogleContactsError(Exception):
    """Base exception for Google Contacts API errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int | None = None,
        response_data: dict | None = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.status_code = status_code
        self.response_data = response_data or {}
        # Set by the feed aggregator when a later page fails.
        self.partial_results: list[Any] = []
        self.pages_fetched = 0


class ContactValidationError(GoogleContactsError):
    """A required field is missing or the contact payload is malformed."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, error_code="validation_error")
        self.field = field


class ContactsTransportError(GoogleContactsError):
    """Network or connection failure before a response was received."""


class ContactsHttpStatusError(GoogleContactsError):
    """Response status outside the 2xx range."""


class ContactsDecodeError(GoogleContactsError):
    """Response body is not valid JSON/XML."""
