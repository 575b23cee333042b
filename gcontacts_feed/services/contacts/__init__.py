"""
Contacts feed service.

Paginated reads of the Google Contacts feed and schema translation of
application contacts into GData Atom entries for writes.
"""

from .errors import (
    ContactsDecodeError,
    ContactsHttpStatusError,
    ContactsTransportError,
    ContactValidationError,
    GoogleContactsError,
)
from .google_client import GoogleContactsService
from .paths import FeedDefaults, build_path
from .translator import serialize_contact, to_wire_document

__all__ = [
    "ContactValidationError",
    "ContactsDecodeError",
    "ContactsHttpStatusError",
    "ContactsTransportError",
    "FeedDefaults",
    "GoogleContactsError",
    "GoogleContactsService",
    "build_path",
    "serialize_contact",
    "to_wire_document",
]
