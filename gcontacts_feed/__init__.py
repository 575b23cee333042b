"""
Client for the Google Contacts (GData v3) feed.
"""

from gcontacts_feed.models.domain import Contact, ContactSummary
from gcontacts_feed.services.contacts import (
    ContactsDecodeError,
    ContactsHttpStatusError,
    ContactsTransportError,
    ContactValidationError,
    GoogleContactsError,
    GoogleContactsService,
)
from gcontacts_feed.services.google_oauth_service import GoogleOAuthError, GoogleOAuthService

__version__ = "0.1.0"

__all__ = [
    "Contact",
    "ContactSummary",
    "ContactValidationError",
    "ContactsDecodeError",
    "ContactsHttpStatusError",
    "ContactsTransportError",
    "GoogleContactsError",
    "GoogleContactsService",
    "GoogleOAuthError",
    "GoogleOAuthService",
]
