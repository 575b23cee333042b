"""
Domain models for contacts and feed pages.
"""

from gcontacts_feed.models.domain.contact_domain import (
    Contact,
    Email,
    Event,
    GroupMembershipInfo,
    Im,
    Name,
    Organization,
    PhoneNumber,
    Relation,
    StructuredPostalAddress,
    UserDefinedField,
    Website,
)
from gcontacts_feed.models.domain.feed_domain import ContactSummary, FeedPage

__all__ = [
    "Contact",
    "ContactSummary",
    "Email",
    "Event",
    "FeedPage",
    "GroupMembershipInfo",
    "Im",
    "Name",
    "Organization",
    "PhoneNumber",
    "Relation",
    "StructuredPostalAddress",
    "UserDefinedField",
    "Website",
]
