"""
GData contact schema tables.

Namespace URIs, tag prefix membership and the controlled rel vocabularies
used when translating contacts into Atom entries.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Namespace(str, Enum):
    """XML vocabularies declared on every entry."""

    ATOM = "http://www.w3.org/2005/Atom"
    GD = "http://schemas.google.com/g/2005"
    GCONTACT = "http://schemas.google.com/contact/2008"


GD_PREFIX = "gd:"
G_CONTACT_PREFIX = "gContact:"

CATEGORY_SCHEME = f"{Namespace.GD.value}#kind"
CATEGORY_TERM = f"{Namespace.GCONTACT.value}#contact"

ROOT_NAMESPACES = {
    "xmlns": Namespace.ATOM.value,
    "xmlns:gd": Namespace.GD.value,
    "xmlns:gContact": Namespace.GCONTACT.value,
}


class CoreField(str, Enum):
    """Tags defined by the gd (contacts core) vocabulary."""

    NAME = "name"
    EMAIL = "email"
    PHONE_NUMBER = "phoneNumber"
    ORGANIZATION = "organization"
    ORG_NAME = "orgName"
    ORG_TITLE = "orgTitle"
    STRUCTURED_POSTAL_ADDRESS = "structuredPostalAddress"
    FORMATTED_ADDRESS = "formattedAddress"
    WHEN = "when"


class ExtensionField(str, Enum):
    """Tags defined by the gContact extension vocabulary."""

    NICKNAME = "nickname"
    USER_DEFINED_FIELD = "userDefinedField"
    FILE_AS = "fileAs"
    BIRTHDAY = "birthday"
    EVENT = "event"
    RELATION = "relation"
    WEBSITE = "website"
    IM = "im"
    GROUP_MEMBERSHIP_INFO = "groupMembershipInfo"


_CORE_TAGS = frozenset(f.value for f in CoreField)
_EXTENSION_TAGS = frozenset(f.value for f in ExtensionField)

if _CORE_TAGS & _EXTENSION_TAGS:
    raise RuntimeError(f"Tags in both vocabularies: {sorted(_CORE_TAGS & _EXTENSION_TAGS)}")


def qualify(tag: str) -> str:
    """Prefix a tag with its vocabulary; unknown tags are returned unchanged."""
    if tag in _CORE_TAGS:
        return GD_PREFIX + tag
    if tag in _EXTENSION_TAGS:
        return G_CONTACT_PREFIX + tag
    return tag


class GdRel(str, Enum):
    """Labels whose rel is a fragment of the gd namespace URI."""

    HOME = "home"
    WORK = "work"
    OTHER = "other"
    MOBILE = "mobile"
    MAIN = "main"
    WORK_FAX = "work_fax"
    HOME_FAX = "home_fax"
    PAGER = "pager"
    NETMEETING = "netmeeting"

    @property
    def uri(self) -> str:
        return f"{Namespace.GD.value}#{self.value}"


class EventRel(str, Enum):
    ANNIVERSARY = "anniversary"
    OTHER = "other"


class RelationRel(str, Enum):
    ASSISTANT = "assistant"
    BROTHER = "brother"
    CHILD = "child"
    DOMESTIC_PARTNER = "domestic-partner"
    FATHER = "father"
    FRIEND = "friend"
    MANAGER = "manager"
    MOTHER = "mother"
    PARENT = "parent"
    PARTNER = "partner"
    REFERRED_BY = "referred-by"
    RELATIVE = "relative"
    SISTER = "sister"
    SPOUSE = "spouse"


class WebsiteRel(str, Enum):
    HOME_PAGE = "home-page"
    BLOG = "blog"
    PROFILE = "profile"
    HOME = "home"
    WORK = "work"
    OTHER = "other"
    FTP = "ftp"


def _gd_vocabulary(*labels: GdRel) -> Mapping[str, str]:
    return MappingProxyType({label.value: label.uri for label in labels})


def _token_vocabulary(enum_cls: type[Enum]) -> Mapping[str, str]:
    return MappingProxyType({member.value: member.value for member in enum_cls})


# Keyed by the wire tag of the repeatable field.
REL_VOCABULARIES: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        CoreField.EMAIL.value: _gd_vocabulary(GdRel.HOME, GdRel.WORK, GdRel.OTHER),
        CoreField.PHONE_NUMBER.value: _gd_vocabulary(
            GdRel.OTHER,
            GdRel.WORK,
            GdRel.MOBILE,
            GdRel.HOME,
            GdRel.MAIN,
            GdRel.WORK_FAX,
            GdRel.HOME_FAX,
            GdRel.PAGER,
        ),
        CoreField.STRUCTURED_POSTAL_ADDRESS.value: _gd_vocabulary(
            GdRel.HOME, GdRel.WORK, GdRel.OTHER
        ),
        CoreField.ORGANIZATION.value: _gd_vocabulary(GdRel.WORK, GdRel.OTHER),
        ExtensionField.IM.value: _gd_vocabulary(
            GdRel.HOME, GdRel.WORK, GdRel.OTHER, GdRel.NETMEETING
        ),
        ExtensionField.EVENT.value: _token_vocabulary(EventRel),
        ExtensionField.RELATION.value: _token_vocabulary(RelationRel),
        ExtensionField.WEBSITE.value: _token_vocabulary(WebsiteRel),
    }
)


def resolve_rel(field: str, type_label: str | None, rel: str | None) -> str | None:
    """
    Resolve the rel attribute of a repeatable field entry.

    An explicit rel wins over the type label. A type label missing from the
    field's vocabulary resolves to an empty string. Returns None when neither
    is given, meaning the attribute is omitted.
    """
    if rel is not None:
        return rel
    if type_label is None:
        return None
    return REL_VOCABULARIES.get(field, {}).get(type_label, "")
