"""
Contact Schema Translator.

Turns an application-level Contact into the namespaced Atom entry the
contacts feed expects on create and update:

    <entry xmlns="http://www.w3.org/2005/Atom"
           xmlns:gd="http://schemas.google.com/g/2005"
           xmlns:gContact="http://schemas.google.com/contact/2008">
      <category scheme="...#kind" term="...#contact"/>
      <gd:name xmlns="http://schemas.google.com/g/2005">
        <fullName>Ada Lovelace</fullName>
      </gd:name>
      <gd:email address="ada@example.com" rel="http://schemas.google.com/g/2005#home"/>
      <gd:phoneNumber rel="http://schemas.google.com/g/2005#mobile">5551234567</gd:phoneNumber>
    </entry>

Attributes are only written when the source field is present. rel is
resolved from an explicit rel first, then from the type label through the
field's vocabulary (unknown labels give rel="").
"""

import xml.etree.ElementTree as ET
from typing import Any

from pydantic import ValidationError

from gcontacts_feed.models.domain.contact_domain import Contact
from gcontacts_feed.services.contacts.errors import ContactValidationError
from gcontacts_feed.services.contacts.schema import (
    CATEGORY_SCHEME,
    CATEGORY_TERM,
    ROOT_NAMESPACES,
    CoreField,
    ExtensionField,
    Namespace,
    qualify,
    resolve_rel,
)
from gcontacts_feed.services.contacts.wire import ROOT_NAME, encode_document


def coerce_contact(payload: Contact | dict) -> Contact:
    """Accept a Contact or a plain mapping in the camelCase wire layout."""
    if isinstance(payload, Contact):
        return payload
    try:
        return Contact.model_validate(payload)
    except ValidationError as e:
        raise ContactValidationError(
            f"Invalid contact payload ({e.error_count()} error(s)): {e}"
        ) from e


def validate_for_create(contact: Contact) -> None:
    if not contact.has_name():
        raise ContactValidationError("No name found in contact", field="name")


def validate_for_update(contact: Contact) -> None:
    if not contact.has_id():
        raise ContactValidationError("No id found in contact", field="id")


def to_wire_document(contact: Contact) -> ET.Element:
    """Build the <entry> element for a contact."""
    root = ET.Element(ROOT_NAME, dict(ROOT_NAMESPACES))
    ET.SubElement(root, "category", {"scheme": CATEGORY_SCHEME, "term": CATEGORY_TERM})

    if contact.name is not None:
        # Name parts are unprefixed and pick up gd through the default namespace.
        name = _node(root, CoreField.NAME, {"xmlns": Namespace.GD.value})
        _node(name, "fullName", text=contact.name.full_name)
        _node(name, "givenName", text=contact.name.given_name)
        _node(name, "familyName", text=contact.name.family_name)

    _node(root, "content", text=contact.content)
    _node(root, "title", text=contact.title)
    _node(root, ExtensionField.NICKNAME, text=contact.nickname)
    _node(root, ExtensionField.FILE_AS, text=contact.file_as)
    if contact.birthday is not None:
        _node(root, ExtensionField.BIRTHDAY, {"when": contact.birthday})

    for email in contact.email or []:
        _node(
            root,
            CoreField.EMAIL,
            {
                "address": email.address or "",
                "primary": email.primary,
                "label": email.label,
                "rel": resolve_rel(CoreField.EMAIL.value, email.type, email.rel),
            },
        )

    for phone in contact.phone_number or []:
        _node(
            root,
            CoreField.PHONE_NUMBER,
            {
                "label": phone.label,
                "rel": resolve_rel(CoreField.PHONE_NUMBER.value, phone.type, phone.rel),
            },
            text=phone.number or "",
        )

    for org in contact.organization or []:
        node = _node(
            root,
            CoreField.ORGANIZATION,
            {"rel": resolve_rel(CoreField.ORGANIZATION.value, org.type, org.rel)},
        )
        _node(node, CoreField.ORG_NAME, text=org.org_name or "")
        _node(node, CoreField.ORG_TITLE, text=org.org_title or "")

    for address in contact.structured_postal_address or []:
        node = _node(
            root,
            CoreField.STRUCTURED_POSTAL_ADDRESS,
            {
                "label": address.label,
                "rel": resolve_rel(
                    CoreField.STRUCTURED_POSTAL_ADDRESS.value, address.type, address.rel
                ),
            },
        )
        _node(node, CoreField.FORMATTED_ADDRESS, text=address.formatted_address or "")

    for field in contact.user_defined_field or []:
        _node(root, ExtensionField.USER_DEFINED_FIELD, {"key": field.key, "value": field.value})

    for event in contact.event or []:
        node = _node(
            root,
            ExtensionField.EVENT,
            {
                "label": event.label,
                "rel": resolve_rel(ExtensionField.EVENT.value, event.type, event.rel),
            },
        )
        _node(node, CoreField.WHEN, {"startTime": event.when or ""})

    for relation in contact.relation or []:
        _node(
            root,
            ExtensionField.RELATION,
            {
                "label": relation.label,
                "rel": resolve_rel(ExtensionField.RELATION.value, relation.type, relation.rel),
            },
            text=relation.value or "",
        )

    for website in contact.website or []:
        _node(
            root,
            ExtensionField.WEBSITE,
            {
                "href": website.href or "",
                "primary": website.primary,
                "label": website.label,
                "rel": resolve_rel(ExtensionField.WEBSITE.value, website.type, website.rel),
            },
        )

    for im in contact.im or []:
        _node(
            root,
            ExtensionField.IM,
            {
                "address": im.address or "",
                "protocol": im.protocol,
                "label": im.label,
                "rel": resolve_rel(ExtensionField.IM.value, im.type, im.rel),
            },
        )

    for membership in contact.group_membership_info or []:
        _node(
            root,
            ExtensionField.GROUP_MEMBERSHIP_INFO,
            {"href": membership.href or "", "deleted": membership.deleted},
        )

    return root


def serialize_contact(contact: Contact) -> bytes:
    return encode_document(to_wire_document(contact))


def _node(
    parent: ET.Element,
    tag: CoreField | ExtensionField | str,
    attributes: dict[str, Any] | None = None,
    text: str | None = None,
) -> ET.Element | None:
    """
    Append a prefixed child element.

    None attribute values are dropped. A node with no attributes argument and
    no text is not emitted at all, which is how absent simple fields vanish.
    """
    if attributes is None and text is None:
        return None
    tag_name = tag.value if isinstance(tag, (CoreField, ExtensionField)) else tag
    attrib = {
        key: _attribute_value(value)
        for key, value in (attributes or {}).items()
        if value is not None
    }
    element = ET.SubElement(parent, qualify(tag_name), attrib)
    if text is not None:
        element.text = text
    return element


def _attribute_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
