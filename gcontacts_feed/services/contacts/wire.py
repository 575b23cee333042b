"""
Wire codec for the contacts feed.

Reads come back as JSON, writes go out (and come back) as Atom XML. XML is
handled with ElementTree; decoded entries use the same dict layout callers get
from the JSON feed side: attributes under "$", text under "_", and child
elements grouped into lists keyed by their prefixed tag.
"""

import xml.etree.ElementTree as ET
from typing import Any

import httpx

from gcontacts_feed.infrastructure.observability.logging import get_logger
from gcontacts_feed.services.contacts.errors import ContactsDecodeError
from gcontacts_feed.services.contacts.schema import G_CONTACT_PREFIX, GD_PREFIX, Namespace

logger = get_logger(__name__)

ATOM_CONTENT_TYPE = "application/atom+xml"
ROOT_NAME = "entry"

_PREFIX_BY_URI = {
    Namespace.ATOM.value: "",
    Namespace.GD.value: GD_PREFIX,
    Namespace.GCONTACT.value: G_CONTACT_PREFIX,
}


def encode_document(root: ET.Element) -> bytes:
    """Serialize a translated entry to UTF-8 XML bytes with a declaration."""
    if root.tag != ROOT_NAME:
        raise ValueError(f"Expected <{ROOT_NAME}> root, got <{root.tag}>")
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def decode_json(response: httpx.Response) -> dict:
    """Parse a JSON feed body. A 2xx feed response is never legitimately empty."""
    if not response.content.strip():
        logger.error("Empty contacts JSON response", status_code=response.status_code)
        raise ContactsDecodeError("Empty JSON response", status_code=response.status_code)
    try:
        return response.json()
    except ValueError as e:
        logger.error(
            "Failed to parse contacts JSON response",
            status_code=response.status_code,
            response_text=response.text[:200],
            error=str(e),
        )
        raise ContactsDecodeError(
            f"Invalid JSON response: {e}", status_code=response.status_code
        ) from e


def decode_xml_entry(body: bytes) -> dict[str, Any]:
    """Parse an Atom XML body into a plain dict keyed by the root tag."""
    # Unlike the JSON feed, an empty write response decodes to nothing.
    if not body or not body.strip():
        return {}
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        logger.error("Failed to parse contacts XML response", error=str(e))
        raise ContactsDecodeError(f"Invalid XML response: {e}") from e
    return {_qualified_name(root.tag): _element_to_dict(root)}


def _qualified_name(name: str) -> str:
    """Turn ElementTree's {uri}local form back into prefix:local."""
    if not name.startswith("{"):
        return name
    uri, _, local = name[1:].partition("}")
    prefix = _PREFIX_BY_URI.get(uri)
    if prefix is None:
        return name
    return prefix + local


def _element_to_dict(element: ET.Element) -> Any:
    text = (element.text or "").strip()
    children = list(element)

    if not children and not element.attrib:
        return text

    node: dict[str, Any] = {}
    if element.attrib:
        node["$"] = {_qualified_name(key): value for key, value in element.attrib.items()}
    if text:
        node["_"] = text
    for child in children:
        node.setdefault(_qualified_name(child.tag), []).append(_element_to_dict(child))
    return node
