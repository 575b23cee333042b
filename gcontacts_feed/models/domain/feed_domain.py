# models/domain/feed_domain.py
"""
Feed Domain Models
Shapes of the JSON contacts feed (alt=json) as consumed by the aggregator.
"""

from typing import Any
from urllib.parse import urlsplit

TEL_SCHEME = "tel:"


def continuation_path(href: str) -> str:
    """Reduce an absolute continuation link to its path and query string."""
    parts = urlsplit(href)
    path = parts.path or "/"
    if parts.query:
        path += "?" + parts.query
    return path


class FeedPage:
    """One page of the contacts feed."""

    def __init__(self, data: dict):
        feed = data.get("feed") if isinstance(data, dict) else None
        if not isinstance(feed, dict):
            feed = {}
        self.entries: list[dict] = list(feed.get("entry") or [])
        self.links: list[dict] = list(feed.get("link") or [])
        self.total_results = _text(feed.get("openSearch$totalResults"))

    @property
    def next_link(self) -> str | None:
        """href of the rel="next" link, if the server truncated the feed."""
        for link in self.links:
            if link.get("rel") == "next" and link.get("href"):
                return link["href"]
        return None

    def is_empty(self) -> bool:
        return not self.entries


class ContactSummary:
    """Compact projection of a feed entry: name, first email, phone and id."""

    def __init__(self, entry: dict):
        self.name = _text(entry.get("title"))
        # Only the first address is kept.
        emails = entry.get("gd$email") or []
        self.email = emails[0].get("address") if emails else None
        phones = entry.get("gd$phoneNumber") or []
        uri = (phones[0].get("uri") or "") if phones else ""
        self.phone_number = uri.replace(TEL_SCHEME, "", 1)
        url = _text(entry.get("id")) or ""
        self.id = url[url.rfind("/") + 1 :]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "id": self.id,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContactSummary):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"ContactSummary(id={self.id!r}, name={self.name!r}, email={self.email!r})"


def _text(node: Any) -> str | None:
    """GData JSON wraps text content as {"$t": value}."""
    if isinstance(node, dict):
        return node.get("$t")
    return node
