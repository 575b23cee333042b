import pytest

from gcontacts_feed.config import settings

FEED_URL = "https://www.google.com/m8/feeds/contacts/default"


def build_entry(
    contact_id: str,
    name: str | None = None,
    emails: list[str] | None = None,
    phone_uri: str | None = None,
) -> dict:
    """A feed entry in the alt=json layout."""
    entry = {"id": {"$t": f"http://www.google.com/m8/feeds/contacts/default/base/{contact_id}"}}
    if name is not None:
        entry["title"] = {"$t": name}
    if emails:
        entry["gd$email"] = [
            {"address": address, "rel": "http://schemas.google.com/g/2005#other"}
            for address in emails
        ]
    if phone_uri is not None:
        entry["gd$phoneNumber"] = [{"$t": phone_uri.replace("tel:", ""), "uri": phone_uri}]
    return entry


def build_feed(entries: list[dict], next_href: str | None = None) -> dict:
    """A feed page envelope; next_href adds a rel="next" continuation link."""
    links = [{"rel": "self", "href": f"{FEED_URL}/thin?alt=json"}]
    if next_href:
        links.append({"rel": "next", "type": "application/atom+xml", "href": next_href})
    return {"version": "1.0", "feed": {"entry": entries, "link": links}}


@pytest.fixture
def feed_entry():
    return build_entry


@pytest.fixture
def feed_page():
    return build_feed


@pytest.fixture(autouse=True)
def default_feed_settings(monkeypatch):
    """Pin settings so a developer's .env.local does not leak into tests."""
    monkeypatch.setattr(settings, "GOOGLE_CONTACTS_TOKEN", None)
    monkeypatch.setattr(settings, "GOOGLE_REFRESH_TOKEN", None)
    monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", None)
    monkeypatch.setattr(settings, "GOOGLE_CLIENT_SECRET", None)
    monkeypatch.setattr(settings, "CONTACTS_HOST", "www.google.com")
    monkeypatch.setattr(settings, "CONTACTS_THIN", True)
    monkeypatch.setattr(settings, "CONTACTS_ACCOUNT", "default")
    monkeypatch.setattr(settings, "CONTACTS_MAX_RESULTS", 10000)
    monkeypatch.setattr(settings, "CONTACTS_AUTH_SCHEME", "OAuth")
