"""
Tests for feed page parsing and the compact contact projection.
"""

from gcontacts_feed.models.domain.feed_domain import ContactSummary, FeedPage, continuation_path


def test_summary_keeps_only_first_email(feed_entry):
    entry = feed_entry(
        "4f2a", name="Ada", emails=["first@example.com", "second@example.com", "third@example.com"]
    )

    summary = ContactSummary(entry)

    assert summary.email == "first@example.com"
    assert "second@example.com" not in summary.to_dict().values()


def test_summary_strips_tel_scheme(feed_entry):
    summary = ContactSummary(feed_entry("4f2a", phone_uri="tel:5551234567"))

    assert summary.phone_number == "5551234567"


def test_summary_id_is_last_path_segment():
    entry = {"id": {"$t": "http://www.google.com/m8/feeds/contacts/ada%40example.com/base/7c9e0f"}}

    assert ContactSummary(entry).id == "7c9e0f"


def test_summary_of_sparse_entry():
    summary = ContactSummary({})

    assert summary.to_dict() == {"name": None, "email": None, "phoneNumber": "", "id": ""}


def test_summary_to_dict(feed_entry):
    entry = feed_entry(
        "4f2a", name="Ada Lovelace", emails=["ada@example.com"], phone_uri="tel:+15551234"
    )

    assert ContactSummary(entry).to_dict() == {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "phoneNumber": "+15551234",
        "id": "4f2a",
    }


def test_feed_page_next_link(feed_entry, feed_page):
    href = "https://www.google.com/m8/feeds/contacts/default/thin?alt=json&start-index=3"

    page = FeedPage(feed_page([feed_entry("1")], next_href=href))

    assert page.next_link == href
    assert len(page.entries) == 1


def test_feed_page_without_next_link(feed_entry, feed_page):
    page = FeedPage(feed_page([feed_entry("1")]))

    assert page.next_link is None


def test_feed_page_reads_total_results(feed_entry, feed_page):
    data = feed_page([feed_entry("1")])
    data["feed"]["openSearch$totalResults"] = {"$t": "1"}

    assert FeedPage(data).total_results == "1"
    assert FeedPage(feed_page([])).total_results is None


def test_feed_page_tolerates_missing_entries():
    assert FeedPage({"feed": {}}).is_empty()
    assert FeedPage({}).is_empty()


def test_continuation_path_drops_scheme_and_host():
    href = (
        "https://www.google.com/m8/feeds/contacts/default/thin"
        "?alt=json&start-index=26&max-results=25"
    )

    assert continuation_path(href) == (
        "/m8/feeds/contacts/default/thin?alt=json&start-index=26&max-results=25"
    )


def test_continuation_path_without_query():
    assert continuation_path("https://www.google.com/m8/feeds/contacts/default/full") == (
        "/m8/feeds/contacts/default/full"
    )
