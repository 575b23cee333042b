import asyncio

import httpx
import pytest

from gcontacts_feed.models.domain.feed_domain import ContactSummary
from gcontacts_feed.services.contacts.errors import (
    ContactsDecodeError,
    ContactsHttpStatusError,
    ContactsTransportError,
    ContactValidationError,
)
from gcontacts_feed.services.contacts.google_client import GoogleContactsService

FIRST_PAGE_URL = "https://www.google.com/m8/feeds/contacts/default/thin?alt=json&max-results=10000"
NEXT_PAGE_URL = (
    "https://www.google.com/m8/feeds/contacts/default/thin?alt=json&start-index=3&max-results=2"
)


@pytest.mark.asyncio
async def test_get_contacts_follows_next_link(httpx_mock, feed_entry, feed_page):
    service = GoogleContactsService("token-123")

    httpx_mock.add_response(
        method="GET",
        url=FIRST_PAGE_URL,
        json=feed_page(
            [
                feed_entry("a1", name="Ada", emails=["ada@example.com", "ada@work.example"]),
                feed_entry("b2", name="Babbage", phone_uri="tel:5551234567"),
            ],
            next_href=NEXT_PAGE_URL,
        ),
    )
    httpx_mock.add_response(
        method="GET",
        url=NEXT_PAGE_URL,
        json=feed_page([feed_entry("c3", name="Somerville")]),
    )

    contacts = await service.get_contacts()
    await service.close()

    assert [c.id for c in contacts] == ["a1", "b2", "c3"]
    assert contacts[0].email == "ada@example.com"
    assert contacts[1].phone_number == "5551234567"

    requests = httpx_mock.get_requests()
    assert len(requests) == 2
    assert str(requests[1].url) == NEXT_PAGE_URL


@pytest.mark.asyncio
async def test_continuation_request_carries_no_other_parameters(
    httpx_mock, feed_entry, feed_page
):
    service = GoogleContactsService("token-123")

    httpx_mock.add_response(
        method="GET",
        url=FIRST_PAGE_URL + "&updated-min=2024-01-01&q=ada",
        json=feed_page([feed_entry("a1")], next_href=NEXT_PAGE_URL),
    )
    httpx_mock.add_response(method="GET", url=NEXT_PAGE_URL, json=feed_page([feed_entry("b2")]))

    await service.get_contacts(updated_min="2024-01-01", q="ada")
    await service.close()

    follow_up = httpx_mock.get_requests()[1]
    assert "updated-min" not in follow_up.url.params
    assert "q" not in follow_up.url.params
    assert follow_up.url.params["start-index"] == "3"


@pytest.mark.asyncio
async def test_single_page_issues_one_request(httpx_mock, feed_entry, feed_page):
    service = GoogleContactsService("token-123")

    httpx_mock.add_response(method="GET", url=FIRST_PAGE_URL, json=feed_page([feed_entry("a1")]))

    contacts = await service.get_contacts()
    await service.close()

    assert contacts == [ContactSummary(feed_entry("a1"))]
    assert len(httpx_mock.get_requests()) == 1


@pytest.mark.asyncio
async def test_empty_feed_returns_empty_list(httpx_mock):
    service = GoogleContactsService("token-123")

    httpx_mock.add_response(method="GET", url=FIRST_PAGE_URL, json={"feed": {"link": []}})

    contacts = await service.get_contacts()
    await service.close()

    assert contacts == []


@pytest.mark.asyncio
async def test_full_mode_keeps_raw_entries(httpx_mock, feed_entry, feed_page):
    service = GoogleContactsService("token-123", thin=False)
    entry = feed_entry("a1", name="Ada", emails=["ada@example.com", "ada@work.example"])

    httpx_mock.add_response(
        method="GET",
        url="https://www.google.com/m8/feeds/contacts/default/full?alt=json&max-results=10000",
        json=feed_page([entry]),
    )

    contacts = await service.get_contacts()
    await service.close()

    assert contacts == [entry]
    assert len(contacts[0]["gd$email"]) == 2


@pytest.mark.asyncio
async def test_repeated_reads_do_not_accumulate(httpx_mock, feed_entry, feed_page):
    service = GoogleContactsService("token-123")
    page = feed_page([feed_entry("a1"), feed_entry("b2")])

    httpx_mock.add_response(method="GET", url=FIRST_PAGE_URL, json=page)
    httpx_mock.add_response(method="GET", url=FIRST_PAGE_URL, json=page)

    first = await service.get_contacts()
    second = await service.get_contacts()
    await service.close()

    assert len(first) == 2
    assert len(second) == 2
    assert first is not second


@pytest.mark.asyncio
async def test_concurrent_reads_get_separate_results(httpx_mock, feed_entry, feed_page):
    service = GoogleContactsService("token-123")
    page = feed_page([feed_entry("a1")])

    httpx_mock.add_response(method="GET", url=FIRST_PAGE_URL, json=page)
    httpx_mock.add_response(method="GET", url=FIRST_PAGE_URL, json=page)

    first, second = await asyncio.gather(service.get_contacts(), service.get_contacts())
    await service.close()

    assert [c.id for c in first] == ["a1"]
    assert [c.id for c in second] == ["a1"]


@pytest.mark.asyncio
async def test_request_headers(httpx_mock, feed_page):
    service = GoogleContactsService("token-123")

    httpx_mock.add_response(method="GET", url=FIRST_PAGE_URL, json=feed_page([]))

    await service.get_contacts()
    await service.close()

    request = httpx_mock.get_requests()[0]
    assert request.headers["Authorization"] == "OAuth token-123"
    assert request.headers["GData-Version"] == "3"
    assert "If-Match" not in request.headers


@pytest.mark.asyncio
async def test_failure_on_later_page_exposes_partial_results(httpx_mock, feed_entry, feed_page):
    service = GoogleContactsService("token-123")

    httpx_mock.add_response(
        method="GET",
        url=FIRST_PAGE_URL,
        json=feed_page([feed_entry("a1"), feed_entry("b2")], next_href=NEXT_PAGE_URL),
    )
    httpx_mock.add_response(method="GET", url=NEXT_PAGE_URL, status_code=503, text="Unavailable")

    with pytest.raises(ContactsHttpStatusError) as exc:
        await service.get_contacts()
    await service.close()

    assert exc.value.status_code == 503
    assert exc.value.pages_fetched == 1
    assert [c.id for c in exc.value.partial_results] == ["a1", "b2"]
    assert len(httpx_mock.get_requests()) == 2


@pytest.mark.asyncio
async def test_unauthorized_maps_to_status_error(httpx_mock):
    service = GoogleContactsService("expired-token")

    httpx_mock.add_response(method="GET", url=FIRST_PAGE_URL, status_code=401, text="Token invalid")

    with pytest.raises(ContactsHttpStatusError) as exc:
        await service.get_contacts()
    await service.close()

    assert exc.value.status_code == 401
    assert "authorization" in str(exc.value).lower()


@pytest.mark.asyncio
async def test_malformed_json_raises_decode_error(httpx_mock):
    service = GoogleContactsService("token-123")

    httpx_mock.add_response(method="GET", url=FIRST_PAGE_URL, content=b"<html>oops</html>")

    with pytest.raises(ContactsDecodeError) as exc:
        await service.get_contacts()
    await service.close()

    assert exc.value.partial_results == []


@pytest.mark.asyncio
async def test_transport_failure_raises_transport_error(httpx_mock):
    service = GoogleContactsService("token-123")

    httpx_mock.add_exception(httpx.ConnectError("connection refused"))

    with pytest.raises(ContactsTransportError):
        await service.get_contacts()
    await service.close()


@pytest.mark.asyncio
async def test_missing_token_fails_before_any_request(httpx_mock):
    service = GoogleContactsService()

    with pytest.raises(ContactValidationError):
        await service.get_contacts()
    await service.close()

    assert httpx_mock.get_requests() == []


@pytest.mark.asyncio
async def test_get_contact_omits_max_results(httpx_mock, feed_entry):
    service = GoogleContactsService("token-123")
    entry = feed_entry("4f2a", name="Ada")

    httpx_mock.add_response(
        method="GET",
        url="https://www.google.com/m8/feeds/contacts/default/thin/4f2a?alt=json",
        json={"entry": entry},
    )

    data = await service.get_contact("4f2a")
    await service.close()

    assert data == {"entry": entry}
    assert "max-results" not in httpx_mock.get_requests()[0].url.params


@pytest.mark.asyncio
async def test_get_contact_requires_id(httpx_mock):
    service = GoogleContactsService("token-123")

    with pytest.raises(ContactValidationError):
        await service.get_contact("")
    await service.close()

    assert httpx_mock.get_requests() == []


@pytest.mark.asyncio
async def test_get_contact_not_found(httpx_mock):
    service = GoogleContactsService("token-123")

    httpx_mock.add_response(
        method="GET",
        url="https://www.google.com/m8/feeds/contacts/default/thin/missing?alt=json",
        status_code=404,
        text="Contact not found.",
    )

    with pytest.raises(ContactsHttpStatusError) as exc:
        await service.get_contact("missing")
    await service.close()

    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_get_all_contacts_convenience(httpx_mock, feed_entry, feed_page):
    from gcontacts_feed.services.contacts.google_client import get_all_contacts

    httpx_mock.add_response(
        method="GET",
        url=FIRST_PAGE_URL,
        json=feed_page([feed_entry("a1", name="Ada")]),
    )

    contacts = await get_all_contacts("token-123")

    assert [c.id for c in contacts] == ["a1"]


@pytest.mark.asyncio
async def test_empty_body_on_later_page_aborts_with_partial_results(
    httpx_mock, feed_entry, feed_page
):
    service = GoogleContactsService("token-123")

    httpx_mock.add_response(
        method="GET",
        url=FIRST_PAGE_URL,
        json=feed_page([feed_entry("a1")], next_href=NEXT_PAGE_URL),
    )
    httpx_mock.add_response(method="GET", url=NEXT_PAGE_URL, content=b"")

    with pytest.raises(ContactsDecodeError) as exc:
        await service.get_contacts()
    await service.close()

    assert exc.value.pages_fetched == 1
    assert [c.id for c in exc.value.partial_results] == ["a1"]


@pytest.mark.asyncio
async def test_empty_body_on_first_page_is_not_an_empty_feed(httpx_mock):
    service = GoogleContactsService("token-123")

    httpx_mock.add_response(method="GET", url=FIRST_PAGE_URL, content=b"")

    with pytest.raises(ContactsDecodeError) as exc:
        await service.get_contacts()
    await service.close()

    assert exc.value.partial_results == []
    assert exc.value.pages_fetched == 0


@pytest.mark.asyncio
async def test_operation_parameters_cannot_be_overridden(httpx_mock):
    service = GoogleContactsService("token-123")

    with pytest.raises(ContactValidationError) as exc:
        await service.get_contacts(method="PUT")
    await service.close()

    assert "method" in str(exc.value)
    assert httpx_mock.get_requests() == []
