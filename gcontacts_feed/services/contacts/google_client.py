"""
Google Contacts API Service for reading and writing contacts.
Follows feed pagination on reads and sends translated Atom entries on writes.
"""

import time
from typing import Any

import httpx
from pydantic import ValidationError

from gcontacts_feed.config import settings
from gcontacts_feed.infrastructure.observability.logging import get_logger, log_request
from gcontacts_feed.models.api.feed_request import FeedRequest
from gcontacts_feed.models.domain.contact_domain import Contact
from gcontacts_feed.models.domain.feed_domain import ContactSummary, FeedPage, continuation_path
from gcontacts_feed.services.contacts.errors import (
    ContactsHttpStatusError,
    ContactsTransportError,
    ContactValidationError,
    GoogleContactsError,
)
from gcontacts_feed.services.contacts.paths import FeedDefaults, build_path
from gcontacts_feed.services.contacts.translator import (
    coerce_contact,
    serialize_contact,
    validate_for_create,
    validate_for_update,
)
from gcontacts_feed.services.contacts.wire import ATOM_CONTENT_TYPE, decode_json, decode_xml_entry
from gcontacts_feed.services.google_oauth_service import GoogleOAuthError, GoogleOAuthService

logger = get_logger(__name__)

GDATA_VERSION = "3"


class GoogleContactsService:
    """
    Service for Google Contacts feed operations.

    The instance holds configuration only. Every get_contacts call builds its
    own result list, so re-reading never appends to an earlier result and
    concurrent calls on one instance do not interfere. Pages are fetched one at
    a time; no request is retried.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        thin: bool | None = None,
        account: str | None = None,
        max_results: int | None = None,
        host: str | None = None,
        refresh_token: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        oauth_service: GoogleOAuthService | None = None,
    ):
        self.token = token or settings.GOOGLE_CONTACTS_TOKEN
        self.refresh_token = refresh_token or settings.GOOGLE_REFRESH_TOKEN
        self.defaults = FeedDefaults(
            thin=settings.CONTACTS_THIN if thin is None else thin,
            account=account or settings.CONTACTS_ACCOUNT,
            max_results=max_results or settings.CONTACTS_MAX_RESULTS,
        )
        self.base_url = f"https://{host.rstrip('/')}" if host else settings.contacts_base_url()
        self._owns_client = http_client is None
        self._client = http_client or self._create_client()
        self._oauth = oauth_service or GoogleOAuthService(client_id, client_secret)

    def _create_client(self) -> httpx.AsyncClient:
        """Create async HTTP client for the Contacts feed."""
        return httpx.AsyncClient(timeout=httpx.Timeout(settings.REQUEST_TIMEOUT))

    async def close(self) -> None:
        """Close the underlying HTTP client if this service created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "GoogleContactsService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _get_headers(self, method: str) -> dict[str, str]:
        """Get authorization and GData headers for a feed request."""
        if not self.token:
            raise ContactValidationError("No access token configured", field="token")

        headers = {
            "Authorization": f"{settings.CONTACTS_AUTH_SCHEME} {self.token}",
            "GData-Version": GDATA_VERSION,
        }
        if method != "GET":
            headers["Content-Type"] = ATOM_CONTENT_TYPE
        if method == "PUT":
            headers["If-Match"] = "*"
        return headers

    def _build_request(self, params: dict[str, Any], **fixed: Any) -> FeedRequest:
        """Validate caller parameters on top of the ones the operation sets itself."""
        clashes = sorted(fixed.keys() & params.keys())
        if clashes:
            raise ContactValidationError(
                f"Parameters set by the operation cannot be overridden: {', '.join(clashes)}"
            )
        try:
            return FeedRequest.model_validate({**params, **fixed})
        except ValidationError as e:
            raise ContactValidationError(f"Invalid request parameters: {e}") from e

    async def _send(
        self, request: FeedRequest, operation: str, body: bytes | None = None
    ) -> httpx.Response:
        """
        Issue one request and check its status.

        Raises:
            ContactsTransportError: If the request never got a response
            ContactsHttpStatusError: If the status is outside 2xx
        """
        headers = self._get_headers(request.method)
        path = build_path(request, self.defaults)
        url = self.base_url + path

        started = time.perf_counter()
        try:
            response = await self._client.request(
                request.method, url, headers=headers, content=body
            )
        except httpx.RequestError as e:
            logger.error(
                f"Contacts API {operation} transport failure",
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ContactsTransportError(f"Failed to reach contacts feed: {e}") from e

        log_request(
            request.method,
            path,
            response.status_code,
            round((time.perf_counter() - started) * 1000, 2),
        )
        logger.debug(
            f"Contacts API {operation} response",
            status_code=response.status_code,
            response_size=len(response.content),
        )

        if not response.is_success:
            self._raise_for_status(response, operation)
        return response

    def _raise_for_status(self, response: httpx.Response, operation: str) -> None:
        logger.error(
            f"Contacts API {operation} failed",
            status_code=response.status_code,
            response_text=response.text[:200] if response.text else "",
        )
        raise ContactsHttpStatusError(
            self._map_contacts_error(response.status_code),
            error_code=str(response.status_code),
            status_code=response.status_code,
            response_data={"body": response.text[:2000] if response.text else ""},
        )

    def _map_contacts_error(self, status_code: int) -> str:
        """Map Contacts API status codes to user-friendly messages."""
        error_mappings = {
            400: "Invalid contacts request format.",
            401: "Contacts authorization expired. Please refresh the access token.",
            403: "Contacts access denied. Please check permissions.",
            404: "Contact or feed not found.",
            409: "Contact was modified concurrently.",
            412: "Contact version mismatch.",
            429: "Too many contacts requests. Please try again later.",
            500: "Google Contacts service temporarily unavailable.",
        }

        return error_mappings.get(
            status_code, f"Bad client request status: {status_code}"
        )

    async def get_contacts(
        self, thin: bool | None = None, **params: Any
    ) -> list[ContactSummary] | list[dict]:
        """
        Read the whole contacts feed, following continuation links.

        Args:
            thin: Return ContactSummary projections (default: client setting)
            **params: Feed request parameters (max_results, updated_min, q/query,
                email, projection, alt)

        Returns:
            ContactSummary objects in thin mode, raw feed entries otherwise, in
            page order and server order within a page.

        Raises:
            GoogleContactsError: On the first failing page. Entries gathered
                from earlier pages are attached as ``partial_results``.
        """
        thin_mode = self.defaults.thin if thin is None else thin
        request = self._build_request(params, method="GET", thin=thin_mode)

        results: list[Any] = []
        pages_fetched = 0

        logger.info(
            "Fetching contacts feed",
            thin=thin_mode,
            account=request.email or self.defaults.account,
        )

        try:
            while True:
                response = await self._send(request, "get_contacts")
                page = FeedPage(decode_json(response))
                pages_fetched += 1

                if pages_fetched == 1:
                    logger.debug("Contacts feed first page", total_results=page.total_results)
                if pages_fetched == 1 and page.is_empty():
                    logger.info("Contacts feed is empty")
                    return page.entries

                results.extend(self._project(page, thin_mode))

                next_link = page.next_link
                if not next_link:
                    break

                logger.debug(
                    "Following contacts feed continuation",
                    pages_fetched=pages_fetched,
                    contacts_so_far=len(results),
                )
                # The link already carries paging state; nothing else is forwarded.
                request = FeedRequest(path=continuation_path(next_link))

        except GoogleContactsError as e:
            e.partial_results = results
            e.pages_fetched = pages_fetched
            logger.error(
                "Contacts feed aggregation aborted",
                pages_fetched=pages_fetched,
                partial_count=len(results),
                error=str(e),
            )
            raise

        logger.info(
            "Contacts feed fetched successfully",
            pages_fetched=pages_fetched,
            contact_count=len(results),
        )
        return results

    def _project(self, page: FeedPage, thin: bool) -> list[ContactSummary] | list[dict]:
        if thin:
            return [ContactSummary(entry) for entry in page.entries]
        return list(page.entries)

    async def get_contact(self, contact_id: str, **params: Any) -> dict:
        """
        Get a single contact entry by id.

        Returns:
            dict: Decoded JSON response for the entry

        Raises:
            ContactValidationError: If no id is given
            GoogleContactsError: If the request fails
        """
        if not contact_id:
            raise ContactValidationError("No id found in params.entry", field="id")

        request = self._build_request(params, method="GET", entry_id=contact_id)

        logger.info("Getting contact", contact_id=contact_id)
        response = await self._send(request, "get_contact")
        data = decode_json(response)
        logger.info("Contact retrieved successfully", contact_id=contact_id)
        return data

    async def create_contact(self, contact: Contact | dict, **params: Any) -> dict:
        """
        Create a contact.

        Args:
            contact: Contact or mapping in the wire layout; name is required

        Returns:
            dict: The created entry decoded from the XML response

        Raises:
            ContactValidationError: If the contact has no name (no request is sent)
            GoogleContactsError: If the request fails
        """
        contact = coerce_contact(contact)
        validate_for_create(contact)

        body = serialize_contact(contact)
        request = self._build_request(params, method="POST")

        logger.info(
            "Creating contact",
            fields=sorted(contact.model_dump(exclude_none=True).keys()),
        )
        response = await self._send(request, "create_contact", body=body)
        data = decode_xml_entry(response.content)
        logger.info("Contact created successfully")
        return data

    async def update_contact(self, contact: Contact | dict, **params: Any) -> dict:
        """
        Update a contact. Only id is required; absent fields are not written.

        Returns:
            dict: The updated entry decoded from the XML response

        Raises:
            ContactValidationError: If the contact has no id (no request is sent)
            GoogleContactsError: If the request fails
        """
        contact = coerce_contact(contact)
        validate_for_update(contact)

        body = serialize_contact(contact)
        request = self._build_request(params, method="PUT", entry_id=contact.id)

        logger.info(
            "Updating contact",
            contact_id=contact.id,
            fields=sorted(contact.model_dump(exclude_none=True).keys()),
        )
        response = await self._send(request, "update_contact", body=body)
        data = decode_xml_entry(response.content)
        logger.info("Contact updated successfully", contact_id=contact.id)
        return data

    async def refresh_access_token(self) -> str:
        """
        Exchange the configured refresh token for a new access token.

        The new token is used for subsequent requests on this service.

        Raises:
            GoogleOAuthError: If no refresh token is configured or refresh fails
        """
        if not self.refresh_token:
            raise GoogleOAuthError("No refresh token configured", error_code="invalid_request")

        token_response = await self._oauth.refresh_access_token(self.refresh_token)
        self.token = token_response.access_token
        self.refresh_token = token_response.refresh_token
        return self.token


# Convenience functions for easy import
async def get_all_contacts(token: str, **params: Any) -> list[ContactSummary] | list[dict]:
    """Read the whole contacts feed with a one-off service."""
    async with GoogleContactsService(token) as service:
        return await service.get_contacts(**params)


async def create_google_contact(token: str, contact: Contact | dict) -> dict:
    """Create a contact with a one-off service."""
    async with GoogleContactsService(token) as service:
        return await service.create_contact(contact)


async def update_google_contact(token: str, contact: Contact | dict) -> dict:
    """Update a contact with a one-off service."""
    async with GoogleContactsService(token) as service:
        return await service.update_contact(contact)
