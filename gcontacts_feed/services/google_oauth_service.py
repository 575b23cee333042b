"""
Google OAuth Service for the Contacts feed.
Refreshes access tokens against Google's token endpoint.
"""

import asyncio
from datetime import UTC, datetime, timedelta

import httpx

from gcontacts_feed.config import settings
from gcontacts_feed.infrastructure.observability.logging import get_logger, token_preview

logger = get_logger(__name__)

GOOGLE_TOKEN_URL = "https://accounts.google.com/o/oauth2/token"
CONTACTS_SCOPE = "https://www.google.com/m8/feeds"

# Request timeouts and retry configuration
REQUEST_TIMEOUT = 10  # seconds
MAX_RETRIES = 3
BACKOFF_FACTOR = 2  # 2, 4, 8 seconds
RETRY_STATUS_CODES = {429, 500, 502, 503, 504}


class GoogleOAuthError(Exception):
    """Custom exception for Google OAuth-related errors."""

    def __init__(
        self, message: str, error_code: str | None = None, response_data: dict | None = None
    ):
        super().__init__(message)
        self.error_code = error_code
        self.response_data = response_data or {}


class TokenResponse:
    """Structured representation of OAuth token response."""

    def __init__(self, data: dict):
        self.access_token = data.get("access_token")
        self.refresh_token = data.get("refresh_token")
        self.token_type = data.get("token_type", "Bearer")
        self.expires_in = data.get("expires_in")
        self.scope = data.get("scope", "")

        if self.expires_in:
            self.expires_at = datetime.now(UTC) + timedelta(seconds=int(self.expires_in))
        else:
            self.expires_at = None

    def is_valid(self) -> bool:
        """Check if token response contains required fields."""
        return bool(self.access_token and self.token_type)

    def has_contacts_access(self) -> bool:
        # Google omits scope on some refresh responses; treat that as unknown, not denied.
        return not self.scope or CONTACTS_SCOPE in self.scope.split()


class GoogleOAuthService:
    """
    Service for refreshing Google OAuth 2.0 access tokens.

    Independent of the feed client: it only needs client credentials and a
    refresh token, and retries transient failures with backoff.
    """

    def __init__(self, client_id: str | None = None, client_secret: str | None = None):
        self.client_id = client_id or settings.GOOGLE_CLIENT_ID
        self.client_secret = client_secret or settings.GOOGLE_CLIENT_SECRET

    def _validate_config(self) -> None:
        """Validate Google OAuth configuration."""
        if not self.client_id:
            raise GoogleOAuthError("GOOGLE_CLIENT_ID not configured", error_code="config_error")
        if not self.client_secret:
            raise GoogleOAuthError(
                "GOOGLE_CLIENT_SECRET not configured", error_code="config_error"
            )

    async def _post_with_retry(self, url: str, data: dict, operation: str) -> httpx.Response:
        """
        Perform POST request with retry/backoff handling.

        Args:
            url: Target URL
            data: Form data payload
            operation: Operation name for logging context
        """
        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        last_error: Exception | None = None

        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
            for attempt in range(1, MAX_RETRIES + 1):
                try:
                    response = await client.post(url, data=data, headers=headers)

                    if response.status_code in RETRY_STATUS_CODES and attempt < MAX_RETRIES:
                        wait_time = BACKOFF_FACTOR**attempt
                        logger.warning(
                            "Google OAuth transient status",
                            operation=operation,
                            status_code=response.status_code,
                            attempt=attempt,
                            wait_time=wait_time,
                        )
                        await asyncio.sleep(wait_time)
                        continue

                    return response

                except httpx.RequestError as exc:
                    last_error = exc

                    if attempt == MAX_RETRIES:
                        raise

                    wait_time = BACKOFF_FACTOR**attempt
                    logger.warning(
                        "Google OAuth request error, retrying",
                        operation=operation,
                        attempt=attempt,
                        wait_time=wait_time,
                        error=str(exc),
                        error_type=type(exc).__name__,
                    )
                    await asyncio.sleep(wait_time)

        if last_error:
            raise last_error
        raise GoogleOAuthError(f"{operation} failed: Unknown error")

    async def refresh_access_token(self, refresh_token: str) -> TokenResponse:
        """
        Refresh access token using refresh token.

        Args:
            refresh_token: Valid refresh token

        Returns:
            TokenResponse: New access token (refresh token preserved if not rotated)

        Raises:
            GoogleOAuthError: If token refresh fails
        """
        if not refresh_token:
            raise GoogleOAuthError("No refresh token supplied", error_code="invalid_request")
        self._validate_config()

        try:
            data = {
                "refresh_token": refresh_token,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "refresh_token",
            }

            logger.info(
                "Refreshing access token for contacts feed",
                refresh_token_preview=token_preview(refresh_token),
            )

            response = await self._post_with_retry(
                GOOGLE_TOKEN_URL, data, operation="token_refresh"
            )

            token_response = self._handle_token_response(response, "token_refresh")

            # Google may not return a new refresh token on refresh
            if not token_response.refresh_token:
                token_response.refresh_token = refresh_token
                logger.debug("Preserved existing refresh token")

            return token_response

        except GoogleOAuthError:
            raise
        except httpx.RequestError as e:
            logger.error(
                "Network error during token refresh",
                refresh_token_preview=token_preview(refresh_token),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise GoogleOAuthError(f"Network error during token refresh: {e}") from e

    def _handle_token_response(self, response: httpx.Response, operation: str) -> TokenResponse:
        """
        Handle and validate token response from Google.

        Raises:
            GoogleOAuthError: If response is invalid or contains errors
        """
        logger.debug(
            f"Google {operation} response",
            status_code=response.status_code,
            response_size=len(response.text),
        )

        if not response.is_success:
            try:
                error_data = response.json()
            except ValueError:
                logger.error(
                    f"Google {operation} failed with non-JSON response",
                    status_code=response.status_code,
                    response_text=response.text[:200],
                )
                raise GoogleOAuthError(
                    f"Google OAuth service error (HTTP {response.status_code})"
                ) from None

            error_code = error_data.get("error", "unknown_error")
            error_description = error_data.get("error_description", "No description provided")

            logger.error(
                f"Google {operation} failed",
                status_code=response.status_code,
                error_code=error_code,
                error_description=error_description,
            )

            raise GoogleOAuthError(
                self._map_google_error(error_code),
                error_code=error_code,
                response_data=error_data,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                f"Failed to parse Google {operation} response",
                response_text=response.text[:200],
                error=str(e),
            )
            raise GoogleOAuthError(f"Failed to parse Google response: {e}") from e

        token_response = TokenResponse(data)
        if not token_response.is_valid():
            logger.error(
                f"Invalid token response from Google {operation}",
                has_access_token=bool(token_response.access_token),
                token_type=token_response.token_type,
            )
            raise GoogleOAuthError("Invalid token response from Google")

        logger.info(
            f"Google {operation} successful",
            token_type=token_response.token_type,
            expires_in=token_response.expires_in,
            has_refresh_token=bool(token_response.refresh_token),
            has_contacts_access=token_response.has_contacts_access(),
        )
        return token_response

    def _map_google_error(self, error_code: str) -> str:
        """Map Google OAuth error codes to user-friendly messages."""
        error_messages = {
            "invalid_grant": "Refresh token expired or revoked. Please reauthorize access.",
            "invalid_client": "Contacts OAuth client configuration error.",
            "invalid_request": "Invalid token refresh request.",
            "unauthorized_client": "OAuth client is not authorized for token refresh.",
            "unsupported_grant_type": "Token refresh grant type not supported.",
        }

        return error_messages.get(error_code, f"Token refresh failed ({error_code}).")


async def refresh_google_token(
    refresh_token: str, client_id: str | None = None, client_secret: str | None = None
) -> TokenResponse:
    """Refresh a Google access token."""
    return await GoogleOAuthService(client_id, client_secret).refresh_access_token(refresh_token)
