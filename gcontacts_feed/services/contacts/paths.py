"""
Request path builder for the contacts feed.
Pure functions, no I/O.
"""

from dataclasses import dataclass
from urllib.parse import quote, urlencode

from gcontacts_feed.models.api.feed_request import FeedRequest

FEED_ROOT = "/m8/feeds"
DEFAULT_ALT = "json"
DEFAULT_ACCOUNT = "default"
DEFAULT_MAX_RESULTS = 10000
THIN_PROJECTION = "thin"
FULL_PROJECTION = "full"


@dataclass(slots=True, frozen=True)
class FeedDefaults:
    """Client-level values used where a request leaves a parameter unset."""

    thin: bool = True
    account: str = DEFAULT_ACCOUNT
    max_results: int = DEFAULT_MAX_RESULTS
    alt: str = DEFAULT_ALT


def projection_for(request: FeedRequest, defaults: FeedDefaults) -> str:
    if request.projection:
        return request.projection
    thin = defaults.thin if request.thin is None else request.thin
    return THIN_PROJECTION if thin else FULL_PROJECTION


def build_query(request: FeedRequest, defaults: FeedDefaults) -> dict[str, str | int]:
    """Query parameters for a read, in the order they appear on the wire."""
    query: dict[str, str | int] = {"alt": request.alt or defaults.alt}

    # Singular fetches are not paged.
    if not request.entry_id:
        query["max-results"] = request.max_results or defaults.max_results

    if request.updated_min:
        query["updated-min"] = request.updated_min

    search_text = request.search_text()
    if search_text:
        query["q"] = search_text

    return query


def build_path(request: FeedRequest, defaults: FeedDefaults | None = None) -> str:
    """
    Compose the feed path for a request.

    A literal path (continuation link) is returned as-is. Otherwise the path is
    /m8/feeds/<type>/<account>/<projection>[/<entry_id>], with a query string
    appended for GET requests only.
    """
    if request.path:
        return request.path

    defaults = defaults or FeedDefaults()
    account = request.email or defaults.account

    projection = projection_for(request, defaults)
    path = f"{FEED_ROOT}/{request.type}/{quote(account, safe='@')}/{projection}"
    if request.entry_id:
        path += "/" + quote(request.entry_id, safe="")

    if request.method == "GET":
        path += "?" + urlencode(build_query(request, defaults))

    return path
