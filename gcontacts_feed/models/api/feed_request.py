# models/api/feed_request.py
"""
Feed request models.
Describe a single call against the contacts feed before it becomes a path.
"""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class FeedRequest(BaseModel):
    """Parameters for one feed request; unset fields fall back to client defaults."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    method: Literal["GET", "POST", "PUT"] = Field(default="GET", description="HTTP method")
    path: str | None = Field(
        default=None, description="Literal path+query, e.g. from a continuation link"
    )
    type: str = Field(default="contacts", description="Feed resource type")
    email: str | None = Field(default=None, description="Account selector (default: 'default')")
    projection: str | None = Field(default=None, description="Explicit projection tag")
    thin: bool | None = Field(default=None, description="Use the thin projection")
    alt: str | None = Field(default=None, description="Response format")
    max_results: int | None = Field(
        default=None,
        ge=1,
        validation_alias=AliasChoices("max_results", "max-results"),
        description="Page size cap",
    )
    updated_min: str | None = Field(
        default=None,
        validation_alias=AliasChoices("updated_min", "updated-min"),
        description="Only entries updated since this timestamp",
    )
    q: str | None = Field(default=None, description="Free-text query")
    query: str | None = Field(default=None, description="Alias of q")
    entry_id: str | None = Field(default=None, description="Single entity id")

    def search_text(self) -> str | None:
        return self.q or self.query
