"""Shared pydantic configuration — snake_case in Python, camelCase on the wire."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every API schema. Accepts both field names and camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(CamelModel):
    """Body for DELETE endpoints."""

    success: bool


class BookmarkStatus(CamelModel):
    """Body for GET /bookmarks/{restaurant_id}/check."""

    is_bookmarked: bool
