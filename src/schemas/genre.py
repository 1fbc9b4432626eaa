"""Genre schemas."""

from typing import Optional

from pydantic import Field

from .base import BaseSchema


class GenreCreateAttributes(BaseSchema):
    """Attributes for creating a genre. The slug is derived from the name."""

    name: str = Field(min_length=1, max_length=100, description="Genre name")
    description: Optional[str] = Field(None, max_length=255, description="Short description")


class GenreCreateResource(BaseSchema):
    """JSON:API resource for a new genre."""

    type: str = Field("genre", description="Resource type")
    attributes: GenreCreateAttributes


class GenreCreateRequest(BaseSchema):
    """Request schema for creating a genre."""

    data: GenreCreateResource = Field(description="Genre data to create")
