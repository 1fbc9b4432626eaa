"""Pydantic schemas for request/response validation."""

from .base import *
from .single import *
from .album import *
from .stat import *
from .genre import *
from .artist import *

__all__ = [
    # Base schemas
    "BaseSchema",
    "PaginationMeta",
    "JSONAPIResponse",
    "JSONAPICollectionResponse",
    "JSONAPIError",
    "JSONAPIErrorResponse",
    "HealthCheckResponse",

    # Single schemas
    "CopyrightEntry",
    "SingleMetadataAttributes",
    "SingleCreateAttributes",
    "SingleUpdateAttributes",
    "SingleCreateRequest",
    "SingleUpdateRequest",

    # Album schemas
    "AlbumCreateAttributes",
    "AlbumUpdateAttributes",
    "AlbumCreateRequest",
    "AlbumUpdateRequest",

    # Stat schemas
    "StatUpdateAttributes",
    "StatUpdateRequest",

    # Genre schemas
    "GenreCreateAttributes",
    "GenreCreateRequest",

    # Artist schemas
    "ArtistCreateAttributes",
    "ArtistCreateRequest",
]
