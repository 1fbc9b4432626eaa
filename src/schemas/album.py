"""Album-related Pydantic schemas."""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from .base import BaseSchema, release_datetime, validate_http_url


class AlbumMetadataAttributes(BaseSchema):
    """Album cover."""

    cover_url: str = Field(max_length=2048, description="Cover image URL")

    @field_validator("cover_url")
    @classmethod
    def validate_cover_url(cls, v: str) -> str:
        return validate_http_url(v)


class AlbumMetadataPatch(BaseSchema):
    """Partial album cover update."""

    cover_url: Optional[str] = Field(None, max_length=2048, description="Cover image URL")

    @field_validator("cover_url")
    @classmethod
    def validate_cover_url(cls, v: Optional[str]) -> Optional[str]:
        return validate_http_url(v)


class AlbumCreateAttributes(BaseSchema):
    """Attributes for creating an album. Genres are derived from its singles."""

    title: str = Field(min_length=1, max_length=255, description="Album title")
    release_date: Optional[date] = Field(None, description="Release date (YYYY-MM-DD)")
    metadata: AlbumMetadataAttributes = Field(description="Album cover")

    def to_service_data(self) -> Dict[str, Any]:
        data = self.model_dump()
        data["release_date"] = release_datetime(self.release_date)
        return data


class AlbumUpdateAttributes(BaseSchema):
    """Attributes for updating an album; unknown attributes become warnings."""

    title: Optional[str] = Field(None, min_length=1, max_length=255, description="Album title")
    release_date: Optional[date] = Field(None, description="Release date (YYYY-MM-DD)")
    metadata: Optional[AlbumMetadataPatch] = Field(None, description="Album cover")

    class Config:
        extra = "allow"

    def to_service_data(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        data.update(self.model_extra or {})
        if "release_date" in data:
            data["release_date"] = release_datetime(self.release_date)
        return data


class AlbumCreateResource(BaseSchema):
    """JSON:API resource for a new album."""

    type: str = Field("album", description="Resource type")
    attributes: AlbumCreateAttributes


class AlbumUpdateResource(BaseSchema):
    """JSON:API resource for an album update."""

    type: str = Field("album", description="Resource type")
    attributes: AlbumUpdateAttributes


class AlbumCreateRequest(BaseSchema):
    """Request schema for creating an album."""

    data: AlbumCreateResource = Field(description="Album data to create")


class AlbumUpdateRequest(BaseSchema):
    """Request schema for updating an album."""

    data: AlbumUpdateResource = Field(description="Album data to update")


def album_attributes(album, genres: Optional[List[Any]] = None) -> Dict[str, Any]:
    """Serialize an album with the relations that are loaded on it."""
    attributes = album.to_dict()

    metadata = album.loaded("metadata_record")
    if metadata is not None:
        attributes["metadata"] = {"cover_url": metadata.cover_url}

    singles = album.loaded("singles")
    if singles is not None:
        attributes["singles"] = [
            {"id": single.id, "title": single.title, "genre_id": single.genre_id}
            for single in sorted(singles, key=lambda single: single.id)
        ]

    if genres is not None:
        attributes["genre_names"] = [genre.name for genre in genres]

    return attributes
