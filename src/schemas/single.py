"""Single-related Pydantic schemas."""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from .base import BaseSchema, release_datetime, validate_http_url


class CopyrightEntry(BaseSchema):
    """
    One share of a release's copyright ledger.

    Exactly one of ``artist_id`` and ``owner_name`` identifies the holder;
    that rule is enforced with the rest of the ledger checks.
    """

    artist_id: Optional[int] = Field(None, gt=0, description="Platform artist holding the share")
    owner_name: Optional[str] = Field(None, max_length=255, description="External owner holding the share")
    role: str = Field(min_length=1, max_length=255, description="Role, e.g. composer or performer")
    percentage: Decimal = Field(
        max_digits=6, decimal_places=3, description="Share percentage (0-100), at most 3 decimal places"
    )


class SingleMetadataAttributes(BaseSchema):
    """Cover and lyrics of a single."""

    cover_url: str = Field(max_length=2048, description="Cover image URL")
    lyrics: Optional[str] = Field(None, description="Lyrics text")

    @field_validator("cover_url")
    @classmethod
    def validate_cover_url(cls, v: Optional[str]) -> Optional[str]:
        return validate_http_url(v)


class SingleMetadataPatch(BaseSchema):
    """Partial cover and lyrics update."""

    cover_url: Optional[str] = Field(None, max_length=2048, description="Cover image URL")
    lyrics: Optional[str] = Field(None, description="Lyrics text")

    @field_validator("cover_url")
    @classmethod
    def validate_cover_url(cls, v: Optional[str]) -> Optional[str]:
        return validate_http_url(v)


class SingleCreateAttributes(BaseSchema):
    """Attributes for publishing a single."""

    title: str = Field(min_length=1, max_length=255, description="Base title without featuring suffix")
    genre_id: int = Field(gt=0, description="Genre of the single")
    release_date: Optional[date] = Field(None, description="Release date (YYYY-MM-DD)")
    album_id: Optional[int] = Field(None, gt=0, description="Parent album owned by the same artist")
    metadata: SingleMetadataAttributes = Field(description="Cover and lyrics")
    copyrights: List[CopyrightEntry] = Field(min_length=1, description="Copyright ledger totalling 100%")

    def to_service_data(self) -> Dict[str, Any]:
        data = self.model_dump()
        data["release_date"] = release_datetime(self.release_date)
        return data


class SingleUpdateAttributes(BaseSchema):
    """
    Attributes for updating a single. Every field is optional.

    Unknown attributes are accepted so they can be reported back as
    warnings instead of failing the request.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255, description="New base title")
    genre_id: Optional[int] = Field(None, gt=0, description="New genre")
    release_date: Optional[date] = Field(None, description="New release date (YYYY-MM-DD)")
    album_id: Optional[int] = Field(None, gt=0, description="New parent album, or null to detach")
    metadata: Optional[SingleMetadataPatch] = Field(None, description="Cover and lyrics changes")
    copyrights: Optional[List[CopyrightEntry]] = Field(
        None, min_length=1, description="Replacement copyright ledger"
    )

    class Config:
        extra = "allow"

    def to_service_data(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        data.update(self.model_extra or {})
        if "release_date" in data:
            data["release_date"] = release_datetime(self.release_date)
        return data


class SingleCreateResource(BaseSchema):
    """JSON:API resource for a new single."""

    type: str = Field("single", description="Resource type")
    attributes: SingleCreateAttributes


class SingleUpdateResource(BaseSchema):
    """JSON:API resource for a single update."""

    type: str = Field("single", description="Resource type")
    attributes: SingleUpdateAttributes


class SingleCreateRequest(BaseSchema):
    """Request schema for publishing a single."""

    data: SingleCreateResource = Field(description="Single data to create")


class SingleUpdateRequest(BaseSchema):
    """Request schema for updating a single."""

    data: SingleUpdateResource = Field(description="Single data to update")


def single_attributes(single) -> Dict[str, Any]:
    """Serialize a single with the relations that are loaded on it."""
    attributes = single.to_dict()
    attributes["featurings"] = [
        {"id": artist.id, "name": artist.name} for artist in single.loaded("featurings") or []
    ]

    stat = single.loaded("stat")
    if stat is not None:
        attributes["stat"] = {
            "id": stat.id,
            "listens_count": stat.listens_count,
            "revenue": float(stat.revenue),
        }

    metadata = single.loaded("metadata_record")
    if metadata is not None:
        attributes["metadata"] = {
            "cover_url": metadata.cover_url,
            "lyrics": metadata.lyrics,
        }
        copyrights = metadata.loaded("copyrights")
        if copyrights is not None:
            attributes["copyrights"] = [
                {
                    "artist_id": copyright.artist_id,
                    "owner_name": copyright.owner_name,
                    "role": copyright.role,
                    "percentage": float(copyright.percentage),
                }
                for copyright in copyrights
            ]

    genre = single.loaded("genre")
    if genre is not None:
        attributes["genre"] = genre.name

    return attributes
