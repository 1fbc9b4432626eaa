"""Artist profile schemas."""

from typing import Any, Dict, Optional

from pydantic import EmailStr, Field, field_validator

from .base import BaseSchema


class ArtistCreateAttributes(BaseSchema):
    """
    Attributes for creating an artist profile.

    ``genres`` and ``popularity`` are derived from the artist's singles and
    cannot be supplied.
    """

    name: str = Field(min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(description="Contact email for notifications")
    biography: Optional[str] = Field(None, description="Artist biography")


class ArtistCreateResource(BaseSchema):
    """JSON:API resource for a new artist."""

    type: str = Field("artist", description="Resource type")
    attributes: ArtistCreateAttributes


class ArtistCreateRequest(BaseSchema):
    """Request schema for creating an artist profile."""

    data: ArtistCreateResource = Field(description="Artist data to create")


class ArtistLocation(BaseSchema):
    """Where an artist is based."""

    country: str = Field(min_length=2, max_length=255, pattern=r"^[A-Za-z]+$", description="Country name, letters only")
    city: str = Field(
        max_length=255,
        pattern=r"^[A-Za-z]+(?:[ '-][A-Za-z]+)*$",
        description="City name; words separated by a space, apostrophe or hyphen",
    )


class ArtistUpdateAttributes(BaseSchema):
    """
    Attributes for updating the caller's own profile. Every field is optional.

    Only the biography, social links and location can be changed. Other
    attributes, such as ``genres`` or ``popularity``, are accepted so they
    can be reported back as warnings.
    """

    biography: Optional[str] = Field(None, max_length=1000, description="Artist biography")
    social_links: Optional[Dict[str, str]] = Field(None, description="Profile URLs keyed by platform")
    location: Optional[ArtistLocation] = Field(None, description="Country and city")

    class Config:
        extra = "allow"

    @field_validator("social_links")
    @classmethod
    def validate_social_links(cls, v: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
        if v is None:
            return v
        for platform, url in v.items():
            if not url.startswith(("http://", "https://")) or len(url) <= len("https://"):
                raise ValueError(f"Social link '{platform}' must be a valid URL")
        return v

    def to_service_data(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        data.update(self.model_extra or {})
        return data


class ArtistUpdateResource(BaseSchema):
    """JSON:API resource for a profile update."""

    type: str = Field("artist", description="Resource type")
    attributes: ArtistUpdateAttributes


class ArtistUpdateRequest(BaseSchema):
    """Request schema for updating the caller's profile."""

    data: ArtistUpdateResource = Field(description="Profile changes")
