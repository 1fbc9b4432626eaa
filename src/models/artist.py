"""Artist model for platform members who publish releases."""

from sqlalchemy import BigInteger, CheckConstraint, Column, Index, String, Text
from sqlalchemy.orm import relationship, validates

from .base import BaseModel, JSONType


class Artist(BaseModel):
    """
    Artist publishing singles and albums on the platform.

    ``genres`` and ``popularity`` are derived aggregates maintained by the
    genre rollup and stats services; they are never written by API callers.
    """

    __tablename__ = "artists"

    email = Column(
        String(255),
        nullable=False,
        unique=True,
        comment="Contact email, used for award and publication notifications"
    )
    name = Column(
        String(255),
        nullable=False,
        comment="Display name"
    )
    biography = Column(
        Text,
        comment="Artist biography"
    )
    social_links = Column(
        JSONType,
        comment="Links to the artist's pages, keyed by platform"
    )
    location = Column(
        JSONType,
        comment="Country and city the artist is based in"
    )

    # Derived aggregates
    genres = Column(
        JSONType,
        default=list,
        nullable=False,
        comment="Top genre ids by frequency among the artist's singles (max 3)"
    )
    popularity = Column(
        BigInteger,
        default=0,
        nullable=False,
        comment="Sum of listens across the artist's own singles"
    )

    # Relationships
    singles = relationship("Single", back_populates="artist", cascade="all, delete-orphan")
    albums = relationship("Album", back_populates="artist", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("popularity >= 0", name="non_negative_popularity"),
        CheckConstraint("length(name) > 0", name="artist_name_not_empty"),
        Index("idx_artists_name", "name"),
    )

    @validates("email")
    def validate_email(self, key, value):
        """Normalize email address."""
        if not value or "@" not in value:
            raise ValueError("Invalid email format")
        return value.strip().lower()

    def __repr__(self) -> str:
        return f"<Artist(id={self.id}, name='{self.name}')>"
