"""Genre reference data."""

import re

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship, validates

from .base import BaseModel

# Catalog genres seeded by the initial migration
DEFAULT_GENRES = [
    ("Pop", "Popular music"),
    ("Rock", "Rock music"),
    ("HipHop", "Hip Hop music"),
    ("Jazz", "Jazz music"),
    ("Classical", "Classical music"),
    ("Electronic", "Electronic music"),
    ("Reggae", "Reggae music"),
    ("Country", "Country music"),
    ("Blues", "Blues music"),
    ("Metal", "Metal music"),
    ("Soul", "Soul music"),
    ("Funk", "Funk music"),
    ("Disco", "Disco music"),
    ("Folk", "Folk music"),
    ("Latin", "Latin music"),
    ("Other", "Other music"),
]


def slugify(name: str) -> str:
    """Minimal slug: lower-case with whitespace runs replaced by hyphens."""
    return re.sub(r"\s+", "-", name.strip().lower())


class Genre(BaseModel):
    """Musical genre a single is classified under."""

    __tablename__ = "genres"

    name = Column(
        String(100),
        nullable=False,
        unique=True,
        comment="Genre name"
    )
    description = Column(
        String(255),
        comment="Short description"
    )
    slug = Column(
        String(100),
        nullable=False,
        unique=True,
        comment="URL-friendly name"
    )

    singles = relationship("Single", back_populates="genre")

    @validates("name")
    def validate_name(self, key, value):
        """Keep the slug in step with the name."""
        if not value or not value.strip():
            raise ValueError("Genre name cannot be empty")
        value = value.strip()
        self.slug = slugify(value)
        return value

    def __repr__(self) -> str:
        return f"<Genre(id={self.id}, name='{self.name}')>"
