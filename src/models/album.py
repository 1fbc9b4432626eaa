"""Album model."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from .base import BaseModel, JSONType


class Album(BaseModel):
    """
    Album grouping an artist's singles.

    The album genre set is derived from its singles by the genre rollup
    service and is never set directly.
    """

    __tablename__ = "albums"

    title = Column(
        String(255),
        nullable=False,
        comment="Album title"
    )
    artist_id = Column(
        Integer,
        ForeignKey("artists.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning artist"
    )
    genres = Column(
        JSONType,
        default=list,
        nullable=False,
        comment="Distinct genre ids among the album's singles"
    )
    release_date = Column(
        DateTime(timezone=True),
        comment="Planned or actual release date"
    )

    # Relationships
    artist = relationship("Artist", back_populates="albums")
    singles = relationship("Single", back_populates="album")
    metadata_record = relationship(
        "Metadata",
        back_populates="album",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_albums_artist_id", "artist_id"),
        Index("idx_albums_title", "title"),
    )

    def __repr__(self) -> str:
        return f"<Album(id={self.id}, title='{self.title}')>"
