"""Single model and featuring association."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Table
from sqlalchemy.orm import relationship

from src.core.database import Base

from .base import BaseModel

# Featuring artists, distinct from primary ownership
single_featurings = Table(
    "single_featurings",
    Base.metadata,
    Column("single_id", Integer, ForeignKey("singles.id", ondelete="CASCADE"), primary_key=True),
    Column("artist_id", Integer, ForeignKey("artists.id", ondelete="CASCADE"), primary_key=True),
)


class Single(BaseModel):
    """
    Single published by an artist, optionally part of an album.

    The stored title is the composed display title: any caller-supplied
    ``(feat. ...)`` fragment is replaced by one generated from ``featurings``.
    """

    __tablename__ = "singles"

    title = Column(
        String(500),
        nullable=False,
        comment="Display title including the generated featuring suffix"
    )
    artist_id = Column(
        Integer,
        ForeignKey("artists.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning (primary) artist"
    )
    album_id = Column(
        Integer,
        ForeignKey("albums.id", ondelete="SET NULL"),
        nullable=True,
        comment="Parent album, if any"
    )
    genre_id = Column(
        Integer,
        ForeignKey("genres.id", ondelete="RESTRICT"),
        nullable=False,
        comment="Genre of the single"
    )
    release_date = Column(
        DateTime(timezone=True),
        comment="Planned or actual release date"
    )

    # Relationships
    artist = relationship("Artist", back_populates="singles")
    album = relationship("Album", back_populates="singles")
    genre = relationship("Genre", back_populates="singles")
    featurings = relationship(
        "Artist",
        secondary=single_featurings,
        order_by="Artist.id",
    )
    metadata_record = relationship(
        "Metadata",
        back_populates="single",
        uselist=False,
        cascade="all, delete-orphan",
    )
    stat = relationship(
        "Stat",
        back_populates="single",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_singles_artist_id", "artist_id"),
        Index("idx_singles_album_id", "album_id"),
        Index("idx_singles_genre_id", "genre_id"),
        Index("idx_singles_title", "title"),
    )

    def __repr__(self) -> str:
        return f"<Single(id={self.id}, title='{self.title}')>"
