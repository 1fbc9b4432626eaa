"""Release metadata and copyright share models."""

from sqlalchemy import (
    CheckConstraint, Column, ForeignKey, Index, Integer, Numeric, String, Text
)
from sqlalchemy.orm import relationship

from .base import BaseModel


class Metadata(BaseModel):
    """
    Cover and lyrics metadata for exactly one release (single XOR album).
    Owns the release's copyright ledger.
    """

    __tablename__ = "metadata"

    single_id = Column(
        Integer,
        ForeignKey("singles.id", ondelete="CASCADE"),
        nullable=True,
        unique=True,
        comment="Owning single"
    )
    album_id = Column(
        Integer,
        ForeignKey("albums.id", ondelete="CASCADE"),
        nullable=True,
        unique=True,
        comment="Owning album"
    )
    cover_url = Column(
        String(2048),
        nullable=False,
        comment="Cover image URL"
    )
    lyrics = Column(
        Text,
        comment="Lyrics text (singles only)"
    )

    # Relationships
    single = relationship("Single", back_populates="metadata_record")
    album = relationship("Album", back_populates="metadata_record")
    copyrights = relationship(
        "Copyright",
        back_populates="metadata_record",
        cascade="all, delete-orphan",
        order_by="Copyright.id",
    )

    __table_args__ = (
        CheckConstraint(
            "(single_id IS NOT NULL AND album_id IS NULL) OR "
            "(single_id IS NULL AND album_id IS NOT NULL)",
            name="metadata_single_xor_album"
        ),
    )

    def __repr__(self) -> str:
        return f"<Metadata(id={self.id}, single_id={self.single_id}, album_id={self.album_id})>"


class Copyright(BaseModel):
    """
    One share of a release's revenue, attributed to either a platform artist
    or an external owner named in free text.
    """

    __tablename__ = "copyrights"

    metadata_id = Column(
        Integer,
        ForeignKey("metadata.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning metadata record"
    )
    artist_id = Column(
        Integer,
        ForeignKey("artists.id", ondelete="SET NULL"),
        nullable=True,
        comment="Platform artist holding the share"
    )
    owner_name = Column(
        String(255),
        nullable=True,
        comment="External owner holding the share"
    )
    role = Column(
        String(255),
        nullable=False,
        comment="Free-text role, e.g. composer, performer"
    )
    percentage = Column(
        Numeric(6, 3),
        nullable=False,
        comment="Share percentage (0-100)"
    )

    # Relationships
    metadata_record = relationship("Metadata", back_populates="copyrights")
    artist = relationship("Artist")

    __table_args__ = (
        CheckConstraint(
            "percentage >= 0 AND percentage <= 100",
            name="valid_copyright_percentage"
        ),
        Index("idx_copyrights_metadata_id", "metadata_id"),
        Index("idx_copyrights_artist_id", "artist_id"),
    )

    def __repr__(self) -> str:
        owner = self.artist_id if self.artist_id is not None else self.owner_name
        return f"<Copyright(metadata_id={self.metadata_id}, owner={owner!r}, percentage={self.percentage})>"
