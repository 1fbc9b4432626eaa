"""Database models for the catalog service."""

from .base import BaseModel, TimestampMixin
from .artist import Artist
from .genre import Genre
from .album import Album
from .single import Single, single_featurings
from .metadata import Metadata, Copyright
from .stat import Stat

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "Artist",
    "Genre",
    "Album",
    "Single",
    "single_featurings",
    "Metadata",
    "Copyright",
    "Stat",
]
