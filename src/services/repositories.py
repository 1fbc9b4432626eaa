"""Typed persistence queries for catalog entities."""

import logging
from typing import Dict, List, Optional, Sequence

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.models.album import Album
from src.models.artist import Artist
from src.models.genre import Genre
from src.models.metadata import Metadata
from src.models.single import Single
from src.models.stat import Stat

logger = logging.getLogger(__name__)


class CatalogRepository:
    """
    Repository over an async session.

    Services go through these queries instead of building statements
    themselves, so rollups and validators stay independent of the storage
    technology.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    # Point lookups

    async def get_artist(self, artist_id: int) -> Optional[Artist]:
        return await self.db.get(Artist, artist_id)

    async def get_artist_by_email(self, email: str) -> Optional[Artist]:
        result = await self.db.execute(select(Artist).where(Artist.email == email.strip().lower()))
        return result.scalar_one_or_none()

    async def get_genre(self, genre_id: int) -> Optional[Genre]:
        return await self.db.get(Genre, genre_id)

    async def get_genre_by_name(self, name: str) -> Optional[Genre]:
        result = await self.db.execute(select(Genre).where(func.lower(Genre.name) == name.strip().lower()))
        return result.scalar_one_or_none()

    async def get_album(self, album_id: int, with_details: bool = False) -> Optional[Album]:
        query = select(Album).where(Album.id == album_id)
        if with_details:
            query = query.execution_options(populate_existing=True).options(
                selectinload(Album.artist),
                selectinload(Album.metadata_record),
                selectinload(Album.singles),
            )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_single(self, single_id: int, with_details: bool = False) -> Optional[Single]:
        query = select(Single).where(Single.id == single_id).options(
            selectinload(Single.featurings),
        )
        if with_details:
            query = query.execution_options(populate_existing=True).options(
                selectinload(Single.artist),
                selectinload(Single.album),
                selectinload(Single.genre),
                selectinload(Single.stat),
                selectinload(Single.metadata_record).selectinload(Metadata.copyrights),
            )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_stat(self, stat_id: int) -> Optional[Stat]:
        query = (
            select(Stat)
            .where(Stat.id == stat_id)
            .execution_options(populate_existing=True)
            .options(selectinload(Stat.single).selectinload(Single.artist))
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    # Batch lookups

    async def get_artists_by_ids(self, artist_ids: Sequence[int]) -> List[Artist]:
        """Resolve a set of artists in one query, ordered by id."""
        if not artist_ids:
            return []
        result = await self.db.execute(
            select(Artist).where(Artist.id.in_(list(artist_ids))).order_by(Artist.id)
        )
        return list(result.scalars().all())

    async def get_genres_by_ids(self, genre_ids: Sequence[int]) -> List[Genre]:
        if not genre_ids:
            return []
        result = await self.db.execute(
            select(Genre).where(Genre.id.in_(list(genre_ids)))
        )
        genres = {genre.id: genre for genre in result.scalars().all()}
        return [genres[genre_id] for genre_id in genre_ids if genre_id in genres]

    # Aggregate queries

    async def count_singles_by_genre(self, artist_id: int) -> Dict[int, int]:
        """Number of the artist's singles per genre id."""
        result = await self.db.execute(
            select(Single.genre_id, func.count(Single.id))
            .where(Single.artist_id == artist_id)
            .group_by(Single.genre_id)
        )
        return {genre_id: int(count) for genre_id, count in result.all()}

    async def distinct_genres_for_album(self, album_id: int) -> List[int]:
        """Distinct genre ids among the album's singles, ascending."""
        result = await self.db.execute(
            select(distinct(Single.genre_id))
            .where(Single.album_id == album_id)
            .order_by(Single.genre_id)
        )
        return [genre_id for genre_id in result.scalars().all()]

    async def sum_listens_for_artist(self, artist_id: int) -> int:
        """Total listens across singles owned by the artist."""
        result = await self.db.execute(
            select(func.coalesce(func.sum(Stat.listens_count), 0))
            .join(Single, Single.id == Stat.single_id)
            .where(Single.artist_id == artist_id)
        )
        return int(result.scalar_one())

    async def artist_totals(self, artist_id: int) -> Dict[str, float]:
        """Total listens and revenue across singles owned by the artist."""
        result = await self.db.execute(
            select(
                func.coalesce(func.sum(Stat.listens_count), 0),
                func.coalesce(func.sum(Stat.revenue), 0),
            )
            .join(Single, Single.id == Stat.single_id)
            .where(Single.artist_id == artist_id)
        )
        total_listens, total_revenue = result.one()
        return {
            "total_listens": int(total_listens),
            "total_revenue": float(total_revenue),
        }

    async def count_singles_for_genre(self, genre_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Single.id)).where(Single.genre_id == genre_id)
        )
        return int(result.scalar_one())

