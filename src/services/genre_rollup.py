"""Derived genre aggregates for artists and albums."""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.services.business_rules import MAX_ARTIST_GENRES, rank_top_genres
from src.services.repositories import CatalogRepository

logger = logging.getLogger(__name__)


class GenreRollupService:
    """
    Recomputes the genre lists derived from an owner's singles.

    Each recomputation reads the current rows and overwrites the derived
    field, so running it twice gives the same result. A missing target is
    ignored.
    """

    def __init__(self, db_session: AsyncSession, repository: Optional[CatalogRepository] = None):
        self.db = db_session
        self.repository = repository or CatalogRepository(db_session)

    async def recompute_artist_genres(self, artist_id: int) -> Optional[List[int]]:
        """Store the artist's top genres by single count."""
        artist = await self.repository.get_artist(artist_id)
        if not artist:
            logger.debug(f"Skipping genre rollup for missing artist {artist_id}")
            return None

        counts = await self.repository.count_singles_by_genre(artist_id)
        top_genres = rank_top_genres(counts, limit=MAX_ARTIST_GENRES)

        artist.genres = top_genres
        await self.db.commit()

        logger.info(f"Artist {artist_id} genres recomputed: {top_genres}")
        return top_genres

    async def recompute_album_genres(self, album_id: int) -> Optional[List[int]]:
        """Store the distinct genres of the album's singles."""
        album = await self.repository.get_album(album_id)
        if not album:
            logger.debug(f"Skipping genre rollup for missing album {album_id}")
            return None

        genres = await self.repository.distinct_genres_for_album(album_id)

        album.genres = sorted(genres)
        await self.db.commit()

        logger.info(f"Album {album_id} genres recomputed: {album.genres}")
        return album.genres

    async def recompute_for_release(self, artist_id: int, *album_ids: Optional[int]) -> None:
        """Refresh the artist rollup and each distinct album given."""
        await self.recompute_artist_genres(artist_id)
        for album_id in sorted({album_id for album_id in album_ids if album_id is not None}):
            await self.recompute_album_genres(album_id)
