"""Album service layer."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import asc, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.models.album import Album
from src.models.genre import Genre
from src.models.metadata import Metadata
from src.models.single import Single
from src.services.business_rules import ReleaseRules
from src.services.exceptions import AlbumNotFound, CatalogValidationError, InternalError
from src.services.genre_rollup import GenreRollupService
from src.services.repositories import CatalogRepository

logger = logging.getLogger(__name__)

ALBUM_SORT_FIELDS = {
    "title": Album.title,
    "release_date": Album.release_date,
    "created_at": Album.created_at,
}

# Attributes a caller may change on an existing album
ALBUM_MODIFIABLE_FIELDS = {"title", "release_date", "metadata"}


class AlbumService:
    """Album lifecycle for an owning artist. Album genres are derived, never set."""

    def __init__(self, db_session: AsyncSession, repository: Optional[CatalogRepository] = None):
        self.db = db_session
        self.repository = repository or CatalogRepository(db_session)
        self.rollups = GenreRollupService(db_session, self.repository)

    async def get_album(self, album_id: int) -> Tuple[Album, List[Genre]]:
        """Get an album with its singles and the genres those singles carry."""
        album = await self.repository.get_album(album_id, with_details=True)
        if not album:
            raise AlbumNotFound(f"Album {album_id} not found")
        genres = await self.repository.get_genres_by_ids(album.genres or [])
        return album, genres

    async def _get_owned_album(self, album_id: int, artist_id: int) -> Album:
        album = await self.repository.get_album(album_id, with_details=True)
        if not album or album.artist_id != artist_id:
            raise AlbumNotFound(f"Album {album_id} not found")
        return album

    async def list_albums(
        self,
        offset: int = 0,
        limit: int = 25,
        title: Optional[str] = None,
        artist_id: Optional[int] = None,
        genre_id: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc"
    ) -> Tuple[List[Album], int]:
        """List albums with filtering, sorting and pagination."""
        query = select(Album)

        if title:
            query = query.where(Album.title.ilike(f"%{title}%"))
        if artist_id is not None:
            query = query.where(Album.artist_id == artist_id)
        if genre_id is not None:
            # Album genres mirror the genres of its singles
            query = query.where(
                Album.id.in_(select(Single.album_id).where(Single.genre_id == genre_id))
            )

        total_result = await self.db.execute(select(func.count()).select_from(query.subquery()))
        total = total_result.scalar()

        sort_column = ALBUM_SORT_FIELDS.get(sort_by or "created_at", Album.created_at)
        order = desc if sort_order == "desc" else asc
        query = (
            query.options(selectinload(Album.metadata_record))
            .order_by(order(sort_column), Album.id)
            .offset(offset)
            .limit(limit)
        )

        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def create_album(self, artist_id: int, album_data: Dict[str, Any]) -> Album:
        """Create an album and its cover metadata; genres start empty."""
        logger.info(f"Artist {artist_id} creating album: {album_data.get('title')}")

        validation_result = ReleaseRules.validate_title(album_data.get("title"))
        if not validation_result.is_valid:
            raise CatalogValidationError("Album validation failed", validation_result.errors)

        metadata_data = album_data.get("metadata") or {}

        try:
            album = Album(
                title=album_data["title"],
                artist_id=artist_id,
                release_date=album_data.get("release_date"),
                genres=[],
            )
            self.db.add(album)
            await self.db.flush()  # Get album ID

            self.db.add(Metadata(album_id=album.id, cover_url=metadata_data.get("cover_url")))
            await self.db.commit()

        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to create album for artist {artist_id}: {e}")
            raise InternalError("Album creation failed")

        logger.info(f"Created album {album.id}: {album.title}")
        return await self.repository.get_album(album.id, with_details=True)

    async def update_album(
        self,
        album_id: int,
        artist_id: int,
        update_data: Dict[str, Any]
    ) -> Tuple[Album, List[Dict[str, str]]]:
        """Update title, release date or cover; other supplied fields become warnings."""
        album = await self._get_owned_album(album_id, artist_id)

        ignored = [field for field in update_data if field not in ALBUM_MODIFIABLE_FIELDS]
        warnings = ReleaseRules.non_modifiable_field_warnings(ignored)

        if update_data.get("title") is not None:
            validation_result = ReleaseRules.validate_title(update_data["title"])
            if not validation_result.is_valid:
                raise CatalogValidationError("Album validation failed", validation_result.errors)

        try:
            if update_data.get("title") is not None:
                album.title = update_data["title"]
            if "release_date" in update_data:
                album.release_date = update_data["release_date"]

            metadata_data = update_data.get("metadata") or {}
            if metadata_data.get("cover_url") is not None:
                if album.metadata_record is None:
                    album.metadata_record = Metadata(cover_url=metadata_data["cover_url"])
                else:
                    album.metadata_record.cover_url = metadata_data["cover_url"]

            await self.db.commit()

        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to update album {album_id}: {e}")
            raise InternalError("Album update failed")

        logger.info(f"Updated album {album_id}")
        return await self.repository.get_album(album_id, with_details=True), warnings

    async def delete_album(self, album_id: int, artist_id: int) -> None:
        """Delete an album; its singles remain, detached from it."""
        album = await self._get_owned_album(album_id, artist_id)

        try:
            for single in album.singles:
                single.album_id = None
            await self.db.delete(album)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to delete album {album_id}: {e}")
            raise InternalError("Album deletion failed")

        logger.info(f"Deleted album {album_id} of artist {artist_id}")

        await self.rollups.recompute_artist_genres(artist_id)
