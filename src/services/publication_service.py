"""Single publication workflow.

Publishing a single validates its copyright ledger, composes the display
title from the featuring artists, and writes the single, its featurings,
metadata, copyrights and initial stat in one transaction. Genre rollups and
the publication notification run once the transaction has committed.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import asc, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.models.album import Album
from src.models.metadata import Copyright, Metadata
from src.models.single import Single
from src.models.stat import Stat
from src.services.business_rules import (
    ReleaseRules,
    ValidationError,
    compose_featuring_title,
    strip_featuring,
)
from src.services.copyright_ledger import CopyrightLedgerValidator, LedgerResolution
from src.services.exceptions import (
    CatalogServiceError,
    CatalogValidationError,
    GenreNotFound,
    InternalError,
    SingleNotFound,
)
from src.services.genre_rollup import GenreRollupService
from src.services.notifications import Notifier, get_notifier
from src.services.repositories import CatalogRepository

logger = logging.getLogger(__name__)

SINGLE_SORT_FIELDS = {
    "title": Single.title,
    "release_date": Single.release_date,
    "created_at": Single.created_at,
}

# Attributes a caller may change on an existing single
SINGLE_MODIFIABLE_FIELDS = {"title", "genre_id", "album_id", "release_date", "metadata", "copyrights"}


def _copyright_rows(entries: List[Dict[str, Any]]) -> List[Copyright]:
    return [
        Copyright(
            artist_id=entry.get("artist_id"),
            owner_name=entry.get("owner_name"),
            role=entry["role"],
            percentage=entry["percentage"],
        )
        for entry in entries
    ]


class PublicationService:
    """Creates, updates and deletes singles on behalf of their owning artist."""

    def __init__(
        self,
        db_session: AsyncSession,
        notifier: Optional[Notifier] = None,
        repository: Optional[CatalogRepository] = None
    ):
        self.db = db_session
        self.repository = repository or CatalogRepository(db_session)
        self.ledger = CopyrightLedgerValidator(self.repository)
        self.rollups = GenreRollupService(db_session, self.repository)
        self.notifier = notifier or get_notifier()

    # Lookups

    async def get_single(self, single_id: int) -> Single:
        """Get a single with its metadata, copyrights, stat and featurings."""
        single = await self.repository.get_single(single_id, with_details=True)
        if not single:
            raise SingleNotFound(f"Single {single_id} not found")
        return single

    async def _get_owned_single(self, single_id: int, artist_id: int) -> Single:
        single = await self.repository.get_single(single_id, with_details=True)
        if not single or single.artist_id != artist_id:
            raise SingleNotFound(f"Single {single_id} not found")
        return single

    async def list_singles(
        self,
        offset: int = 0,
        limit: int = 25,
        title: Optional[str] = None,
        artist_id: Optional[int] = None,
        genre_id: Optional[int] = None,
        album_id: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc"
    ) -> Tuple[List[Single], int]:
        """List singles with filtering, sorting and pagination."""
        query = select(Single)

        if title:
            query = query.where(Single.title.ilike(f"%{title}%"))
        if artist_id is not None:
            query = query.where(Single.artist_id == artist_id)
        if genre_id is not None:
            query = query.where(Single.genre_id == genre_id)
        if album_id is not None:
            query = query.where(Single.album_id == album_id)

        total_result = await self.db.execute(select(func.count()).select_from(query.subquery()))
        total = total_result.scalar()

        sort_column = SINGLE_SORT_FIELDS.get(sort_by or "created_at", Single.created_at)
        order = desc if sort_order == "desc" else asc
        query = (
            query.options(selectinload(Single.featurings), selectinload(Single.stat))
            .order_by(order(sort_column), Single.id)
            .offset(offset)
            .limit(limit)
        )

        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    # Validation helpers

    async def _check_references(
        self,
        artist_id: int,
        genre_id: Optional[int],
        album_id: Optional[int]
    ) -> Optional[Album]:
        """Genre must exist; a parent album must exist and belong to the artist."""
        if genre_id is not None:
            genre = await self.repository.get_genre(genre_id)
            if not genre:
                raise GenreNotFound(f"Genre {genre_id} does not exist", field="genre_id")

        if album_id is None:
            return None

        album = await self.repository.get_album(album_id)
        if not album or album.artist_id != artist_id:
            raise CatalogValidationError(
                "Album validation failed",
                [ValidationError(
                    field="album_id",
                    code="ALBUM_NOT_FOUND",
                    message=f"Album {album_id} does not exist"
                )]
            )
        return album

    @staticmethod
    def _check_title(title: Optional[str]) -> None:
        result = ReleaseRules.validate_title(title)
        if not result.is_valid:
            raise CatalogValidationError("Single validation failed", result.errors)

    # Core operations

    async def create_single(self, artist_id: int, single_data: Dict[str, Any]) -> Single:
        """
        Publish a new single for an artist.

        Args:
            artist_id: Owning artist
            single_data: title, genre_id, release_date, album_id, metadata
                (cover_url, lyrics) and copyrights

        Returns:
            Single: The persisted single with details loaded

        Raises:
            CatalogServiceError: If any validation fails; nothing is written
        """
        logger.info(f"Artist {artist_id} publishing single: {single_data.get('title')}")

        self._check_title(single_data.get("title"))
        album = await self._check_references(
            artist_id, single_data.get("genre_id"), single_data.get("album_id")
        )

        copyrights = single_data.get("copyrights") or []
        try:
            resolution = await self.ledger.resolve(copyrights, artist_id)
        except CatalogServiceError as e:
            logger.info(f"Rejected single for artist {artist_id}: {e.code} {e.message}")
            raise

        title = compose_featuring_title(single_data["title"], resolution.featuring_names)
        metadata_data = single_data.get("metadata") or {}

        try:
            single = Single(
                title=title,
                artist_id=artist_id,
                album_id=single_data.get("album_id"),
                genre_id=single_data["genre_id"],
                release_date=single_data.get("release_date"),
            )
            single.featurings = list(resolution.featuring_artists)
            self.db.add(single)
            await self.db.flush()  # Get single ID

            metadata = Metadata(
                single_id=single.id,
                cover_url=metadata_data.get("cover_url"),
                lyrics=metadata_data.get("lyrics"),
            )
            metadata.copyrights = _copyright_rows(copyrights)
            self.db.add(metadata)

            stat = Stat(single_id=single.id)
            stat.set_listens(0)
            self.db.add(stat)

            await self.db.commit()

        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to create single for artist {artist_id}: {e}")
            raise InternalError("Single creation failed")

        single_id = single.id
        logger.info(f"Created single {single_id}: {title}")

        await self.rollups.recompute_for_release(artist_id, single.album_id)
        await self._notify_publication(single_id, album)

        return await self.get_single(single_id)

    async def update_single(
        self,
        single_id: int,
        artist_id: int,
        update_data: Dict[str, Any]
    ) -> Tuple[Single, List[Dict[str, str]]]:
        """
        Update a single owned by the artist.

        Featurings are replaced by the set resolved from ``copyrights`` when
        given, and the copyright ledger is deleted and recreated. Without
        ``copyrights`` the current featurings are kept and only the title is
        recomposed.

        Returns:
            Tuple[Single, List[Dict[str, str]]]: Updated single and warnings
            for supplied attributes that cannot be changed
        """
        single = await self._get_owned_single(single_id, artist_id)

        ignored = [field for field in update_data if field not in SINGLE_MODIFIABLE_FIELDS]
        warnings = ReleaseRules.non_modifiable_field_warnings(ignored)
        changes = {k: v for k, v in update_data.items() if k in SINGLE_MODIFIABLE_FIELDS}

        base_title = changes["title"] if changes.get("title") is not None else strip_featuring(single.title)
        self._check_title(base_title)

        album_changed = "album_id" in changes and changes["album_id"] != single.album_id
        await self._check_references(
            artist_id,
            changes.get("genre_id"),
            changes["album_id"] if album_changed else None,
        )

        copyrights = changes.get("copyrights")
        resolution: Optional[LedgerResolution] = None
        if copyrights is not None:
            try:
                resolution = await self.ledger.resolve(copyrights, artist_id)
            except CatalogServiceError as e:
                logger.info(f"Rejected update of single {single_id}: {e.code} {e.message}")
                raise

        featuring = resolution.featuring_artists if resolution else list(single.featurings)
        old_album_id = single.album_id

        try:
            single.title = compose_featuring_title(base_title, [artist.name for artist in featuring])
            if changes.get("genre_id") is not None:
                single.genre_id = changes["genre_id"]
            if "album_id" in changes:
                single.album_id = changes["album_id"]
            if "release_date" in changes:
                single.release_date = changes["release_date"]
            if resolution is not None:
                single.featurings = list(resolution.featuring_artists)

            # Metadata is created with the single and lives as long as it does
            metadata = single.metadata_record
            metadata_data = changes.get("metadata") or {}
            for field in ("cover_url", "lyrics"):
                if metadata_data.get(field) is not None:
                    setattr(metadata, field, metadata_data[field])

            if copyrights is not None:
                metadata.copyrights = _copyright_rows(copyrights)

            await self.db.commit()

        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to update single {single_id}: {e}")
            raise InternalError("Single update failed")

        logger.info(f"Updated single {single_id}: {single.title}")

        await self.rollups.recompute_for_release(artist_id, old_album_id, single.album_id)

        return await self.get_single(single_id), warnings

    async def delete_single(self, single_id: int, artist_id: int) -> None:
        """Delete a single owned by the artist together with its metadata and stat."""
        single = await self._get_owned_single(single_id, artist_id)
        album_id = single.album_id

        try:
            await self.db.delete(single)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to delete single {single_id}: {e}")
            raise InternalError("Single deletion failed")

        logger.info(f"Deleted single {single_id} of artist {artist_id}")

        await self.rollups.recompute_for_release(artist_id, album_id)

    # Side effects

    async def _notify_publication(self, single_id: int, album: Optional[Album]) -> None:
        single = await self.repository.get_single(single_id, with_details=True)
        if not single or not single.artist:
            return

        delivered = await self.notifier.send_publication_notification(
            contact=single.artist.email,
            release_title=single.title,
            release_date=single.release_date,
            album_title=album.title if album else None,
        )
        if not delivered:
            logger.warning(f"Publication notification for single {single_id} was not delivered")

