"""Artist profile service layer."""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import asc, desc, func, select, type_coerce
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.artist import Artist
from src.services.business_rules import ReleaseRules
from src.services.exceptions import (
    ArtistNotFound,
    ArtistsNotFound,
    ConflictError,
    InternalError,
)
from src.services.repositories import CatalogRepository

logger = logging.getLogger(__name__)

ARTIST_SORT_FIELDS = {
    "popularity": Artist.popularity,
    "name": func.lower(Artist.name),
}

# Attributes an artist may change on their own profile
ARTIST_MODIFIABLE_FIELDS = {"biography", "social_links", "location"}


class ArtistService:
    """
    Artist profiles.

    ``genres`` and ``popularity`` belong to the rollup and stats services;
    callers only ever change the biography, social links and location.
    """

    def __init__(self, db_session: AsyncSession, repository: Optional[CatalogRepository] = None):
        self.db = db_session
        self.repository = repository or CatalogRepository(db_session)

    async def create_artist(self, artist_data: Dict[str, Any]) -> Artist:
        """
        Create an artist profile with empty genres and zero popularity.

        Raises:
            ConflictError: If the email is already registered
        """
        if await self.repository.get_artist_by_email(artist_data["email"]):
            raise ConflictError("Email is already registered", code="EMAIL_TAKEN", field="email")

        artist = Artist(
            name=artist_data["name"],
            email=artist_data["email"],
            biography=artist_data.get("biography"),
            genres=[],
            popularity=0,
        )
        self.db.add(artist)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Email is already registered", code="EMAIL_TAKEN", field="email")

        logger.info(f"Created artist {artist.id}: {artist.name}")
        return artist

    async def get_artist(self, artist_id: int) -> Artist:
        artist = await self.repository.get_artist(artist_id)
        if not artist:
            raise ArtistNotFound(f"Artist {artist_id} not found")
        return artist

    async def update_profile(
        self,
        artist_id: int,
        update_data: Dict[str, Any]
    ) -> Tuple[Artist, List[Dict[str, str]]]:
        """
        Update the calling artist's own profile.

        Returns:
            Tuple[Artist, List[Dict[str, str]]]: Updated artist and warnings
            for supplied attributes that cannot be changed
        """
        artist = await self.get_artist(artist_id)

        ignored = [field for field in update_data if field not in ARTIST_MODIFIABLE_FIELDS]
        warnings = ReleaseRules.non_modifiable_field_warnings(ignored)

        try:
            for field in ARTIST_MODIFIABLE_FIELDS:
                if update_data.get(field) is not None:
                    setattr(artist, field, update_data[field])
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to update profile of artist {artist_id}: {e}")
            raise InternalError("Profile update failed")

        if warnings:
            logger.info(f"Artist {artist_id} sent non-modifiable fields: {[w['field'] for w in warnings]}")
        return artist, warnings

    def _genre_condition(self, genre_id: int):
        """Match artists whose derived genre list holds the genre."""
        if self.db.get_bind().dialect.name == "postgresql":
            return type_coerce(Artist.genres, JSONB).contains([genre_id])

        elements = func.json_each(Artist.genres).table_valued("value")
        return select(elements.c.value).where(elements.c.value == genre_id).exists()

    async def list_artists(
        self,
        offset: int = 0,
        limit: int = 25,
        name: Optional[str] = None,
        genre_id: Optional[int] = None,
        country: Optional[str] = None,
        city: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc"
    ) -> Tuple[List[Artist], int]:
        """
        List artists with filtering, sorting and pagination.

        Name, country and city filters are case-insensitive partial matches.
        Without a known ``sort_by`` the newest profiles come first.
        """
        query = select(Artist)

        if name:
            query = query.where(Artist.name.ilike(f"%{name}%"))
        if genre_id is not None:
            query = query.where(self._genre_condition(genre_id))
        if country:
            query = query.where(Artist.location["country"].as_string().ilike(f"%{country}%"))
        if city:
            query = query.where(Artist.location["city"].as_string().ilike(f"%{city}%"))

        total_result = await self.db.execute(select(func.count()).select_from(query.subquery()))
        total = total_result.scalar()

        if sort_by in ARTIST_SORT_FIELDS:
            order = desc if sort_order == "desc" else asc
            query = query.order_by(order(ARTIST_SORT_FIELDS[sort_by]), Artist.id)
        else:
            query = query.order_by(desc(Artist.created_at), desc(Artist.id))

        result = await self.db.execute(query.offset(offset).limit(limit))
        return list(result.scalars().all()), total

    async def compare_artists(self, artist_ids: Sequence[int]) -> List[Artist]:
        """
        Look up artists side by side, in the order requested.

        Raises:
            ArtistsNotFound: If any id has no artist; ``meta`` lists the missing ids
        """
        found = {artist.id: artist for artist in await self.repository.get_artists_by_ids(set(artist_ids))}
        missing = sorted({artist_id for artist_id in artist_ids if artist_id not in found})
        if missing:
            raise ArtistsNotFound(
                "One or more artists not found",
                meta={"missing_artist_ids": missing},
            )
        return [found[artist_id] for artist_id in artist_ids]

