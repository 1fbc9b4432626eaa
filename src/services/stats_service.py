"""Listen statistics, revenue and award detection."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.stat import Stat
from src.services.business_rules import detect_awards_crossed
from src.services.exceptions import (
    ArtistNotFound,
    InternalError,
    SingleNotFound,
    StatNotFound,
    StatsValidationError,
)
from src.services.notifications import Notifier, get_notifier
from src.services.repositories import CatalogRepository

logger = logging.getLogger(__name__)


class StatsService:
    """
    Maintains listen counters for singles.

    Revenue is recomputed from the listen count on every write. Award
    notifications and the artist popularity refresh follow a successful
    update.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        notifier: Optional[Notifier] = None,
        repository: Optional[CatalogRepository] = None
    ):
        self.db = db_session
        self.notifier = notifier or get_notifier()
        self.repository = repository or CatalogRepository(db_session)

    async def update_listen_count(
        self,
        stat_id: int,
        listens_count: Optional[int]
    ) -> Tuple[Stat, List[str]]:
        """
        Set a single's listen count.

        Args:
            stat_id: Stat record to update
            listens_count: New total; ``None`` keeps the stored value

        Returns:
            Tuple[Stat, List[str]]: Updated stat and awards crossed, ascending

        Raises:
            StatNotFound: If no stat has this id
            SingleNotFound: If the stat's single is missing
            StatsValidationError: If the count is negative or decreases
        """
        stat = await self.repository.get_stat(stat_id)
        if not stat:
            raise StatNotFound(f"Stat {stat_id} not found")

        single = stat.single
        if not single:
            raise SingleNotFound(f"Single not found for stat {stat_id}")

        old_listens = stat.listens_count or 0
        new_listens = old_listens if listens_count is None else listens_count

        if new_listens < 0:
            raise StatsValidationError("listens_count cannot be negative", field="listens_count")
        if new_listens < old_listens:
            raise StatsValidationError(
                f"listens_count cannot decrease (current: {old_listens})",
                field="listens_count",
            )

        try:
            stat.set_listens(new_listens)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to update stat {stat_id}: {e}")
            raise InternalError("Update stats failed")

        awards = detect_awards_crossed(old_listens, new_listens)
        if awards:
            await self._notify_awards(single, awards, new_listens)

        await self.recompute_artist_popularity(single.artist_id)

        logger.info(
            f"Stat {stat_id} updated: {old_listens} -> {new_listens} listens, "
            f"awards: {awards or 'none'}"
        )
        return stat, awards

    async def _notify_awards(self, single, awards: List[str], listens_count: int) -> None:
        artist = single.artist
        if not artist:
            logger.warning(f"No owning artist loaded for single {single.id}, skipping award notifications")
            return

        for award in awards:
            delivered = await self.notifier.send_award_notification(
                contact=artist.email,
                artist_name=artist.name,
                release_title=single.title,
                award_name=award,
                listens_count=listens_count,
            )
            if not delivered:
                logger.warning(f"{award} award notification for single {single.id} was not delivered")

    async def recompute_artist_popularity(self, artist_id: int) -> Optional[int]:
        """Store the sum of listens across the artist's own singles."""
        artist = await self.repository.get_artist(artist_id)
        if not artist:
            return None

        total_listens = await self.repository.sum_listens_for_artist(artist_id)
        try:
            artist.popularity = total_listens
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to refresh popularity of artist {artist_id}: {e}")
            raise InternalError("Popularity update failed")

        return total_listens

    async def get_artist_totals(self, artist_id: int) -> Dict[str, Any]:
        """Total listens and revenue across an artist's singles."""
        artist = await self.repository.get_artist(artist_id)
        if not artist:
            raise ArtistNotFound(f"Artist {artist_id} not found")

        totals = await self.repository.artist_totals(artist_id)
        return {"artist_id": artist.id, **totals}
