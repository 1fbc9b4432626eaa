"""Listen statistics endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies.common import get_catalog_notifier, get_current_artist_id
from src.core.database import get_db_session
from src.schemas.base import JSONAPIResponse, resource
from src.schemas.stat import StatUpdateRequest, stat_attributes
from src.services.notifications import Notifier
from src.services.stats_service import StatsService

router = APIRouter()


@router.patch("/{stat_id}", response_model=JSONAPIResponse)
async def update_stat(
    stat_id: int,
    request: StatUpdateRequest,
    session: AsyncSession = Depends(get_db_session),
    artist_id: int = Depends(get_current_artist_id),
    notifier: Notifier = Depends(get_catalog_notifier),
):
    """
    Update a single's listen count.

    Revenue is recomputed, awards crossed by the new count are notified to
    the owning artist and the artist's popularity is refreshed.
    """
    service = StatsService(session, notifier=notifier)
    stat, awards = await service.update_listen_count(stat_id, request.data.attributes.listens_count)

    return JSONAPIResponse(
        data=resource("stat", stat.id, stat_attributes(stat)),
        meta={"message": "Stats updated successfully", "awards": awards},
    )
