"""Common FastAPI dependencies."""

from typing import Optional

from fastapi import Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db_session
from src.core.settings import get_settings
from src.services.notifications import Notifier, get_notifier
from src.services.repositories import CatalogRepository


async def get_current_artist_id(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> int:
    """Get the calling artist's id from request state, checking the artist exists."""
    # For development with DISABLE_AUTH=true, act as the configured artist
    settings = get_settings()
    if settings.disable_auth:
        artist_id = settings.dev_artist_id
    else:
        artist_id = getattr(request.state, "artist_id", None)

    if artist_id is None:
        raise HTTPException(
            status_code=401,
            detail={
                "message": "Artist not authenticated",
                "code": "AUTHORIZATION_REQUIRED"
            }
        )

    if not await CatalogRepository(session).get_artist(artist_id):
        raise HTTPException(
            status_code=401,
            detail={
                "message": f"Token subject {artist_id} is not a registered artist",
                "code": "UNKNOWN_ARTIST"
            },
            headers={"WWW-Authenticate": "Bearer"},
        )
    return artist_id


def get_pagination_params(
    page: int = Query(1, ge=1, le=10000, description="Page number"),
    per_page: int = Query(25, ge=1, le=100, description="Items per page"),
    sort_by: Optional[str] = Query(None, description="Sort field; allowed values depend on the resource"),
    sort_order: str = Query("asc", pattern="^(asc|desc)$", description="Sort order")
) -> dict:
    """Get pagination parameters from query string."""
    return {
        "page": page,
        "per_page": per_page,
        "offset": (page - 1) * per_page,
        "limit": per_page,
        "sort_by": sort_by,
        "sort_order": sort_order
    }


def get_catalog_notifier() -> Notifier:
    """Notifier used by publication and stats workflows."""
    return get_notifier()

