"""Singles API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies.common import (
    get_catalog_notifier,
    get_current_artist_id,
    get_pagination_params,
)
from src.core.database import get_db_session
from src.schemas.base import JSONAPICollectionResponse, JSONAPIResponse, PaginationMeta, resource
from src.schemas.single import SingleCreateRequest, SingleUpdateRequest, single_attributes
from src.services.notifications import Notifier
from src.services.publication_service import PublicationService

router = APIRouter()


@router.get("", response_model=JSONAPICollectionResponse)
async def list_singles(
    # Pagination
    pagination=Depends(get_pagination_params),
    # Filters
    title: Optional[str] = Query(None, description="Filter by title (partial match)"),
    artist_id: Optional[int] = Query(None, description="Filter by owning artist"),
    genre_id: Optional[int] = Query(None, description="Filter by genre"),
    album_id: Optional[int] = Query(None, description="Filter by album"),
    # Dependencies
    session: AsyncSession = Depends(get_db_session),
):
    """List singles with filtering and pagination."""
    service = PublicationService(session)
    singles, total = await service.list_singles(
        offset=pagination["offset"],
        limit=pagination["limit"],
        title=title,
        artist_id=artist_id,
        genre_id=genre_id,
        album_id=album_id,
        sort_by=pagination["sort_by"],
        sort_order=pagination["sort_order"],
    )

    return JSONAPICollectionResponse(
        data=[resource("single", single.id, single_attributes(single)) for single in singles],
        meta={
            "pagination": PaginationMeta.build(
                pagination["page"], pagination["per_page"], total
            ).model_dump()
        },
    )


@router.post("", response_model=JSONAPIResponse, status_code=status.HTTP_201_CREATED)
async def create_single(
    request: SingleCreateRequest,
    session: AsyncSession = Depends(get_db_session),
    artist_id: int = Depends(get_current_artist_id),
    notifier: Notifier = Depends(get_catalog_notifier),
):
    """Publish a new single with metadata and copyright ledger."""
    service = PublicationService(session, notifier=notifier)
    single = await service.create_single(artist_id, request.data.attributes.to_service_data())

    return JSONAPIResponse(
        data=resource("single", single.id, single_attributes(single)),
        meta={"message": "Single created successfully"},
    )


@router.get("/{single_id}", response_model=JSONAPIResponse)
async def get_single(
    single_id: int,
    session: AsyncSession = Depends(get_db_session),
):
    """Get a single with metadata, copyrights, featurings and stats."""
    service = PublicationService(session)
    single = await service.get_single(single_id)

    return JSONAPIResponse(data=resource("single", single.id, single_attributes(single)))


@router.patch("/{single_id}", response_model=JSONAPIResponse)
async def update_single(
    single_id: int,
    request: SingleUpdateRequest,
    session: AsyncSession = Depends(get_db_session),
    artist_id: int = Depends(get_current_artist_id),
    notifier: Notifier = Depends(get_catalog_notifier),
):
    """Update a single owned by the calling artist."""
    service = PublicationService(session, notifier=notifier)
    single, warnings = await service.update_single(
        single_id, artist_id, request.data.attributes.to_service_data()
    )

    meta = {"message": "Single updated successfully"}
    if warnings:
        meta["warnings"] = warnings

    return JSONAPIResponse(
        data=resource("single", single.id, single_attributes(single)),
        meta=meta,
    )


@router.delete("/{single_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_single(
    single_id: int,
    session: AsyncSession = Depends(get_db_session),
    artist_id: int = Depends(get_current_artist_id),
):
    """Delete a single owned by the calling artist."""
    service = PublicationService(session)
    await service.delete_single(single_id, artist_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
