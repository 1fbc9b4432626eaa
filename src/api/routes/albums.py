"""Albums API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies.common import get_current_artist_id, get_pagination_params
from src.core.database import get_db_session
from src.schemas.album import AlbumCreateRequest, AlbumUpdateRequest, album_attributes
from src.schemas.base import JSONAPICollectionResponse, JSONAPIResponse, PaginationMeta, resource
from src.services.album_service import AlbumService

router = APIRouter()


@router.get("", response_model=JSONAPICollectionResponse)
async def list_albums(
    pagination=Depends(get_pagination_params),
    title: Optional[str] = Query(None, description="Filter by title (partial match)"),
    artist_id: Optional[int] = Query(None, description="Filter by owning artist"),
    genre_id: Optional[int] = Query(None, description="Albums containing a single of this genre"),
    session: AsyncSession = Depends(get_db_session),
):
    """List albums with filtering and pagination."""
    service = AlbumService(session)
    albums, total = await service.list_albums(
        offset=pagination["offset"],
        limit=pagination["limit"],
        title=title,
        artist_id=artist_id,
        genre_id=genre_id,
        sort_by=pagination["sort_by"],
        sort_order=pagination["sort_order"],
    )

    return JSONAPICollectionResponse(
        data=[resource("album", album.id, album_attributes(album)) for album in albums],
        meta={
            "pagination": PaginationMeta.build(
                pagination["page"], pagination["per_page"], total
            ).model_dump()
        },
    )


@router.post("", response_model=JSONAPIResponse, status_code=status.HTTP_201_CREATED)
async def create_album(
    request: AlbumCreateRequest,
    session: AsyncSession = Depends(get_db_session),
    artist_id: int = Depends(get_current_artist_id),
):
    """Create an album for the calling artist."""
    service = AlbumService(session)
    album = await service.create_album(artist_id, request.data.attributes.to_service_data())

    return JSONAPIResponse(
        data=resource("album", album.id, album_attributes(album)),
        meta={"message": "Album created successfully"},
    )


@router.get("/{album_id}", response_model=JSONAPIResponse)
async def get_album(
    album_id: int,
    session: AsyncSession = Depends(get_db_session),
):
    """Get an album with its singles and genre names."""
    service = AlbumService(session)
    album, genres = await service.get_album(album_id)

    return JSONAPIResponse(data=resource("album", album.id, album_attributes(album, genres)))


@router.patch("/{album_id}", response_model=JSONAPIResponse)
async def update_album(
    album_id: int,
    request: AlbumUpdateRequest,
    session: AsyncSession = Depends(get_db_session),
    artist_id: int = Depends(get_current_artist_id),
):
    """Update an album owned by the calling artist."""
    service = AlbumService(session)
    album, warnings = await service.update_album(
        album_id, artist_id, request.data.attributes.to_service_data()
    )

    meta = {"message": "Album updated successfully"}
    if warnings:
        meta["warnings"] = warnings

    return JSONAPIResponse(
        data=resource("album", album.id, album_attributes(album)),
        meta=meta,
    )


@router.delete("/{album_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_album(
    album_id: int,
    session: AsyncSession = Depends(get_db_session),
    artist_id: int = Depends(get_current_artist_id),
):
    """Delete an album; its singles are kept without a parent album."""
    service = AlbumService(session)
    await service.delete_album(album_id, artist_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
