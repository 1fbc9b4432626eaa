"""Artist profile endpoints."""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies.common import get_current_artist_id, get_pagination_params
from src.core.database import get_db_session
from src.models.artist import Artist
from src.schemas.artist import ArtistCreateRequest, ArtistUpdateRequest
from src.schemas.base import JSONAPICollectionResponse, JSONAPIResponse, PaginationMeta, resource
from src.services.artist_service import ArtistService
from src.services.repositories import CatalogRepository
from src.services.stats_service import StatsService

router = APIRouter()


async def _genre_names(repository: CatalogRepository, artists: List[Artist]) -> Dict[int, str]:
    genre_ids = sorted({genre_id for artist in artists for genre_id in artist.genres or []})
    return {genre.id: genre.name for genre in await repository.get_genres_by_ids(genre_ids)}


async def _artist_resources(repository: CatalogRepository, artists: List[Artist]) -> List[dict]:
    names = await _genre_names(repository, artists)
    resources = []
    for artist in artists:
        attributes = artist.to_dict()
        attributes["genre_names"] = [names[genre_id] for genre_id in artist.genres or [] if genre_id in names]
        resources.append(resource("artist", artist.id, attributes))
    return resources


@router.get("", response_model=JSONAPICollectionResponse)
async def list_artists(
    # Pagination
    pagination=Depends(get_pagination_params),
    # Filters
    name: Optional[str] = Query(None, max_length=255, description="Filter by name (partial match)"),
    genre_id: Optional[int] = Query(None, description="Filter by one of the artist's top genres"),
    country: Optional[str] = Query(None, min_length=2, max_length=255, description="Filter by country"),
    city: Optional[str] = Query(None, max_length=255, description="Filter by city"),
    # Dependencies
    session: AsyncSession = Depends(get_db_session),
):
    """List artists. Sort by popularity or name; newest first otherwise."""
    service = ArtistService(session)
    artists, total = await service.list_artists(
        offset=pagination["offset"],
        limit=pagination["limit"],
        name=name,
        genre_id=genre_id,
        country=country,
        city=city,
        sort_by=pagination["sort_by"],
        sort_order=pagination["sort_order"],
    )

    return JSONAPICollectionResponse(
        data=await _artist_resources(service.repository, artists),
        meta={
            "pagination": PaginationMeta.build(
                pagination["page"], pagination["per_page"], total
            ).model_dump()
        },
    )


@router.post("", response_model=JSONAPIResponse, status_code=status.HTTP_201_CREATED)
async def create_artist(
    request: ArtistCreateRequest,
    session: AsyncSession = Depends(get_db_session),
):
    """Create an artist profile. Genres and popularity start empty."""
    service = ArtistService(session)
    artist = await service.create_artist(request.data.attributes.model_dump())

    [data] = await _artist_resources(service.repository, [artist])
    return JSONAPIResponse(data=data)


@router.patch("/me", response_model=JSONAPIResponse)
async def update_own_profile(
    request: ArtistUpdateRequest,
    session: AsyncSession = Depends(get_db_session),
    artist_id: int = Depends(get_current_artist_id),
):
    """Update the calling artist's biography, social links and location."""
    service = ArtistService(session)
    artist, warnings = await service.update_profile(artist_id, request.data.attributes.to_service_data())

    meta = {"message": "Profile updated successfully"}
    if warnings:
        meta["warnings"] = warnings

    [data] = await _artist_resources(service.repository, [artist])
    return JSONAPIResponse(data=data, meta=meta)


@router.get("/compare", response_model=JSONAPICollectionResponse)
async def compare_artists(
    ids: str = Query(
        ...,
        pattern=r"^\d+(,\d+)*$",
        description="Comma-separated artist ids, e.g. 1,2,3",
    ),
    session: AsyncSession = Depends(get_db_session),
):
    """Compare artists side by side: name, genres and popularity."""
    service = ArtistService(session)
    artists = await service.compare_artists([int(artist_id) for artist_id in ids.split(",")])

    names = await _genre_names(service.repository, artists)
    return JSONAPICollectionResponse(
        data=[
            resource("artist", artist.id, {
                "name": artist.name,
                "genres": list(artist.genres or []),
                "genre_names": [names[genre_id] for genre_id in artist.genres or [] if genre_id in names],
                "popularity": artist.popularity,
            })
            for artist in artists
        ],
        meta={"total": len(artists)},
    )


@router.get("/{artist_id}", response_model=JSONAPIResponse)
async def get_artist(
    artist_id: int,
    session: AsyncSession = Depends(get_db_session),
):
    """Get an artist profile with derived genres and popularity."""
    service = ArtistService(session)
    artist = await service.get_artist(artist_id)

    [data] = await _artist_resources(service.repository, [artist])
    return JSONAPIResponse(data=data)


@router.get("/{artist_id}/stats", response_model=JSONAPIResponse)
async def get_artist_stats(
    artist_id: int,
    session: AsyncSession = Depends(get_db_session),
):
    """Total listens and revenue across the artist's singles."""
    service = StatsService(session)
    totals = await service.get_artist_totals(artist_id)

    return JSONAPIResponse(data=resource("artist_stats", artist_id, totals))
