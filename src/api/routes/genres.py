"""Genre reference data endpoints."""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies.common import get_current_artist_id
from src.core.database import get_db_session
from src.models.genre import Genre
from src.schemas.base import JSONAPICollectionResponse, JSONAPIResponse, resource
from src.schemas.genre import GenreCreateRequest
from src.services.exceptions import ConflictError, GenreMissing
from src.services.repositories import CatalogRepository

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=JSONAPICollectionResponse)
async def list_genres(session: AsyncSession = Depends(get_db_session)):
    """List all genres."""
    result = await session.execute(select(Genre).order_by(Genre.id))
    genres = result.scalars().all()

    return JSONAPICollectionResponse(
        data=[resource("genre", genre.id, genre.to_dict()) for genre in genres],
        meta={"total": len(genres)},
    )


@router.post("", response_model=JSONAPIResponse, status_code=status.HTTP_201_CREATED)
async def create_genre(
    request: GenreCreateRequest,
    session: AsyncSession = Depends(get_db_session),
    artist_id: int = Depends(get_current_artist_id),
):
    """Create a genre; names are unique regardless of case."""
    attributes = request.data.attributes
    repository = CatalogRepository(session)

    if await repository.get_genre_by_name(attributes.name):
        raise ConflictError(f"Genre '{attributes.name}' already exists", code="GENRE_EXISTS", field="name")

    genre = Genre(name=attributes.name, description=attributes.description)
    session.add(genre)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError(f"Genre '{attributes.name}' already exists", code="GENRE_EXISTS", field="name")

    logger.info(f"Created genre {genre.id}: {genre.name}")
    return JSONAPIResponse(data=resource("genre", genre.id, genre.to_dict()))


@router.delete("/{genre_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_genre(
    genre_id: int,
    session: AsyncSession = Depends(get_db_session),
    artist_id: int = Depends(get_current_artist_id),
):
    """Delete a genre no single is classified under."""
    repository = CatalogRepository(session)
    genre = await repository.get_genre(genre_id)
    if not genre:
        raise GenreMissing(f"Genre {genre_id} not found")

    in_use = await repository.count_singles_for_genre(genre_id)
    if in_use:
        raise ConflictError(
            f"Genre {genre_id} is used by {in_use} single(s)",
            code="GENRE_IN_USE",
        )

    await session.delete(genre)
    await session.commit()

    logger.info(f"Deleted genre {genre_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
