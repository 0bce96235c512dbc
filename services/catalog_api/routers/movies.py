from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from catalog.models import Message, Movie, MovieCreate, MovieDetail, MovieListResponse, MovieUpdate
from catalog_api.auth import get_current_user, require_admin
from catalog_api.dependencies import get_movie_service
from catalog_api.services import MovieService

router = APIRouter(prefix="/api/movies", tags=["movies"])


def page_number(raw: Optional[str]) -> int:
    """Missing, non-numeric or non-positive pages mean the first page"""
    try:
        page = int(raw)
    except (TypeError, ValueError):
        return 1
    return page if page >= 1 else 1


@router.get("", response_model=MovieListResponse, dependencies=[Depends(get_current_user)])
async def list_movies(
    page: Optional[str] = Query(None, description="Page number, 10 movies per page"),
    movies: MovieService = Depends(get_movie_service),
):
    """List movies newest first, with director, actors and genres resolved to names"""
    return await movies.list(page_number(page))


@router.get("/{movie_id}", response_model=MovieDetail, dependencies=[Depends(get_current_user)])
async def get_movie(movie_id: str, movies: MovieService = Depends(get_movie_service)):
    """Get a specific movie by ID"""
    return await movies.get(movie_id)


@router.post(
    "",
    response_model=Movie,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_movie(payload: MovieCreate, movies: MovieService = Depends(get_movie_service)):
    return await movies.create(payload)


@router.put("/{movie_id}", response_model=Movie, dependencies=[Depends(require_admin)])
async def update_movie(movie_id: str, payload: MovieUpdate, movies: MovieService = Depends(get_movie_service)):
    return await movies.update(movie_id, payload)


@router.delete("/{movie_id}", response_model=Message, dependencies=[Depends(require_admin)])
async def delete_movie(movie_id: str, movies: MovieService = Depends(get_movie_service)):
    return await movies.delete(movie_id)
