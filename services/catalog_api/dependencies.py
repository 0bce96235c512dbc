"""
Dependency injection for database sessions and services
"""
from typing import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.cache import CacheService
from catalog_api.services import ActorService, DirectorService, GenreService, MovieService, UserService


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """One session per request, closed (and rolled back if uncommitted) afterwards"""
    async with request.app.state.database.session() as session:
        yield session


def get_cache(request: Request) -> CacheService:
    return request.app.state.cache


def get_movie_service(
    session: AsyncSession = Depends(get_session),
    cache: CacheService = Depends(get_cache),
) -> MovieService:
    return MovieService(session, cache)


def get_director_service(
    session: AsyncSession = Depends(get_session),
    cache: CacheService = Depends(get_cache),
) -> DirectorService:
    return DirectorService(session, cache)


def get_actor_service(
    session: AsyncSession = Depends(get_session),
    cache: CacheService = Depends(get_cache),
) -> ActorService:
    return ActorService(session, cache)


def get_genre_service(
    session: AsyncSession = Depends(get_session),
    cache: CacheService = Depends(get_cache),
) -> GenreService:
    return GenreService(session, cache)


def get_user_service(session: AsyncSession = Depends(get_session)) -> UserService:
    return UserService(session)
