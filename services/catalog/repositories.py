"""
Data repository layer
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.database import (
    ActorModel,
    DirectorModel,
    GenreModel,
    MovieActorModel,
    MovieGenreModel,
    MovieModel,
    UserModel,
)
from catalog.models import (
    DEFAULT_POSTER,
    Genre,
    GenreRef,
    Movie,
    MovieDetail,
    MovieSummary,
    NamedRef,
    Person,
    PersonRef,
)

logger = logging.getLogger(__name__)


class ReferenceRepository:
    """Shared data access for directors, actors and genres"""

    model = None

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> List:
        """List every record sorted by name"""
        stmt = select(self.model).order_by(self.model.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get(self, record_id: str):
        """Get a record by ID"""
        return await self.session.get(self.model, record_id)

    async def get_for_update(self, record_id: str):
        """Get a record row-locked and re-read from the database"""
        records = await self.get_many([record_id], lock=True)
        return records[0] if records else None

    async def get_many(self, record_ids: Sequence[str], lock: bool = False) -> List:
        """Get records by IDs, in the order the IDs were given

        With lock=True the rows are selected FOR UPDATE and any copies already
        in the session are overwritten, so back-reference lists are modified
        from their committed state.
        """
        if not record_ids:
            return []
        stmt = select(self.model).where(self.model.id.in_(record_ids))
        if lock:
            # Consistent lock order across concurrent writers
            stmt = (
                stmt.order_by(self.model.id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
        result = await self.session.execute(stmt)
        found = {record.id: record for record in result.scalars().all()}
        return [found[record_id] for record_id in record_ids if record_id in found]

    async def create(self, **fields):
        """Create a new record"""
        record = self.model(movie_ids=[], **fields)
        self.session.add(record)
        await self.session.flush()
        return record

    async def delete(self, record) -> None:
        """Delete a record"""
        await self.session.delete(record)
        await self.session.flush()

    async def is_referenced(self, record_id: str) -> bool:
        """Whether any movie points at this record"""
        raise NotImplementedError


class DirectorRepository(ReferenceRepository):
    model = DirectorModel

    async def is_referenced(self, record_id: str) -> bool:
        stmt = select(MovieModel.id).where(MovieModel.director_id == record_id).limit(1)
        result = await self.session.execute(stmt)
        return result.first() is not None


class ActorRepository(ReferenceRepository):
    model = ActorModel

    async def is_referenced(self, record_id: str) -> bool:
        stmt = select(MovieActorModel.id).where(MovieActorModel.actor_id == record_id).limit(1)
        result = await self.session.execute(stmt)
        return result.first() is not None


class GenreRepository(ReferenceRepository):
    """Genre data repository"""

    model = GenreModel

    async def get_by_name(self, name: str) -> Optional[GenreModel]:
        stmt = select(GenreModel).where(GenreModel.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def is_referenced(self, record_id: str) -> bool:
        stmt = select(MovieGenreModel.id).where(MovieGenreModel.genre_id == record_id).limit(1)
        result = await self.session.execute(stmt)
        return result.first() is not None


class MovieRepository:
    """Movie data repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(MovieModel.id)))
        return result.scalar() or 0

    async def list_page(self, limit: int, offset: int) -> List[MovieModel]:
        """List movies newest first"""
        stmt = (
            select(MovieModel)
            .order_by(MovieModel.created_at.desc(), MovieModel.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get(self, movie_id: str) -> Optional[MovieModel]:
        """Get movie by ID"""
        return await self.session.get(MovieModel, movie_id)

    async def list_by_director(self, director_id: str) -> List[MovieModel]:
        stmt = (
            select(MovieModel)
            .where(MovieModel.director_id == director_id)
            .order_by(MovieModel.release_year.desc())
        )
        return await self._scalars(stmt)

    async def list_by_actor(self, actor_id: str) -> List[MovieModel]:
        stmt = (
            select(MovieModel)
            .join(MovieActorModel, MovieActorModel.movie_id == MovieModel.id)
            .where(MovieActorModel.actor_id == actor_id)
            .order_by(MovieModel.release_year.desc())
        )
        return await self._scalars(stmt)

    async def list_by_genre(self, genre_id: str) -> List[MovieModel]:
        stmt = (
            select(MovieModel)
            .join(MovieGenreModel, MovieGenreModel.movie_id == MovieModel.id)
            .where(MovieGenreModel.genre_id == genre_id)
            .order_by(MovieModel.release_year.desc())
        )
        return await self._scalars(stmt)

    async def create(
        self,
        *,
        title: str,
        release_year: int,
        plot: str,
        runtime: int,
        director_id: str,
        actor_ids: Iterable[str] = (),
        genre_ids: Iterable[str] = (),
        poster: Optional[str] = None,
    ) -> MovieModel:
        """Create a new movie"""
        movie = MovieModel(
            title=title,
            release_year=release_year,
            plot=plot,
            runtime=runtime,
            director_id=director_id,
            poster=poster or DEFAULT_POSTER,
        )
        self.set_actors(movie, actor_ids)
        self.set_genres(movie, genre_ids)
        self.session.add(movie)
        await self.session.flush()
        logger.debug(f"Created movie {movie.id} ({title})")
        return movie

    def set_actors(self, movie: MovieModel, actor_ids: Iterable[str]) -> None:
        movie.actor_links = [
            MovieActorModel(actor_id=actor_id, position=position)
            for position, actor_id in enumerate(actor_ids)
        ]

    def set_genres(self, movie: MovieModel, genre_ids: Iterable[str]) -> None:
        movie.genre_links = [
            MovieGenreModel(genre_id=genre_id, position=position)
            for position, genre_id in enumerate(genre_ids)
        ]

    async def delete(self, movie: MovieModel) -> None:
        """Delete a movie and its actor/genre links"""
        await self.session.delete(movie)
        await self.session.flush()

    async def _scalars(self, stmt) -> List[MovieModel]:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class UserRepository:
    """User data repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: str) -> Optional[UserModel]:
        return await self.session.get(UserModel, user_id)

    async def get_by_login(self, email: Optional[str] = None, username: Optional[str] = None) -> Optional[UserModel]:
        """Find a user by email or username"""
        conditions = []
        if email:
            conditions.append(UserModel.email == email.lower())
        if username:
            conditions.append(UserModel.username == username)
        if not conditions:
            return None
        stmt = select(UserModel).where(or_(*conditions)).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, *, username: str, email: str, password_hash: str, role: str) -> UserModel:
        user = UserModel(
            username=username,
            email=email.lower(),
            password_hash=password_hash,
            role=role,
        )
        self.session.add(user)
        await self.session.flush()
        return user


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to timestamps read back from stores that drop the offset"""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def add_movie_reference(records: Iterable, movie_id: str) -> None:
    """Push a movie id onto each record's back-reference list"""
    for record in records:
        if movie_id not in record.movie_ids:
            record.movie_ids.append(movie_id)


def remove_movie_reference(records: Iterable, movie_id: str) -> None:
    """Pull a movie id from each record's back-reference list"""
    for record in records:
        while movie_id in record.movie_ids:
            record.movie_ids.remove(movie_id)


def model_to_person(record) -> Person:
    """Convert a director or actor row to a Person object"""
    return Person(
        id=record.id,
        name=record.name,
        birth_year=record.birth_year,
        bio=record.bio,
        movies=list(record.movie_ids or []),
        created_at=as_utc(record.created_at),
        updated_at=as_utc(record.updated_at),
    )


def model_to_genre(record: GenreModel) -> Genre:
    """Convert a genre row to a Genre object"""
    return Genre(
        id=record.id,
        name=record.name,
        description=record.description,
        movies=list(record.movie_ids or []),
        created_at=as_utc(record.created_at),
        updated_at=as_utc(record.updated_at),
    )


def model_to_movie(movie: MovieModel) -> Movie:
    """Convert a movie row to a Movie object with plain reference ids"""
    return Movie(
        id=movie.id,
        title=movie.title,
        release_year=movie.release_year,
        plot=movie.plot,
        runtime=movie.runtime,
        director=movie.director_id,
        actors=movie.actor_ids,
        genres=movie.genre_ids,
        poster=movie.poster,
        created_at=as_utc(movie.created_at),
        updated_at=as_utc(movie.updated_at),
    )


def model_to_summary(movie: MovieModel) -> MovieSummary:
    """Convert a movie row to a MovieSummary with names resolved"""
    director = movie.director
    return MovieSummary(
        id=movie.id,
        title=movie.title,
        release_year=movie.release_year,
        plot=movie.plot,
        runtime=movie.runtime,
        director=NamedRef(id=director.id, name=director.name) if director else None,
        actors=[NamedRef(id=link.actor.id, name=link.actor.name) for link in movie.actor_links if link.actor],
        genres=[NamedRef(id=link.genre.id, name=link.genre.name) for link in movie.genre_links if link.genre],
        poster=movie.poster,
        created_at=as_utc(movie.created_at),
        updated_at=as_utc(movie.updated_at),
    )


def _person_ref(record) -> PersonRef:
    return PersonRef(id=record.id, name=record.name, birth_year=record.birth_year, bio=record.bio)


def model_to_detail(movie: MovieModel) -> MovieDetail:
    """Convert a movie row to a MovieDetail with extended references"""
    return MovieDetail(
        id=movie.id,
        title=movie.title,
        release_year=movie.release_year,
        plot=movie.plot,
        runtime=movie.runtime,
        director=_person_ref(movie.director) if movie.director else None,
        actors=[_person_ref(link.actor) for link in movie.actor_links if link.actor],
        genres=[
            GenreRef(id=link.genre.id, name=link.genre.name, description=link.genre.description)
            for link in movie.genre_links
            if link.genre
        ],
        poster=movie.poster,
        created_at=as_utc(movie.created_at),
        updated_at=as_utc(movie.updated_at),
    )
