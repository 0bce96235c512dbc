"""
Business logic service layer
"""
import logging
import math
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog import config
from catalog.database import utcnow
from catalog.models import (
    AuthResponse,
    Genre,
    GenreCreate,
    GenreUpdate,
    LoginRequest,
    Message,
    Movie,
    MovieCreate,
    MovieDetail,
    MovieListResponse,
    MovieSummary,
    MovieUpdate,
    Person,
    PersonCreate,
    PersonUpdate,
    RegisterRequest,
    Role,
    UserProfile,
)
from catalog.repositories import (
    ActorRepository,
    DirectorRepository,
    GenreRepository,
    MovieRepository,
    UserRepository,
    add_movie_reference,
    model_to_detail,
    model_to_genre,
    model_to_movie,
    model_to_person,
    model_to_summary,
    remove_movie_reference,
)
from catalog_api.cache import CacheService
from catalog_api.errors import BadRequest, InternalError, NotFound, Unauthenticated
from catalog_api.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

MOVIE_CACHE_PATTERN = "movies:*"


class CatalogService:
    """Common plumbing for services that write catalog data"""

    def __init__(self, session: AsyncSession, cache: CacheService):
        self.session = session
        self.cache = cache
        self.movies = MovieRepository(session)
        self.directors = DirectorRepository(session)
        self.actors = ActorRepository(session)
        self.genres = GenreRepository(session)

    async def _commit(self):
        """Commit the unit of work and drop cached movie views"""
        await self.session.commit()
        # Movie views embed director/actor/genre names, so any write can stale them
        await self.cache.invalidate_pattern(MOVIE_CACHE_PATTERN)


class ReferenceService(CatalogService):
    """Operations shared by directors, actors and genres"""

    entity = None

    @property
    def repository(self):
        raise NotImplementedError

    def to_schema(self, record):
        raise NotImplementedError

    async def _movie_records(self, record_id: str):
        raise NotImplementedError

    async def _load(self, record_id: str):
        record = await self.repository.get(record_id)
        if record is None:
            raise NotFound(f"{self.entity} not found")
        return record

    async def list(self) -> List:
        """All records sorted by name"""
        return [self.to_schema(record) for record in await self.repository.list_all()]

    async def get(self, record_id: str):
        return self.to_schema(await self._load(record_id))

    async def movies_for(self, record_id: str) -> List[MovieSummary]:
        """Movies referencing this record, newest release first"""
        await self._load(record_id)
        return [model_to_summary(movie) for movie in await self._movie_records(record_id)]

    async def delete(self, record_id: str) -> Message:
        """Delete a record unless a movie still references it"""
        if await self.repository.is_referenced(record_id):
            raise BadRequest(f"Cannot delete {self.entity.lower()} that is associated with movies")

        record = await self._load(record_id)
        await self.repository.delete(record)
        await self._commit()

        logger.info(f"Deleted {self.entity.lower()}: {record.name} ({record_id})")
        return Message(message=f"{self.entity} removed")


class PersonService(ReferenceService):
    """Director and actor business logic"""

    def to_schema(self, record) -> Person:
        return model_to_person(record)

    async def create(self, payload: PersonCreate) -> Person:
        record = await self.repository.create(
            name=payload.name,
            birth_year=payload.birth_year,
            bio=payload.bio,
        )
        await self._commit()

        logger.info(f"Created {self.entity.lower()}: {record.name} ({record.id})")
        return self.to_schema(record)

    async def update(self, record_id: str, payload: PersonUpdate) -> Person:
        """Overwrite the fields present in the payload"""
        record = await self._load(record_id)

        for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(record, field, value)
        await self._commit()

        logger.info(f"Updated {self.entity.lower()}: {record.name} ({record.id})")
        return self.to_schema(record)


class DirectorService(PersonService):
    entity = "Director"

    @property
    def repository(self):
        return self.directors

    async def _movie_records(self, record_id: str):
        return await self.movies.list_by_director(record_id)


class ActorService(PersonService):
    entity = "Actor"

    @property
    def repository(self):
        return self.actors

    async def _movie_records(self, record_id: str):
        return await self.movies.list_by_actor(record_id)


class GenreService(ReferenceService):
    """Genre business logic, names are unique"""

    entity = "Genre"

    @property
    def repository(self):
        return self.genres

    def to_schema(self, record) -> Genre:
        return model_to_genre(record)

    async def _movie_records(self, record_id: str):
        return await self.movies.list_by_genre(record_id)

    async def create(self, payload: GenreCreate) -> Genre:
        if await self.genres.get_by_name(payload.name):
            raise BadRequest("Genre already exists")

        try:
            record = await self.genres.create(name=payload.name, description=payload.description)
            await self._commit()
        except IntegrityError as e:
            # Lost a race against a concurrent create with the same name
            await self.session.rollback()
            raise BadRequest("Genre already exists") from e

        logger.info(f"Created genre: {record.name} ({record.id})")
        return self.to_schema(record)

    async def update(self, record_id: str, payload: GenreUpdate) -> Genre:
        record = await self._load(record_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)

        new_name = changes.get("name")
        if new_name and new_name != record.name:
            holder = await self.genres.get_by_name(new_name)
            if holder is not None and holder.id != record.id:
                raise BadRequest("Genre with that name already exists")

        for field, value in changes.items():
            setattr(record, field, value)
        try:
            await self._commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise BadRequest("Genre with that name already exists") from e

        logger.info(f"Updated genre: {record.name} ({record.id})")
        return self.to_schema(record)


class MovieService(CatalogService):
    """Movie business logic, keeps back-reference lists in step"""

    def __init__(self, session: AsyncSession, cache: CacheService, page_size: Optional[int] = None):
        super().__init__(session, cache)
        self.page_size = page_size or config.app.page_size

    async def list(self, page: int = 1) -> MovieListResponse:
        """One page of movies, newest first, with caching"""
        cache_key = self.cache.cache_key("movies", "page", page, self.page_size)
        cached = await self.cache.get(cache_key)
        if cached:
            logger.debug(f"Cache hit for movie page {page}")
            return MovieListResponse.model_validate(cached)

        total = await self.movies.count()
        records = await self.movies.list_page(self.page_size, self.page_size * (page - 1))

        response = MovieListResponse(
            movies=[model_to_summary(movie) for movie in records],
            page=page,
            pages=math.ceil(total / self.page_size),
            total=total,
        )
        await self.cache.set(cache_key, response.model_dump(mode="json"), ttl=300)  # 5 minutes
        return response

    async def get(self, movie_id: str) -> MovieDetail:
        """Get movie by ID with caching"""
        cache_key = self.cache.cache_key("movies", "detail", movie_id)
        cached = await self.cache.get(cache_key)
        if cached:
            logger.debug(f"Cache hit for movie {movie_id}")
            return MovieDetail.model_validate(cached)

        movie = await self._load(movie_id)
        detail = model_to_detail(movie)
        await self.cache.set(cache_key, detail.model_dump(mode="json"))
        return detail

    async def create(self, payload: MovieCreate) -> Movie:
        """Create a movie and register it on every referenced record"""
        director = await self._require_director(payload.director)
        actors = await self._require_all(self.actors, payload.actors, "Actor")
        genres = await self._require_all(self.genres, payload.genres, "Genre")

        movie = await self.movies.create(
            title=payload.title,
            release_year=payload.release_year,
            plot=payload.plot,
            runtime=payload.runtime,
            director_id=director.id,
            actor_ids=payload.actors,
            genre_ids=payload.genres,
            poster=payload.poster,
        )
        add_movie_reference([director], movie.id)
        add_movie_reference(actors, movie.id)
        add_movie_reference(genres, movie.id)
        await self._commit()

        logger.info(f"Created movie: {movie.title} ({movie.id})")
        return model_to_movie(movie)

    async def update(self, movie_id: str, payload: MovieUpdate) -> Movie:
        """Overwrite the fields present in the payload, moving back-references as needed"""
        movie = await self._load(movie_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)

        director_id = changes.pop("director", None)
        if director_id and director_id != movie.director_id:
            new_director = await self._require_director(director_id)
            old_director = await self.directors.get_for_update(movie.director_id)
            if old_director is not None:
                remove_movie_reference([old_director], movie.id)
            add_movie_reference([new_director], movie.id)
            movie.director = new_director

        actor_ids = changes.pop("actors", None)
        if actor_ids is not None:
            await self._relink(self.actors, "Actor", movie.id, movie.actor_ids, actor_ids)
            self.movies.set_actors(movie, actor_ids)

        genre_ids = changes.pop("genres", None)
        if genre_ids is not None:
            await self._relink(self.genres, "Genre", movie.id, movie.genre_ids, genre_ids)
            self.movies.set_genres(movie, genre_ids)

        for field, value in changes.items():
            setattr(movie, field, value)
        movie.updated_at = utcnow()
        await self._commit()

        logger.info(f"Updated movie: {movie.title} ({movie.id})")
        return model_to_movie(movie)

    async def delete(self, movie_id: str) -> Message:
        """Pull the movie from every back-reference list, then delete it"""
        movie = await self._load(movie_id)

        try:
            director = await self.directors.get_for_update(movie.director_id)
            if director is not None:
                remove_movie_reference([director], movie.id)
            remove_movie_reference(await self.actors.get_many(movie.actor_ids, lock=True), movie.id)
            remove_movie_reference(await self.genres.get_many(movie.genre_ids, lock=True), movie.id)

            await self.movies.delete(movie)
            await self._commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error deleting movie {movie_id}: {str(e)}")
            raise InternalError(f"Failed to delete movie: {str(e)}") from e

        logger.info(f"Deleted movie: {movie_id}")
        return Message(message="Movie removed")

    async def _load(self, movie_id: str):
        movie = await self.movies.get(movie_id)
        if movie is None:
            raise NotFound("Movie not found")
        return movie

    async def _require_director(self, director_id: str):
        director = await self.directors.get_for_update(director_id)
        if director is None:
            raise BadRequest("Director not found")
        return director

    async def _require_all(self, repository, record_ids: List[str], entity: str) -> List:
        records = await repository.get_many(record_ids, lock=True)
        if len(records) != len(record_ids):
            raise BadRequest(f"{entity} not found")
        return records

    async def _relink(self, repository, entity: str, movie_id: str, old_ids: List[str], new_ids: List[str]):
        """Move back-references from records dropped from a list to records added to it"""
        added = [record_id for record_id in new_ids if record_id not in old_ids]
        removed = [record_id for record_id in old_ids if record_id not in new_ids]

        add_movie_reference(await self._require_all(repository, added, entity), movie_id)
        remove_movie_reference(await repository.get_many(removed, lock=True), movie_id)


class UserService:
    """Registration, login and profile lookups"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)

    async def create_user(self, username: str, email: str, password: str, role: Role = Role.USER) -> UserProfile:
        """Create a user with a hashed password"""
        if await self.users.get_by_login(email=email, username=username):
            raise BadRequest("User already exists")

        try:
            user = await self.users.create(
                username=username,
                email=email,
                password_hash=hash_password(password),
                role=Role(role).value,
            )
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise BadRequest("User already exists") from e

        logger.info(f"Created user: {user.username} ({user.role})")
        return self._profile(user)

    async def register(self, payload: RegisterRequest) -> AuthResponse:
        profile = await self.create_user(payload.username, payload.email, payload.password)
        return self._with_token(profile)

    async def login(self, payload: LoginRequest) -> AuthResponse:
        user = await self.users.get_by_login(email=payload.email, username=payload.username)
        if user is None or not verify_password(payload.password, user.password_hash):
            raise Unauthenticated("Invalid email or password")

        logger.info(f"User logged in: {user.username}")
        return self._with_token(self._profile(user))

    def _profile(self, user) -> UserProfile:
        return UserProfile(id=user.id, username=user.username, email=user.email, role=user.role)

    def _with_token(self, profile: UserProfile) -> AuthResponse:
        return AuthResponse(
            **profile.model_dump(),
            token=create_access_token(profile.id, profile.role),
        )
