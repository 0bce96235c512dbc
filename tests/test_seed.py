import asyncio

from catalog.config import RedisConfig
from catalog.database import Database
from catalog.repositories import ActorRepository, DirectorRepository, GenreRepository, MovieRepository
from catalog_api.cache import CacheService
from catalog_seed.main import Seeder


async def _seed_and_inspect(database_config):
    seeder = Seeder(database=Database(database_config), cache=CacheService(RedisConfig(host=None)))
    await seeder.start()
    try:
        # seeding twice wipes the first run
        await seeder.seed()
        counts = await seeder.seed()

        async with seeder.database.session() as session:
            movies = {movie.title: movie for movie in await MovieRepository(session).list_page(10, 0)}
            directors = {d.name: d for d in await DirectorRepository(session).list_all()}
            actors = {a.name: a for a in await ActorRepository(session).list_all()}
            genres = {g.name: g for g in await GenreRepository(session).list_all()}
            return counts, movies, directors, actors, genres
    finally:
        await seeder.stop()


def test_seed_builds_consistent_catalog(database_config):
    counts, movies, directors, actors, genres = asyncio.run(_seed_and_inspect(database_config))

    assert counts == {"users": 2, "directors": 3, "actors": 3, "genres": 3, "movies": 3}
    assert len(movies) == 3

    inception = movies["Inception"]
    assert directors["Christopher Nolan"].movie_ids == [inception.id]
    assert actors["Leonardo DiCaprio"].movie_ids == [inception.id]
    assert sorted(genres["Drama"].movie_ids) == sorted(movie.id for movie in movies.values())
    assert genres["Comedy"].movie_ids == [movies["Little Women"].id]
