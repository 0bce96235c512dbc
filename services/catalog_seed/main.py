"""
Seeder - wipes the catalog and loads sample users, people, genres and movies
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from catalog import config
from catalog.database import Database
from catalog.models import GenreCreate, MovieCreate, PersonCreate
from catalog_api.cache import CacheService
from catalog_api.services import ActorService, DirectorService, GenreService, MovieService, UserService
from catalog_seed import data

logger = logging.getLogger(__name__)


class Seeder:
    """Loads a sample catalog through the same services the API uses"""

    def __init__(self, database: Optional[Database] = None, cache: Optional[CacheService] = None):
        self.config = config
        self.database = database or Database(self.config.database)
        self.cache = cache or CacheService(self.config.redis)
        self.counts: Dict[str, int] = {}

    async def start(self):
        """Open the database and cache connections"""
        logger.info("🚀 Starting Movie Catalog Seeder...")
        await self.database.connect()
        await self.cache.connect()

    async def stop(self):
        """Close connections"""
        await self.database.disconnect()
        await self.cache.disconnect()
        logger.info(f"✅ Seeder stopped. Seeded: {self.counts}")

    async def seed(
        self,
        users: List[Dict[str, Any]] = data.USERS,
        directors: List[Dict[str, Any]] = data.DIRECTORS,
        actors: List[Dict[str, Any]] = data.ACTORS,
        genres: List[Dict[str, Any]] = data.GENRES,
        movies: List[Dict[str, Any]] = data.MOVIES,
    ) -> Dict[str, int]:
        """Clear every table, then insert the sample catalog"""
        await self.database.reset()
        await self.cache.invalidate_pattern("movies:*")
        logger.info("Data cleared...")

        async with self.database.session() as session:
            user_service = UserService(session)
            for user in users:
                await user_service.create_user(user["username"], user["email"], user["password"], user["role"])
            logger.info("Users seeded...")

            director_ids = await self._seed_people(DirectorService(session, self.cache), directors)
            logger.info("Directors seeded...")

            actor_ids = await self._seed_people(ActorService(session, self.cache), actors)
            logger.info("Actors seeded...")

            genre_service = GenreService(session, self.cache)
            genre_ids = {}
            for genre in genres:
                created = await genre_service.create(GenreCreate(**genre))
                genre_ids[created.name] = created.id
            logger.info("Genres seeded...")

            movie_service = MovieService(session, self.cache)
            for movie in movies:
                payload = MovieCreate(
                    title=movie["title"],
                    release_year=movie["release_year"],
                    plot=movie["plot"],
                    runtime=movie["runtime"],
                    director=director_ids[movie["director"]],
                    actors=[actor_ids[name] for name in movie.get("actors", [])],
                    genres=[genre_ids[name] for name in movie.get("genres", [])],
                    poster=movie.get("poster"),
                )
                await movie_service.create(payload)
            logger.info("Movies seeded...")

        self.counts = {
            "users": len(users),
            "directors": len(directors),
            "actors": len(actors),
            "genres": len(genres),
            "movies": len(movies),
        }
        logger.info("Database seeded successfully!")
        return self.counts

    async def _seed_people(self, service, people: List[Dict[str, Any]]) -> Dict[str, str]:
        ids = {}
        for person in people:
            created = await service.create(PersonCreate(**person))
            ids[created.name] = created.id
        return ids


async def main():
    """Main entry point"""
    # Configure logging
    logging.basicConfig(
        level=getattr(logging, config.app.log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    logger.info("🎬 Movie Catalog Seeder v1.0.0")

    seeder = Seeder()

    try:
        await seeder.start()
        await seeder.seed()
    finally:
        await seeder.stop()


def run():
    """Console entry point"""
    asyncio.run(main())


if __name__ == "__main__":
    run()
