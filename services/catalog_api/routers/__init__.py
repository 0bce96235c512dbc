from catalog_api.routers import actors, auth, directors, genres, movies

__all__ = ["actors", "auth", "directors", "genres", "movies"]
