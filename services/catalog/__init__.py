"""
Shared modules for movie catalog services
"""
from .config import config
from .models import Genre, HealthCheck, Movie, MovieDetail, MovieListResponse, MovieSummary, Person

__all__ = ["Genre", "HealthCheck", "Movie", "MovieDetail", "MovieListResponse", "MovieSummary", "Person", "config"]
