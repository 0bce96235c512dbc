"""
Shared data models for the movie catalog platform
"""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_POSTER = "no-image.jpg"


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class CatalogModel(BaseModel):
    """Base model with camelCase JSON field names"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Role(str, Enum):
    """User roles enum"""
    USER = "user"
    ADMIN = "admin"


# People (directors and actors share one shape)

class PersonCreate(CatalogModel):
    """Director or actor creation payload"""
    name: str = Field(..., min_length=1, max_length=200)
    birth_year: Optional[int] = Field(None, ge=0, le=9999)
    bio: Optional[str] = Field(None, max_length=5000)

    @field_validator("name", mode="before")
    def strip_name(cls, v):
        return _strip(v)


class PersonUpdate(CatalogModel):
    """Partial director or actor update"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    birth_year: Optional[int] = Field(None, ge=0, le=9999)
    bio: Optional[str] = Field(None, max_length=5000)

    @field_validator("name", mode="before")
    def strip_name(cls, v):
        return _strip(v)


class Person(CatalogModel):
    """Director or actor as returned by the API"""
    id: str
    name: str
    birth_year: Optional[int] = None
    bio: Optional[str] = None
    movies: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Genres

class GenreCreate(CatalogModel):
    """Genre creation payload"""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)

    @field_validator("name", mode="before")
    def strip_name(cls, v):
        return _strip(v)


class GenreUpdate(CatalogModel):
    """Partial genre update"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)

    @field_validator("name", mode="before")
    def strip_name(cls, v):
        return _strip(v)


class Genre(CatalogModel):
    """Genre as returned by the API"""
    id: str
    name: str
    description: Optional[str] = None
    movies: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Movies

class MovieCreate(CatalogModel):
    """Movie creation payload"""
    title: str = Field(..., min_length=1, max_length=500)
    release_year: int = Field(..., ge=1800, le=3000)
    plot: str = Field(..., min_length=1)
    runtime: int = Field(..., ge=1, le=2000)
    director: str = Field(..., min_length=1)
    actors: List[str] = Field(default_factory=list)
    genres: List[str] = Field(default_factory=list)
    poster: Optional[str] = Field(None, max_length=500)

    @field_validator("title", mode="before")
    def strip_title(cls, v):
        return _strip(v)

    @field_validator("actors", "genres")
    def unique_references(cls, v):
        """Drop repeated ids, keeping the first occurrence"""
        return list(dict.fromkeys(v))


class MovieUpdate(CatalogModel):
    """Partial movie update"""
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    release_year: Optional[int] = Field(None, ge=1800, le=3000)
    plot: Optional[str] = Field(None, min_length=1)
    runtime: Optional[int] = Field(None, ge=1, le=2000)
    director: Optional[str] = Field(None, min_length=1)
    actors: Optional[List[str]] = None
    genres: Optional[List[str]] = None
    poster: Optional[str] = Field(None, max_length=500)

    @field_validator("title", mode="before")
    def strip_title(cls, v):
        return _strip(v)

    @field_validator("actors", "genres")
    def unique_references(cls, v):
        if v is None:
            return v
        return list(dict.fromkeys(v))


class Movie(CatalogModel):
    """Movie with references as plain ids"""
    id: str
    title: str
    release_year: int
    plot: str
    runtime: int
    director: str
    actors: List[str] = Field(default_factory=list)
    genres: List[str] = Field(default_factory=list)
    poster: str = DEFAULT_POSTER
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NamedRef(CatalogModel):
    """Display subset of a referenced entity"""
    id: str
    name: str


class PersonRef(NamedRef):
    birth_year: Optional[int] = None
    bio: Optional[str] = None


class GenreRef(NamedRef):
    description: Optional[str] = None


class MovieSummary(CatalogModel):
    """Movie with references resolved to names"""
    id: str
    title: str
    release_year: int
    plot: str
    runtime: int
    director: Optional[NamedRef] = None
    actors: List[NamedRef] = Field(default_factory=list)
    genres: List[NamedRef] = Field(default_factory=list)
    poster: str = DEFAULT_POSTER
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MovieDetail(MovieSummary):
    """Movie with references resolved to extended display subsets"""
    director: Optional[PersonRef] = None
    actors: List[PersonRef] = Field(default_factory=list)
    genres: List[GenreRef] = Field(default_factory=list)


class MovieListResponse(CatalogModel):
    """Paginated movie list"""
    movies: List[MovieSummary]
    page: int
    pages: int
    total: int


# Users

class RegisterRequest(CatalogModel):
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=200)

    @field_validator("username", mode="before")
    def strip_username(cls, v):
        return _strip(v)


class LoginRequest(CatalogModel):
    """Login with either an email or a username"""
    email: Optional[str] = None
    username: Optional[str] = None
    password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def identity_required(self):
        if not (self.email or self.username):
            raise ValueError("email or username is required")
        return self


class UserProfile(CatalogModel):
    id: str
    username: str
    email: str
    role: Role

    model_config = ConfigDict(use_enum_values=True)


class AuthResponse(UserProfile):
    token: str


# Misc

class Message(CatalogModel):
    message: str


class HealthCheck(CatalogModel):
    """Health check response"""
    status: str
    timestamp: datetime
    version: str
    services: Dict[str, str]
