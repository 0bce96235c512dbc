import asyncio

import pytest
from fastapi.testclient import TestClient

from catalog.config import DatabaseConfig, RedisConfig
from catalog.database import Database
from catalog_api.cache import CacheService
from catalog_api.main import app
from catalog_api.security import create_access_token
from catalog_api.services import UserService


@pytest.fixture
def database_config(tmp_path):
    return DatabaseConfig(dsn=f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")


async def _create_accounts(database_config):
    database = Database(database_config)
    await database.connect()
    try:
        async with database.session() as session:
            users = UserService(session)
            admin = await users.create_user("admin", "admin@example.com", "admin123", "admin")
            user = await users.create_user("viewer", "viewer@example.com", "viewer123", "user")
    finally:
        await database.disconnect()
    return {"admin": admin, "user": user}


@pytest.fixture
def accounts(database_config):
    return asyncio.run(_create_accounts(database_config))


@pytest.fixture
def client(database_config, accounts):
    app.state.database = Database(database_config)
    app.state.cache = CacheService(RedisConfig(host=None))
    with TestClient(app) as test_client:
        yield test_client


def _bearer(profile):
    return {"Authorization": f"Bearer {create_access_token(profile.id, profile.role)}"}


@pytest.fixture
def admin_headers(accounts):
    return _bearer(accounts["admin"])


@pytest.fixture
def user_headers(accounts):
    return _bearer(accounts["user"])


@pytest.fixture
def create(client, admin_headers):
    """POST as admin and return the created body"""

    def _create(path, payload):
        response = client.post(path, json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def cast(create):
    """A director, two actors and two genres to build movies from"""
    return {
        "director": create("/api/directors", {"name": "Christopher Nolan", "birthYear": 1970, "bio": "Director"}),
        "actors": [
            create("/api/actors", {"name": "Leonardo DiCaprio", "birthYear": 1974}),
            create("/api/actors", {"name": "Elliot Page", "birthYear": 1987}),
        ],
        "genres": [
            create("/api/genres", {"name": "Science Fiction", "description": "Speculative"}),
            create("/api/genres", {"name": "Drama"}),
        ],
    }


def movie_payload(cast, **overrides):
    payload = {
        "title": "Inception",
        "releaseYear": 2010,
        "plot": "A thief who steals corporate secrets through dream-sharing technology.",
        "runtime": 148,
        "director": cast["director"]["id"],
        "actors": [actor["id"] for actor in cast["actors"]],
        "genres": [genre["id"] for genre in cast["genres"]],
        "poster": "inception.jpg",
    }
    payload.update(overrides)
    return payload
