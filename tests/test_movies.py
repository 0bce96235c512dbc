import pytest
from sqlalchemy.exc import OperationalError

from catalog.repositories import MovieRepository
from conftest import movie_payload


def _get(client, path, headers):
    response = client.get(path, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def test_create_registers_back_references(client, create, cast, user_headers):
    movie = create("/api/movies", movie_payload(cast))

    assert movie["title"] == "Inception"
    assert movie["releaseYear"] == 2010
    assert movie["director"] == cast["director"]["id"]
    assert movie["actors"] == [actor["id"] for actor in cast["actors"]]
    assert movie["genres"] == [genre["id"] for genre in cast["genres"]]

    assert _get(client, f"/api/directors/{cast['director']['id']}", user_headers)["movies"] == [movie["id"]]
    for actor in cast["actors"]:
        assert _get(client, f"/api/actors/{actor['id']}", user_headers)["movies"] == [movie["id"]]
    for genre in cast["genres"]:
        assert _get(client, f"/api/genres/{genre['id']}", user_headers)["movies"] == [movie["id"]]


def test_create_defaults_poster_and_trims_title(create, cast):
    payload = movie_payload(cast, title="  Tenet  ", actors=[], genres=[])
    del payload["poster"]
    movie = create("/api/movies", payload)
    assert movie["title"] == "Tenet"
    assert movie["poster"] == "no-image.jpg"
    assert movie["actors"] == []


def test_create_requires_fields(client, cast, admin_headers):
    payload = movie_payload(cast)
    del payload["plot"]
    response = client.post("/api/movies", json=payload, headers=admin_headers)
    assert response.status_code == 400
    assert "plot" in response.json()["message"]


def test_create_rejects_unknown_references(client, cast, admin_headers, user_headers):
    response = client.post("/api/movies", json=movie_payload(cast, director="missing-id"), headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Director not found"

    response = client.post(
        "/api/movies",
        json=movie_payload(cast, actors=[cast["actors"][0]["id"], "missing-id"]),
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Actor not found"

    response = client.post("/api/movies", json=movie_payload(cast, genres=["missing-id"]), headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Genre not found"

    assert _get(client, "/api/movies", user_headers)["total"] == 0
    assert _get(client, f"/api/actors/{cast['actors'][0]['id']}", user_headers)["movies"] == []


def test_list_paginates_newest_first(client, create, cast, user_headers):
    created = [create("/api/movies", movie_payload(cast, title=f"Movie {index}")) for index in range(12)]

    first = _get(client, "/api/movies", user_headers)
    assert first["page"] == 1
    assert first["pages"] == 2
    assert first["total"] == 12
    assert [movie["id"] for movie in first["movies"]] == [movie["id"] for movie in reversed(created)][:10]
    assert first["movies"][0]["director"] == {"id": cast["director"]["id"], "name": "Christopher Nolan"}
    assert [actor["name"] for actor in first["movies"][0]["actors"]] == ["Leonardo DiCaprio", "Elliot Page"]

    second = _get(client, "/api/movies?page=2", user_headers)
    assert second["page"] == 2
    assert [movie["title"] for movie in second["movies"]] == ["Movie 1", "Movie 0"]

    assert _get(client, "/api/movies?page=5", user_headers)["movies"] == []


@pytest.mark.parametrize("page", ["0", "-3", "abc", ""])
def test_list_falls_back_to_first_page(client, create, cast, user_headers, page):
    movie = create("/api/movies", movie_payload(cast))

    listing = _get(client, f"/api/movies?page={page}", user_headers)
    assert listing["page"] == 1
    assert [entry["id"] for entry in listing["movies"]] == [movie["id"]]


def test_list_empty_catalog(client, user_headers):
    assert _get(client, "/api/movies", user_headers) == {"movies": [], "page": 1, "pages": 0, "total": 0}


def test_get_resolves_extended_references(client, create, cast, user_headers):
    movie = create("/api/movies", movie_payload(cast))

    detail = _get(client, f"/api/movies/{movie['id']}", user_headers)
    assert detail["director"] == {
        "id": cast["director"]["id"],
        "name": "Christopher Nolan",
        "birthYear": 1970,
        "bio": "Director",
    }
    assert detail["actors"][0]["birthYear"] == 1974
    assert detail["genres"][0] == {
        "id": cast["genres"][0]["id"],
        "name": "Science Fiction",
        "description": "Speculative",
    }


def test_get_missing_movie(client, user_headers):
    response = client.get("/api/movies/missing-id", headers=user_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Movie not found"


def test_partial_update_changes_only_plot(client, create, cast, admin_headers):
    movie = create("/api/movies", movie_payload(cast))

    response = client.put(f"/api/movies/{movie['id']}", json={"plot": "new"}, headers=admin_headers)
    assert response.status_code == 200
    updated = response.json()
    assert updated["plot"] == "new"
    for field in ("title", "releaseYear", "runtime", "director", "actors", "genres", "poster"):
        assert updated[field] == movie[field]


def test_update_director_moves_back_reference(client, create, cast, admin_headers, user_headers):
    movie = create("/api/movies", movie_payload(cast))
    other = create("/api/directors", {"name": "Denis Villeneuve"})

    response = client.put(f"/api/movies/{movie['id']}", json={"director": other["id"]}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["director"] == other["id"]

    assert _get(client, f"/api/directors/{cast['director']['id']}", user_headers)["movies"] == []
    assert _get(client, f"/api/directors/{other['id']}", user_headers)["movies"] == [movie["id"]]
    assert [item["id"] for item in _get(client, f"/api/directors/{other['id']}/movies", user_headers)] == [movie["id"]]


def test_update_actors_and_genres_reconciles_back_references(client, create, cast, admin_headers, user_headers):
    movie = create("/api/movies", movie_payload(cast))
    newcomer = create("/api/actors", {"name": "Tom Hardy"})
    kept, dropped = cast["actors"]

    response = client.put(
        f"/api/movies/{movie['id']}",
        json={"actors": [newcomer["id"], kept["id"]], "genres": []},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["actors"] == [newcomer["id"], kept["id"]]
    assert response.json()["genres"] == []

    assert _get(client, f"/api/actors/{kept['id']}", user_headers)["movies"] == [movie["id"]]
    assert _get(client, f"/api/actors/{newcomer['id']}", user_headers)["movies"] == [movie["id"]]
    assert _get(client, f"/api/actors/{dropped['id']}", user_headers)["movies"] == []
    for genre in cast["genres"]:
        assert _get(client, f"/api/genres/{genre['id']}", user_headers)["movies"] == []


def test_update_rejects_unknown_director(client, create, cast, admin_headers, user_headers):
    movie = create("/api/movies", movie_payload(cast))

    response = client.put(f"/api/movies/{movie['id']}", json={"director": "missing-id"}, headers=admin_headers)
    assert response.status_code == 400
    assert _get(client, f"/api/directors/{cast['director']['id']}", user_headers)["movies"] == [movie["id"]]


def test_update_missing_movie(client, admin_headers):
    response = client.put("/api/movies/missing-id", json={"plot": "x"}, headers=admin_headers)
    assert response.status_code == 404


def test_delete_pulls_back_references(client, create, cast, admin_headers, user_headers):
    movie = create("/api/movies", movie_payload(cast))

    response = client.delete(f"/api/movies/{movie['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Movie removed"

    assert client.get(f"/api/movies/{movie['id']}", headers=user_headers).status_code == 404
    assert _get(client, f"/api/directors/{cast['director']['id']}", user_headers)["movies"] == []
    for actor in cast["actors"]:
        assert _get(client, f"/api/actors/{actor['id']}", user_headers)["movies"] == []
    for genre in cast["genres"]:
        assert _get(client, f"/api/genres/{genre['id']}", user_headers)["movies"] == []


def test_delete_missing_movie(client, admin_headers):
    response = client.delete("/api/movies/missing-id", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Movie not found"


def test_failed_delete_rolls_back(client, create, cast, admin_headers, user_headers, monkeypatch):
    movie = create("/api/movies", movie_payload(cast))

    async def _fail(self, record):
        raise OperationalError("DELETE FROM movies", {}, Exception("disk I/O error"))

    monkeypatch.setattr(MovieRepository, "delete", _fail)
    response = client.delete(f"/api/movies/{movie['id']}", headers=admin_headers)
    assert response.status_code == 500
    assert response.json()["message"].startswith("Failed to delete movie:")

    monkeypatch.undo()
    assert _get(client, f"/api/movies/{movie['id']}", user_headers)["title"] == "Inception"
    assert _get(client, f"/api/directors/{cast['director']['id']}", user_headers)["movies"] == [movie["id"]]
    assert _get(client, f"/api/actors/{cast['actors'][0]['id']}", user_headers)["movies"] == [movie["id"]]


def test_director_scenario(client, create, admin_headers, user_headers):
    director = create("/api/directors", {"name": "D"})
    movie = create(
        "/api/movies",
        {"title": "Only", "releaseYear": 2001, "plot": "p", "runtime": 90, "director": director["id"]},
    )

    movies = _get(client, f"/api/directors/{director['id']}/movies", user_headers)
    assert [item["id"] for item in movies] == [movie["id"]]


def test_movie_writes_require_admin(client, create, cast, user_headers):
    movie = create("/api/movies", movie_payload(cast))

    assert client.post("/api/movies", json=movie_payload(cast), headers=user_headers).status_code == 403
    assert client.put(f"/api/movies/{movie['id']}", json={"plot": "x"}, headers=user_headers).status_code == 403
    assert client.delete(f"/api/movies/{movie['id']}", headers=user_headers).status_code == 403
    assert client.delete("/api/movies/missing-id", headers=user_headers).status_code == 403


def test_movie_routes_require_token(client):
    assert client.get("/api/movies").status_code == 401
    assert client.post("/api/movies", json={}).status_code == 401
    assert client.delete("/api/movies/missing-id").status_code == 401
