"""
Sample catalog used by the seeder
"""

USERS = [
    {"username": "admin", "email": "admin@example.com", "password": "admin123", "role": "admin"},
    {"username": "user", "email": "user@example.com", "password": "user123", "role": "user"},
]

DIRECTORS = [
    {
        "name": "Christopher Nolan",
        "birth_year": 1970,
        "bio": "British-American film director known for his innovative film direction.",
    },
    {
        "name": "Steven Spielberg",
        "birth_year": 1946,
        "bio": "American film director, producer, and screenwriter.",
    },
    {
        "name": "Greta Gerwig",
        "birth_year": 1983,
        "bio": "American actress, screenwriter, and director.",
    },
]

ACTORS = [
    {"name": "Leonardo DiCaprio", "birth_year": 1974, "bio": "American actor and film producer."},
    {"name": "Tom Hanks", "birth_year": 1956, "bio": "American actor and filmmaker."},
    {"name": "Saoirse Ronan", "birth_year": 1994, "bio": "Irish and American actress."},
]

GENRES = [
    {"name": "Science Fiction", "description": "Fiction based on scientific facts and principles"},
    {"name": "Drama", "description": "Fiction focused on realistic characters dealing with emotional themes"},
    {"name": "Comedy", "description": "Fiction intended to be humorous or amusing"},
]

# director/actors/genres refer to names above
MOVIES = [
    {
        "title": "Inception",
        "release_year": 2010,
        "plot": (
            "A thief who steals corporate secrets through dream-sharing technology "
            "is given the task of planting an idea in a CEO's mind."
        ),
        "runtime": 148,
        "director": "Christopher Nolan",
        "actors": ["Leonardo DiCaprio"],
        "genres": ["Science Fiction", "Drama"],
        "poster": "inception.jpg",
    },
    {
        "title": "Saving Private Ryan",
        "release_year": 1998,
        "plot": (
            "Following the Normandy Landings, a group of U.S. soldiers go behind enemy lines "
            "to retrieve a paratrooper whose brothers have been killed in action."
        ),
        "runtime": 169,
        "director": "Steven Spielberg",
        "actors": ["Tom Hanks"],
        "genres": ["Drama"],
        "poster": "saving-private-ryan.jpg",
    },
    {
        "title": "Little Women",
        "release_year": 2019,
        "plot": (
            "Jo March reflects back and forth on her life, telling the beloved story of the "
            "March sisters - four young women, each determined to live life on her own terms."
        ),
        "runtime": 135,
        "director": "Greta Gerwig",
        "actors": ["Saoirse Ronan"],
        "genres": ["Drama", "Comedy"],
        "poster": "little-women.jpg",
    },
]
