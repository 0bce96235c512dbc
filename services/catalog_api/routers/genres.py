from catalog.models import Genre, GenreCreate, GenreUpdate
from catalog_api.dependencies import get_genre_service
from catalog_api.routers.references import build_router

router = build_router(
    prefix="/api/genres",
    tag="genres",
    get_service=get_genre_service,
    create_model=GenreCreate,
    update_model=GenreUpdate,
    response_model=Genre,
)
