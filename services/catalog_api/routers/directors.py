from catalog.models import Person, PersonCreate, PersonUpdate
from catalog_api.dependencies import get_director_service
from catalog_api.routers.references import build_router

router = build_router(
    prefix="/api/directors",
    tag="directors",
    get_service=get_director_service,
    create_model=PersonCreate,
    update_model=PersonUpdate,
    response_model=Person,
)
