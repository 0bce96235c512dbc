from catalog.models import Person, PersonCreate, PersonUpdate
from catalog_api.dependencies import get_actor_service
from catalog_api.routers.references import build_router

router = build_router(
    prefix="/api/actors",
    tag="actors",
    get_service=get_actor_service,
    create_model=PersonCreate,
    update_model=PersonUpdate,
    response_model=Person,
)
