"""
Route table shared by directors, actors and genres
"""
from typing import Callable, List, Type

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from catalog.models import Message, MovieSummary
from catalog_api.auth import get_current_user, require_admin


def build_router(
    *,
    prefix: str,
    tag: str,
    get_service: Callable,
    create_model: Type[BaseModel],
    update_model: Type[BaseModel],
    response_model: Type[BaseModel],
) -> APIRouter:
    """Wire list/get/movies/create/update/delete for one referenced entity"""
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.get("", response_model=List[response_model], dependencies=[Depends(get_current_user)])
    async def list_records(service=Depends(get_service)):
        """List every record sorted by name"""
        return await service.list()

    @router.get("/{record_id}", response_model=response_model, dependencies=[Depends(get_current_user)])
    async def get_record(record_id: str, service=Depends(get_service)):
        return await service.get(record_id)

    @router.get(
        "/{record_id}/movies",
        response_model=List[MovieSummary],
        dependencies=[Depends(get_current_user)],
    )
    async def list_record_movies(record_id: str, service=Depends(get_service)):
        """Movies referencing this record, newest release first"""
        return await service.movies_for(record_id)

    @router.post(
        "",
        response_model=response_model,
        status_code=status.HTTP_201_CREATED,
        dependencies=[Depends(require_admin)],
    )
    async def create_record(payload: create_model, service=Depends(get_service)):
        return await service.create(payload)

    @router.put("/{record_id}", response_model=response_model, dependencies=[Depends(require_admin)])
    async def update_record(record_id: str, payload: update_model, service=Depends(get_service)):
        return await service.update(record_id, payload)

    @router.delete("/{record_id}", response_model=Message, dependencies=[Depends(require_admin)])
    async def delete_record(record_id: str, service=Depends(get_service)):
        """Delete a record that no movie references"""
        return await service.delete(record_id)

    return router
