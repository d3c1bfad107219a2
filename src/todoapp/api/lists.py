"""Todo list routes.

Learn: The user id always comes from the verified token
(CurrentIdentity), never from the request body or path.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.auth.dependencies import CurrentIdentity, get_current_user
from todoapp.db.engine import get_db
from todoapp.schemas.todo import (
    IdResponse,
    ListCollection,
    ListCreate,
    ListRead,
    ListUpdate,
    StatusResponse,
)
from todoapp.services.list_service import TodoListService

router = APIRouter(prefix="/lists")


def _svc(db: AsyncSession = Depends(get_db)) -> TodoListService:
    return TodoListService(db)


@router.post("", response_model=IdResponse)
async def create_list(
    body: ListCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TodoListService = Depends(_svc),
):
    list_id = await svc.create(identity.user_id, body.title, body.description)
    return {"id": list_id}


@router.get("", response_model=ListCollection)
async def get_all_lists(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TodoListService = Depends(_svc),
):
    return {"data": await svc.get_all(identity.user_id)}


@router.get("/{list_id}", response_model=ListRead)
async def get_list(
    list_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TodoListService = Depends(_svc),
):
    return await svc.get(identity.user_id, list_id)


@router.put("/{list_id}", response_model=StatusResponse)
async def update_list(
    list_id: int,
    body: ListUpdate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TodoListService = Depends(_svc),
):
    await svc.update(identity.user_id, list_id, body.model_dump(exclude_unset=True))
    return {"status": "ok"}


@router.delete("/{list_id}", response_model=StatusResponse)
async def delete_list(
    list_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TodoListService = Depends(_svc),
):
    await svc.delete(identity.user_id, list_id)
    return {"status": "ok"}
