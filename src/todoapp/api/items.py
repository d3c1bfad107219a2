"""Todo item routes.

Items are created under a list (/lists/{id}/items) and addressed
directly afterwards (/items/{id}).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.auth.dependencies import CurrentIdentity, get_current_user
from todoapp.db.engine import get_db
from todoapp.schemas.todo import (
    IdResponse,
    ItemCreate,
    ItemRead,
    ItemUpdate,
    StatusResponse,
)
from todoapp.services.item_service import TodoItemService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> TodoItemService:
    return TodoItemService(db)


@router.post("/lists/{list_id}/items", response_model=IdResponse)
async def create_item(
    list_id: int,
    body: ItemCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TodoItemService = Depends(_svc),
):
    """Create an item in a list the caller owns."""
    await svc.lists.get(identity.user_id, list_id)
    item_id = await svc.create(list_id, body.title, body.description)
    return {"id": item_id}


@router.get("/lists/{list_id}/items", response_model=list[ItemRead])
async def get_all_items(
    list_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TodoItemService = Depends(_svc),
):
    return await svc.get_all(identity.user_id, list_id)


@router.get("/items/{item_id}", response_model=ItemRead)
async def get_item(
    item_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TodoItemService = Depends(_svc),
):
    return await svc.get(identity.user_id, item_id)


@router.put("/items/{item_id}", response_model=StatusResponse)
async def update_item(
    item_id: int,
    body: ItemUpdate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TodoItemService = Depends(_svc),
):
    await svc.update(identity.user_id, item_id, body.model_dump(exclude_unset=True))
    return {"status": "ok"}


@router.delete("/items/{item_id}", response_model=StatusResponse)
async def delete_item(
    item_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TodoItemService = Depends(_svc),
):
    await svc.delete(identity.user_id, item_id)
    return {"status": "ok"}
