"""Todo item service — ownership-scoped CRUD for list items.

Learn: An item is reachable from a user only through the chain
todo_items → lists_items → users_lists. Reads, updates and deletes all
re-derive that join, so a guessed item id from another user's list
matches nothing and surfaces as NotFoundError.
"""

from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.db.models import ListItem, TodoItem, UserList, is_storable_id
from todoapp.errors import NotFoundError
from todoapp.services.list_service import LIST_NOT_FOUND, TodoListService
from todoapp.services.partial_update import build_item_update
from todoapp.services.transaction import transaction

logger = structlog.get_logger()

ITEM_NOT_FOUND = "item not found"


def owned_item_ids(user_id: int):
    """Subquery of item ids that sit in lists the user owns."""
    return (
        select(ListItem.item_id)
        .join(UserList, UserList.list_id == ListItem.list_id)
        .where(UserList.user_id == user_id)
    )


class TodoItemService:
    """Business logic for todo items."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.lists = TodoListService(db)

    async def create(self, list_id: int, title: str, description: str = "") -> int:
        """Insert the item and its membership row in one transaction.

        If the membership insert fails the item insert is rolled back with
        it; a missing list surfaces as NotFoundError.
        """
        if not is_storable_id(list_id):
            raise NotFoundError(LIST_NOT_FOUND)

        item = TodoItem(title=title, description=description, done=False)
        async with transaction(self.db):
            self.db.add(item)
            await self.db.flush()
            self.db.add(ListItem(list_id=list_id, item_id=item.id))
            try:
                await self.db.flush()
            except IntegrityError:
                raise NotFoundError(LIST_NOT_FOUND)

        logger.info("item.created", item_id=item.id, list_id=list_id)
        return item.id

    async def get_all(self, user_id: int, list_id: int) -> list[TodoItem]:
        """Items of an owned list. Empty list is fine; an unowned list is not."""
        if not await self.lists.is_owned(user_id, list_id):
            raise NotFoundError(LIST_NOT_FOUND)

        result = await self.db.execute(
            select(TodoItem)
            .join(ListItem, ListItem.item_id == TodoItem.id)
            .join(UserList, UserList.list_id == ListItem.list_id)
            .where(ListItem.list_id == list_id, UserList.user_id == user_id)
            .order_by(TodoItem.id)
        )
        return list(result.scalars().all())

    async def get(self, user_id: int, item_id: int) -> TodoItem:
        if not is_storable_id(item_id):
            raise NotFoundError(ITEM_NOT_FOUND)
        result = await self.db.execute(
            select(TodoItem)
            .join(ListItem, ListItem.item_id == TodoItem.id)
            .join(UserList, UserList.list_id == ListItem.list_id)
            .where(TodoItem.id == item_id, UserList.user_id == user_id)
        )
        item = result.scalars().first()
        if item is None:
            raise NotFoundError(ITEM_NOT_FOUND)
        return item

    async def update(self, user_id: int, item_id: int, changes: Mapping[str, Any]) -> None:
        """Apply a partial update. InvalidInputError if nothing is supplied."""
        plan = build_item_update(item_id, user_id, changes)
        if not is_storable_id(item_id):
            raise NotFoundError(ITEM_NOT_FOUND)
        async with transaction(self.db):
            result = await self.db.execute(plan.statement(), plan.params())
            if result.rowcount == 0:
                raise NotFoundError(ITEM_NOT_FOUND)

        # Drop any stale copy of the row held by this session.
        self.db.expire_all()
        logger.info("item.updated", item_id=item_id, fields=sorted(changes))

    async def delete(self, user_id: int, item_id: int) -> None:
        if not is_storable_id(item_id):
            raise NotFoundError(ITEM_NOT_FOUND)

        async with transaction(self.db):
            result = await self.db.execute(
                delete(TodoItem)
                .where(TodoItem.id == item_id, TodoItem.id.in_(owned_item_ids(user_id)))
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(ITEM_NOT_FOUND)

        logger.info("item.deleted", item_id=item_id)
