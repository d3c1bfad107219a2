"""Todo list service — ownership-scoped CRUD for lists.

Learn: A list is visible to a user only through a users_lists row.
Every query here filters on that mapping, and "does not exist" and
"belongs to someone else" are both reported as NotFoundError so callers
cannot probe for other users' lists.
"""

from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.db.models import ListItem, TodoItem, TodoList, UserList, is_storable_id
from todoapp.errors import NotFoundError
from todoapp.services.partial_update import build_list_update
from todoapp.services.transaction import transaction

logger = structlog.get_logger()

LIST_NOT_FOUND = "list not found"


class TodoListService:
    """Business logic for todo lists."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user_id: int, title: str, description: str = "") -> int:
        """Insert the list and its ownership row in one transaction."""
        todo_list = TodoList(title=title, description=description)
        async with transaction(self.db):
            self.db.add(todo_list)
            await self.db.flush()
            self.db.add(UserList(user_id=user_id, list_id=todo_list.id))
            await self.db.flush()

        logger.info("list.created", list_id=todo_list.id)
        return todo_list.id

    async def get_all(self, user_id: int) -> list[TodoList]:
        result = await self.db.execute(
            select(TodoList)
            .join(UserList, UserList.list_id == TodoList.id)
            .where(UserList.user_id == user_id)
            .order_by(TodoList.id)
        )
        return list(result.scalars().all())

    async def get(self, user_id: int, list_id: int) -> TodoList:
        if not is_storable_id(list_id):
            raise NotFoundError(LIST_NOT_FOUND)
        result = await self.db.execute(
            select(TodoList)
            .join(UserList, UserList.list_id == TodoList.id)
            .where(UserList.user_id == user_id, TodoList.id == list_id)
        )
        todo_list = result.scalars().first()
        if todo_list is None:
            raise NotFoundError(LIST_NOT_FOUND)
        return todo_list

    async def is_owned(self, user_id: int, list_id: int) -> bool:
        if not is_storable_id(list_id):
            return False
        result = await self.db.execute(
            select(UserList.id).where(
                UserList.user_id == user_id, UserList.list_id == list_id
            )
        )
        return result.first() is not None

    async def update(self, user_id: int, list_id: int, changes: Mapping[str, Any]) -> None:
        """Apply a partial update. InvalidInputError if nothing is supplied."""
        plan = build_list_update(list_id, user_id, changes)
        if not is_storable_id(list_id):
            raise NotFoundError(LIST_NOT_FOUND)
        async with transaction(self.db):
            result = await self.db.execute(plan.statement(), plan.params())
            if result.rowcount == 0:
                raise NotFoundError(LIST_NOT_FOUND)

        self.db.expire_all()
        logger.info("list.updated", list_id=list_id, fields=sorted(changes))

    async def delete(self, user_id: int, list_id: int) -> None:
        """Delete an owned list together with its items and mapping rows."""
        async with transaction(self.db):
            if not await self.is_owned(user_id, list_id):
                raise NotFoundError(LIST_NOT_FOUND)

            item_ids = select(ListItem.item_id).where(ListItem.list_id == list_id)
            await self.db.execute(
                delete(TodoItem)
                .where(TodoItem.id.in_(item_ids))
                .execution_options(synchronize_session=False)
            )
            await self.db.execute(
                delete(ListItem)
                .where(ListItem.list_id == list_id)
                .execution_options(synchronize_session=False)
            )
            await self.db.execute(
                delete(UserList)
                .where(UserList.list_id == list_id)
                .execution_options(synchronize_session=False)
            )
            result = await self.db.execute(
                delete(TodoList)
                .where(TodoList.id == list_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(LIST_NOT_FOUND)

        logger.info("list.deleted", list_id=list_id)
