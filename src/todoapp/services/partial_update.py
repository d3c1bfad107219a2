"""Partial-update statement builder.

Learn: a sparse update touches only the columns the caller supplied.
The SET clause is generated from the supplied subset, always in the
table's declaration order, with numbered bind parameters (:p1, :p2, ...).
The ownership predicate's arguments are appended after the SET
arguments, and the predicate re-derives ownership through the mapping
tables, so an update of somebody else's row matches zero rows.

    >>> plan = build_item_update(7, 3, {"done": True, "title": "x"})
    >>> plan.set_clause
    'title = :p1, done = :p2'
    >>> plan.args
    ('x', True, 7, 3)
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import TextClause, text

from todoapp.errors import InvalidInputError

ITEM_COLUMNS = ("title", "description", "done")
LIST_COLUMNS = ("title", "description")

# {0}, {1}, ... are replaced by the predicate's bind parameters.
ITEM_OWNERSHIP_PREDICATE = (
    "id = {0} AND id IN ("
    "SELECT li.item_id FROM lists_items li "
    "INNER JOIN users_lists ul ON ul.list_id = li.list_id "
    "WHERE ul.user_id = {1})"
)
LIST_OWNERSHIP_PREDICATE = (
    "id = {0} AND id IN ("
    "SELECT ul.list_id FROM users_lists ul WHERE ul.user_id = {1})"
)


@dataclass(frozen=True)
class PartialUpdate:
    table: str
    set_clause: str
    where_clause: str
    args: tuple

    @property
    def sql(self) -> str:
        return f"UPDATE {self.table} SET {self.set_clause} WHERE {self.where_clause}"

    def statement(self) -> TextClause:
        return text(self.sql)

    def params(self) -> dict[str, Any]:
        return {f"p{n}": value for n, value in enumerate(self.args, start=1)}


def build_partial_update(
    table: str,
    columns: Sequence[str],
    changes: Mapping[str, Any],
    predicate: str,
    predicate_args: Sequence[Any],
) -> PartialUpdate:
    """Build an UPDATE for the supplied subset of ``columns``.

    Raises InvalidInputError when ``changes`` is empty or names a column
    outside ``columns``.
    """
    unknown = set(changes) - set(columns)
    if unknown:
        raise InvalidInputError(f"unknown update fields: {', '.join(sorted(unknown))}")
    if not changes:
        raise InvalidInputError("update structure has no values")

    set_parts: list[str] = []
    args: list[Any] = []
    for column in columns:
        if column not in changes:
            continue
        args.append(changes[column])
        set_parts.append(f"{column} = :p{len(args)}")

    placeholders = []
    for value in predicate_args:
        args.append(value)
        placeholders.append(f":p{len(args)}")

    return PartialUpdate(
        table=table,
        set_clause=", ".join(set_parts),
        where_clause=predicate.format(*placeholders),
        args=tuple(args),
    )


def build_item_update(item_id: int, user_id: int, changes: Mapping[str, Any]) -> PartialUpdate:
    return build_partial_update(
        "todo_items", ITEM_COLUMNS, changes, ITEM_OWNERSHIP_PREDICATE, (item_id, user_id)
    )


def build_list_update(list_id: int, user_id: int, changes: Mapping[str, Any]) -> PartialUpdate:
    return build_partial_update(
        "todo_lists", LIST_COLUMNS, changes, LIST_OWNERSHIP_PREDICATE, (list_id, user_id)
    )
