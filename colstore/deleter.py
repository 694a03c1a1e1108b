"""Soft deletion and restoration of rows, found by primary key value."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from colstore.colval import ColVal
from colstore.storage import column_path, find_row, set_deleted_flag

if TYPE_CHECKING:
    from colstore.schema import Attribute, Relation

SUPPORTED_KEY_TYPES = frozenset({"integer", "decimal", "string"})


class RowNotFoundError(LookupError):
    """Raised when no row with the wanted key and deleted state exists."""


def _resolve_key(relation: Relation, key: Any) -> tuple[Attribute, Any]:
    if isinstance(key, ColVal):
        attribute, value = key.attribute, key.value
    else:
        attribute, value = relation.primary_key_attribute(), key
    if attribute is None or not attribute.is_pk:
        raise ValueError("No valid PK provided.")
    if attribute.type not in SUPPORTED_KEY_TYPES:
        raise ValueError(f"Unsupported primary key type: {attribute.type}")
    return attribute, value


def _flip(
    relation: Relation, key: Any, root: str | Path, *, deleted: bool
) -> int:
    attribute, value = _resolve_key(relation, key)
    pk_path = column_path(relation, attribute, root)
    row = find_row(pk_path, attribute.type, value, deleted=not deleted)
    if row is None:
        state = "already deleted" if deleted else "not deleted"
        raise RowNotFoundError(
            f"Row with matching PK {value!r} not found or {state} "
            f"in relation {relation.name!r}"
        )
    for attr in relation.attributes.values():
        set_deleted_flag(column_path(relation, attr, root), attr.type, row, deleted)
    return row


def delete_row(relation: Relation, key: Any, root: str | Path) -> int:
    """Mark the first live row whose key equals ``key`` as deleted.

    ``key`` is a plain value of the primary key column or a :class:`ColVal`.
    Returns the index of the row that was marked.
    """
    return _flip(relation, key, root, deleted=True)


def undelete_row(relation: Relation, key: Any, root: str | Path) -> int:
    """Mark the first deleted row whose key equals ``key`` as live again.

    Returns the index of the row that was restored.
    """
    return _flip(relation, key, root, deleted=False)