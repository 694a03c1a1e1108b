"""Key constraint checks against the live values stored in column files."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from colstore.colval import ColVal
from colstore.storage import column_path, read_records

if TYPE_CHECKING:
    from colstore.schema import Attribute, ForeignKeyConstraint, Relation


def load_column_values(
    relation: Relation, attribute: Attribute, root: str | Path
) -> set[ColVal]:
    """Return the values of every live row of one column.

    A column file that does not exist holds no values.
    """
    path = column_path(relation, attribute, root)
    if not path.is_file():
        return set()
    return {
        ColVal(attribute, record.value, relation=relation)
        for record in read_records(path, attribute.type)
        if not record.deleted
    }


def _require_attribute(value: ColVal) -> Attribute:
    if value.attribute is None:
        raise ValueError("value has no attribute")
    return value.attribute


def validate_primary_key(relation: Relation, value: ColVal, root: str | Path) -> bool:
    """True when ``value`` is not already a live value of its column."""
    attribute = _require_attribute(value)
    return value not in load_column_values(relation, attribute, root)


def validate_unique_key(relation: Relation, value: ColVal, root: str | Path) -> bool:
    """True when ``value`` is not already a live value of its column."""
    attribute = _require_attribute(value)
    return value not in load_column_values(relation, attribute, root)


def validate_foreign_key(
    value: ColVal, constraint: ForeignKeyConstraint, root: str | Path
) -> bool:
    """True when ``value`` is a live value of the constraint's child column."""
    existing = load_column_values(constraint.child_table, constraint.child_column, root)
    return value in existing