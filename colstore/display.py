"""Text renderings of stored rows and of relation schemas."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from colstore.schema import Attribute, Database
from colstore.storage import column_path, read_records


def _cell(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:f}"
    return str(value)


def read_live_rows(
    database: Database, relation_name: str, root: str | Path
) -> list[list[str]]:
    """Return the text of every row not marked deleted, columns in name order.

    A row counts as deleted when its flag in the first column is set.
    """
    relation = database.get_relation(relation_name)
    attributes = list(relation.attributes.values())
    if not attributes:
        return []
    columns = [
        list(read_records(column_path(relation, attr, root), attr.type))
        for attr in attributes
    ]
    return [
        [_cell(record.value) for record in records]
        for records in zip(*columns)
        if not records[0].deleted
    ]


def _divider(widths: list[int]) -> str:
    return "+" + "".join("-" * width + "+" for width in widths) + "\n"


def _line(cells: list[str], widths: list[int]) -> str:
    return "|" + "".join(
        f" {cell}".ljust(width) + "|" for cell, width in zip(cells, widths)
    ) + "\n"


def format_table(database: Database, relation_name: str, root: str | Path) -> str:
    """Render the live rows of a relation as a boxed text table."""
    relation = database.get_relation(relation_name)
    names = list(relation.attributes)
    rows = read_live_rows(database, relation_name, root)
    widths = [
        max([len(name)] + [len(row[i]) for row in rows]) + 2
        for i, name in enumerate(names)
    ]
    parts = [_divider(widths), _line(names, widths), _divider(widths)]
    for row in rows:
        parts.append(_line(row, widths))
        parts.append(_divider(widths))
    return "".join(parts)


def _key_text(attribute: Attribute) -> str:
    if attribute.is_pk:
        return "PRI"
    if attribute.unique:
        return "UNI"
    if attribute.is_fk:
        return "FOR"
    return ""


def format_schema(database: Database) -> str:
    """Render each relation's columns with their type, nullability and key kind."""
    if not database.relations:
        return f"Database '{database.name}' has no tables.\n"
    parts: list[str] = []
    for table_name, relation in database.relations.items():
        attributes = list(relation.attributes.values())
        widths = [
            max([len("Field")] + [len(a.name) for a in attributes]) + 2,
            max([len("Type")] + [len(a.type) for a in attributes]) + 2,
            max(len("Null") + 2, 5),
            max(len("Key") + 2, 5),
        ]
        parts.append(f"Table: {table_name}\n")
        parts.append(_divider(widths))
        parts.append(_line(["Field", "Type", "Null", "Key"], widths))
        parts.append(_divider(widths))
        for attr in attributes:
            null_text = "YES" if attr.nullable else "NO"
            parts.append(_line([attr.name, attr.type, null_text, _key_text(attr)], widths))
            parts.append(_divider(widths))
        parts.append("\n")
    return "".join(parts)