"""Reading a schema document and installing it under a databases directory."""

from __future__ import annotations

import re
import shutil
import sys
import xml.etree.ElementTree as ET
from pathlib import Path

from colstore.loader import SchemaError
from colstore.query import parse_query
from colstore.schema import (
    Attribute,
    Database,
    ForeignKeyConstraint,
    PrimaryKeyConstraint,
    Relation,
    UniqueKeyConstraint,
    View,
)

_INT_PREFIX = re.compile(r"\s*[+-]?\d+")


def _warn(message: str) -> None:
    print(message, file=sys.stderr)


def _query_bool(value: str | None, default: bool) -> bool:
    """Read a boolean attribute; keep ``default`` when it is absent or unreadable."""
    if value is None:
        return default
    match = _INT_PREFIX.match(value)
    if match is not None:
        return int(match.group(0)) != 0
    if value in ("true", "True", "TRUE"):
        return True
    if value in ("false", "False", "FALSE"):
        return False
    return default


def _children(element: ET.Element | None, tag: str) -> list[ET.Element]:
    return [] if element is None else element.findall(tag)


def _read_relation(rel_elem: ET.Element, name: str, database: Database) -> Relation:
    relation = Relation(name)
    for attr_elem in _children(rel_elem.find("Attributes"), "Attribute"):
        attr_name = attr_elem.get("name")
        attr_type = attr_elem.get("type")
        if attr_name is None or attr_type is None:
            _warn(f"Attribute missing name or type in relation {name}")
            continue
        relation.add_attribute(
            Attribute(
                attr_name,
                attr_type,
                nullable=_query_bool(attr_elem.get("isNullable"), True),
                unique=_query_bool(attr_elem.get("isUnique"), False),
            )
        )

    pk_elem = rel_elem.find("PrimaryKey")
    if pk_elem is not None:
        refs = [
            ref_name
            for ref in _children(pk_elem, "AttributeRef")
            if (ref_name := ref.get("name")) is not None
        ]
        if refs:
            database.add_constraint(PrimaryKeyConstraint(f"PK_{name}", relation, refs))
    return relation


def _read_foreign_key(
    fk_elem: ET.Element, relations: dict[str, Relation], database: Database
) -> None:
    fk_name = fk_elem.get("name")
    if fk_name is None:
        _warn("ForeignKey name missing.")
        return
    parent_elem = fk_elem.find("Parent")
    child_elem = fk_elem.find("Child")
    if parent_elem is None or child_elem is None:
        _warn(f"ForeignKey {fk_name} missing Parent or Child element.")
        return
    parent_name = parent_elem.get("table")
    parent_col = parent_elem.get("column")
    child_name = child_elem.get("table")
    child_col = child_elem.get("column")
    if None in (parent_name, parent_col, child_name, child_col):
        _warn(f"ForeignKey {fk_name} missing table or column attributes.")
        return
    parent = relations.get(parent_name)
    child = relations.get(child_name)
    if parent is None or child is None:
        _warn(f"ForeignKey {fk_name} references unknown table.")
        return
    parent_attr = parent.get_attribute(parent_col)
    child_attr = child.get_attribute(child_col)
    if parent_attr is None or child_attr is None:
        _warn(f"ForeignKey {fk_name} references unknown column.")
        return
    database.add_constraint(
        ForeignKeyConstraint(fk_name, parent, parent_attr, child, child_attr)
    )


def _read_unique_key(
    uc_elem: ET.Element, relations: dict[str, Relation], database: Database
) -> None:
    uc_name = uc_elem.get("name")
    rel_name = uc_elem.get("relation")
    if uc_name is None or rel_name is None:
        _warn("UniqueConstraint missing name or relation.")
        return
    relation = relations.get(rel_name)
    if relation is None:
        _warn(f"UniqueConstraint {uc_name} references unknown relation.")
        return
    refs = [
        ref_name
        for ref in _children(uc_elem, "AttributeRef")
        if (ref_name := ref.get("name")) is not None
    ]
    if not refs:
        _warn(f"UniqueConstraint {uc_name} has no attribute references.")
        return
    database.add_constraint(UniqueKeyConstraint(uc_name, relation, refs))


def parse_install_schema(path: str | Path) -> Database:
    """Read a schema document as it is given for creating a database.

    Incomplete relations, keys and views are reported on stderr and skipped.
    """
    path = Path(path)
    try:
        tree = ET.parse(path)
    except (OSError, ET.ParseError) as exc:
        raise SchemaError(f"Failed to load XML file: {path}") from exc

    db_elem = tree.getroot().find("Database")
    if db_elem is None:
        raise SchemaError("Invalid XML: No <Database> element found.")

    database = Database(xml_path=str(path))
    db_name = db_elem.get("name")
    if db_name is not None:
        database.name = db_name
    else:
        _warn("Database name attribute missing.")

    relations: dict[str, Relation] = {}
    for rel_elem in _children(db_elem.find("Relations"), "Relation"):
        rel_name = rel_elem.get("name")
        if rel_name is None:
            _warn("Relation name missing.")
            continue
        relation = _read_relation(rel_elem, rel_name, database)
        relations[rel_name] = relation
        database.add_relation(relation)

    for fk_elem in _children(db_elem.find("ForeignKeys"), "ForeignKey"):
        _read_foreign_key(fk_elem, relations, database)

    for uc_elem in _children(db_elem.find("UniqueConstraints"), "UniqueConstraint"):
        _read_unique_key(uc_elem, relations, database)

    for view_elem in _children(db_elem.find("Views"), "View"):
        view_name = view_elem.get("name")
        text = view_elem.text
        if view_name is None or not text:
            _warn("View missing name or query.")
            continue
        try:
            query = parse_query(text)
        except ValueError as exc:
            raise SchemaError(f"View {view_name!r}: {exc}") from exc
        database.add_view(View(view_name, query))

    return database


def install_schema(xml_path: str | Path, root: str | Path) -> Database:
    """Read ``xml_path`` and copy it to ``root/<name>/<name>_schema.xml``."""
    database = parse_install_schema(xml_path)
    if not database.name:
        raise SchemaError("Cannot copy schema file: Database name is empty.")
    target_dir = Path(root) / database.name
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / f"{database.name}_schema.xml"
    shutil.copyfile(xml_path, target)
    return database