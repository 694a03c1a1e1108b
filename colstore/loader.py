"""Reading a database schema from its XML description."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from pathlib import Path

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

ROOT_TAG = "ColumnStoreSchema"
_INT_PREFIX = re.compile(r"\s*[+-]?\d+")


class SchemaError(ValueError):
    """Raised when a schema document cannot be read."""


def _xml_bool(value: str | None, default: bool = False) -> bool:
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


def _load_relation(rel_elem: ET.Element, name: str, database: Database) -> Relation:
    relation = Relation(name, database)
    for attr_elem in _children(rel_elem.find("Attributes"), "Attribute"):
        attr_name = attr_elem.get("name")
        attr_type = attr_elem.get("type")
        if attr_name is None or attr_type is None:
            continue
        relation.add_attribute(
            Attribute(
                attr_name,
                attr_type,
                nullable=_xml_bool(attr_elem.get("nullable")),
                unique=_xml_bool(attr_elem.get("unique")),
                database_name=database.name,
                relation_name=name,
            )
        )

    pk_elem = rel_elem.find("PrimaryKey")
    if pk_elem is not None:
        refs: list[str] = []
        key_attributes: list[Attribute] = []
        for ref in _children(pk_elem, "AttributeRef"):
            ref_name = ref.get("name")
            if ref_name is None:
                continue
            refs.append(ref_name)
            attribute = relation.get_attribute(ref_name)
            if attribute is not None:
                attribute.is_pk = True
                key_attributes.append(attribute)
        if key_attributes:
            relation.primary_key = PrimaryKeyConstraint(
                f"PK_{name}", relation, list(refs), key_attributes[0]
            )
            constraint = PrimaryKeyConstraint(
                f"PKC_{name}", relation, list(refs), key_attributes[0]
            )
            database.add_constraint(constraint)
            relation.primary_keys[constraint.name] = constraint
    return relation


def _load_foreign_key(
    fk_elem: ET.Element, relations: dict[str, Relation], database: Database
) -> None:
    fk_name = fk_elem.get("name")
    parent_elem = fk_elem.find("Parent")
    child_elem = fk_elem.find("Child")
    if fk_name is None or parent_elem is None or child_elem is None:
        return
    parent_name = parent_elem.get("table")
    parent_col = parent_elem.get("column")
    child_name = child_elem.get("table")
    child_col = child_elem.get("column")
    if None in (parent_name, parent_col, child_name, child_col):
        return
    parent = relations.get(parent_name)
    child = relations.get(child_name)
    if parent is None or child is None:
        return
    parent_attr = parent.get_attribute(parent_col)
    child_attr = child.get_attribute(child_col)
    if parent_attr is None or child_attr is None:
        return

    # The referencing column is flagged as a key, the referenced one as foreign.
    child_attr.is_pk = True
    parent_attr.is_fk = True

    constraint = ForeignKeyConstraint(
        fk_name, parent, parent_attr, child, child_attr, database_name=database.name
    )
    database.add_constraint(constraint)
    child.foreign_keys[fk_name] = constraint
    parent.foreign_keys[fk_name] = constraint


def _load_unique_key(
    uc_elem: ET.Element, relations: dict[str, Relation], database: Database
) -> None:
    uc_name = uc_elem.get("name")
    rel_name = uc_elem.get("relation")
    if uc_name is None or rel_name is None:
        return
    relation = relations.get(rel_name)
    if relation is None:
        return
    refs: list[str] = []
    for ref in _children(uc_elem, "AttributeRef"):
        ref_name = ref.get("name")
        if ref_name is None:
            continue
        refs.append(ref_name)
        attribute = relation.get_attribute(ref_name)
        if attribute is not None:
            attribute.unique = True
    if refs:
        constraint = UniqueKeyConstraint(
            uc_name, relation, refs, relation.get_attribute(refs[0])
        )
        database.add_constraint(constraint)
        relation.unique_keys[uc_name] = constraint


def load_schema(path: str | Path) -> Database:
    """Read a schema document and return the database it describes.

    Relations, attributes, keys or views that lack a required name are skipped.
    """
    path = Path(path)
    try:
        tree = ET.parse(path)
    except (OSError, ET.ParseError) as exc:
        raise SchemaError(f"Failed to load XML file: {path}") from exc

    root = tree.getroot()
    if root.tag != ROOT_TAG:
        raise SchemaError("Invalid XML: Missing or incorrect root element")
    db_elem = root.find("Database")
    if db_elem is None:
        raise SchemaError("Missing Database element")

    database = Database(name=db_elem.get("name", "default"), xml_path=str(path))
    relations: dict[str, Relation] = {}

    for rel_elem in _children(db_elem.find("Relations"), "Relation"):
        rel_name = rel_elem.get("name")
        if rel_name is None:
            continue
        relation = _load_relation(rel_elem, rel_name, database)
        relations[rel_name] = relation
        database.add_relation(relation)

    for fk_elem in _children(db_elem.find("ForeignKeys"), "ForeignKey"):
        _load_foreign_key(fk_elem, relations, database)

    for uc_elem in _children(db_elem.find("UniqueConstraints"), "UniqueConstraint"):
        _load_unique_key(uc_elem, relations, database)

    for view_elem in _children(db_elem.find("Views"), "View"):
        view_name = view_elem.get("name")
        text = view_elem.text
        if view_name is None or not text:
            continue
        try:
            query = parse_query(text)
        except ValueError as exc:
            raise SchemaError(f"View {view_name!r}: {exc}") from exc
        database.add_view(View(view_name, query))

    return database