"""Schema objects: attributes, relations, key constraints, views and databases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from colstore.query import Query


class RelationNotFoundError(KeyError):
    """Raised when a database holds no relation of the requested name."""


@dataclass(eq=False)
class Attribute:
    """A column of a relation."""

    name: str
    type: str
    nullable: bool = True
    unique: bool = False
    is_pk: bool = False
    is_fk: bool = False
    database_name: str = ""
    relation_name: str = ""


@dataclass(eq=False)
class PrimaryKeyConstraint:
    """Primary key of a relation; ``attribute`` is its first key column."""

    name: str
    relation: Relation | None
    attribute_refs: list[str] = field(default_factory=list)
    attribute: Attribute | None = None


@dataclass(eq=False)
class ForeignKeyConstraint:
    """A reference from a child column to a parent column."""

    name: str
    parent_table: Relation
    parent_column: Attribute
    child_table: Relation
    child_column: Attribute
    database_name: str = ""


@dataclass(eq=False)
class UniqueKeyConstraint:
    """A uniqueness rule over one or more columns of a relation."""

    name: str
    relation: Relation | None
    attribute_refs: list[str] = field(default_factory=list)
    attribute: Attribute | None = None


Constraint = Union[PrimaryKeyConstraint, ForeignKeyConstraint, UniqueKeyConstraint]


@dataclass(eq=False)
class View:
    """A named stored query."""

    name: str
    query: Query | None = None


@dataclass(eq=False)
class Relation:
    """A table: attributes are kept ordered by name."""

    name: str
    database: Database | None = None
    attributes: dict[str, Attribute] = field(default_factory=dict)
    primary_key: PrimaryKeyConstraint | None = None
    primary_keys: dict[str, PrimaryKeyConstraint] = field(default_factory=dict)
    foreign_keys: dict[str, ForeignKeyConstraint] = field(default_factory=dict)
    unique_keys: dict[str, UniqueKeyConstraint] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.attributes = dict(sorted(self.attributes.items()))

    def get_attribute(self, name: str) -> Attribute | None:
        """Return the attribute called ``name``, or None."""
        return self.attributes.get(name)

    def add_attribute(self, attribute: Attribute) -> None:
        """Add an attribute, keeping the name order."""
        if not attribute.relation_name:
            attribute.relation_name = self.name
        if not attribute.database_name and self.database is not None:
            attribute.database_name = self.database.name
        self.attributes[attribute.name] = attribute
        self.attributes = dict(sorted(self.attributes.items()))

    def primary_key_attribute(self) -> Attribute | None:
        """Return the primary key's column, or None when there is no key."""
        return self.primary_key.attribute if self.primary_key is not None else None


@dataclass(eq=False)
class Database:
    """A named collection of relations, constraints and views."""

    name: str = ""
    xml_path: str = ""
    relations: dict[str, Relation] = field(default_factory=dict)
    constraints: dict[str, Constraint] = field(default_factory=dict)
    primary_keys: list[PrimaryKeyConstraint] = field(default_factory=list)
    foreign_keys: list[ForeignKeyConstraint] = field(default_factory=list)
    unique_keys: list[UniqueKeyConstraint] = field(default_factory=list)
    views: dict[str, View] = field(default_factory=dict)

    def add_relation(self, relation: Relation) -> None:
        """Add a relation and make this database its owner."""
        relation.database = self
        self.relations[relation.name] = relation
        self.relations = dict(sorted(self.relations.items()))

    def get_relation(self, name: str) -> Relation:
        """Return the relation called ``name``."""
        try:
            return self.relations[name]
        except KeyError:
            raise RelationNotFoundError(name) from None

    def add_constraint(self, constraint: Constraint) -> None:
        """Register a constraint by name and under its kind."""
        self.constraints[constraint.name] = constraint
        if isinstance(constraint, PrimaryKeyConstraint):
            self.primary_keys.append(constraint)
        elif isinstance(constraint, ForeignKeyConstraint):
            self.foreign_keys.append(constraint)
        elif isinstance(constraint, UniqueKeyConstraint):
            self.unique_keys.append(constraint)
        else:
            raise TypeError(f"not a constraint: {constraint!r}")

    def add_view(self, view: View) -> None:
        """Register a view by name."""
        self.views[view.name] = view