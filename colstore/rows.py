"""Rows of typed cell values and in-memory tables of rows."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Sequence, TextIO

from colstore.colval import ColVal

if TYPE_CHECKING:
    from colstore.schema import Relation


def _cell_text(colval: ColVal) -> str:
    if colval.is_null or colval.value is None:
        return ""
    return str(colval.value)


@dataclass(eq=False)
class Row:
    """One tuple of a relation: cell values keyed by attribute name, in name order."""

    relation: Relation | None = None
    colvals: dict[str, ColVal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.colvals = dict(sorted(self.colvals.items()))

    @classmethod
    def from_strings(cls, values: Sequence[str], relation: Relation) -> Row:
        """Build a row from text values given in the relation's attribute order."""
        attributes = list(relation.attributes.items())
        if len(values) < len(attributes):
            raise ValueError(
                f"expected {len(attributes)} values for relation "
                f"{relation.name!r}, got {len(values)}"
            )
        colvals = {
            name: ColVal.from_string(attribute, text)
            for (name, attribute), text in zip(attributes, values)
        }
        return cls(relation, colvals)

    def add(self, colval: ColVal) -> None:
        """Store ``colval`` under its attribute's name."""
        if colval.attribute is None:
            raise ValueError("value has no attribute")
        self.set(colval.attribute.name, colval)

    def get(self, name: str) -> ColVal | None:
        """Return the value of attribute ``name``, or None."""
        return self.colvals.get(name)

    def set(self, name: str, colval: ColVal) -> None:
        """Store ``colval`` under ``name``."""
        self.colvals[name] = colval
        self.colvals = dict(sorted(self.colvals.items()))

    def remove(self, name: str) -> None:
        """Drop the value of attribute ``name`` if there is one."""
        self.colvals.pop(name, None)

    def clear(self) -> None:
        """Drop every value."""
        self.colvals.clear()

    def __len__(self) -> int:
        return len(self.colvals)

    def __str__(self) -> str:
        return "".join(f"{_cell_text(colval)} | " for colval in self.colvals.values())


def _check_index(index: int, size: int) -> None:
    if not 0 <= index < size:
        raise IndexError("Index out of range")


@dataclass(eq=False)
class Table:
    """An ordered list of rows belonging to one relation."""

    relation: Relation | None
    rows: list[Row] = field(default_factory=list)
    total_rows_in_relation: int = 0

    def add_row(self, row: Row) -> None:
        """Append ``row``."""
        self.rows.append(row)

    def __getitem__(self, index: int) -> Row:
        _check_index(index, len(self.rows))
        return self.rows[index]

    def __setitem__(self, index: int, row: Row) -> None:
        _check_index(index, len(self.rows))
        self.rows[index] = row

    def __delitem__(self, index: int) -> None:
        _check_index(index, len(self.rows))
        del self.rows[index]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def clear(self) -> None:
        """Drop every row."""
        self.rows.clear()

    def __str__(self) -> str:
        return "".join(f"{row}\n" for row in self.rows)

    def print_table(self, file: TextIO | None = None) -> None:
        """Write a title line and one line per row to ``file`` (stdout by default)."""
        out = file if file is not None else sys.stdout
        name = self.relation.name if self.relation is not None else ""
        out.write(f"Table: {name}\n")
        for row in self.rows:
            out.write(f"{row}\n")