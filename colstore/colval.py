"""Typed cell values of a column."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from colstore.dates import DateDDMMYYYY

if TYPE_CHECKING:
    from colstore.schema import Attribute, Database, Relation

INT_TYPES = frozenset({"integer", "int64_t"})
FLOAT_TYPES = frozenset({"decimal", "double"})
DATE_TYPES = frozenset({"date"})
STRING_TYPES = frozenset({"string"})

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_NULL_HASH = hash(("colval", "null"))


def _parse_int(text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"not an integer: {text!r}")
    value = int(match.group(1))
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _parse_float(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    return float(match.group(1))


@dataclass(eq=False)
class ColVal:
    """One value of one attribute; ``value`` is int, float, str or a date."""

    attribute: Attribute | None
    value: Any = None
    is_null: bool = False
    database: Database | None = None
    relation: Relation | None = None

    @classmethod
    def from_string(cls, attribute: Attribute, text: str) -> ColVal:
        """Convert ``text`` to the attribute's type."""
        attr_type = attribute.type
        if attr_type in INT_TYPES:
            value: Any = _parse_int(text)
        elif attr_type in FLOAT_TYPES:
            value = _parse_float(text)
        elif attr_type in DATE_TYPES:
            value = DateDDMMYYYY.parse(text)
        else:
            value = text
        return cls(attribute, value)

    @classmethod
    def null(cls, attribute: Attribute | None) -> ColVal:
        """Return a null value of ``attribute``."""
        return cls(attribute, None, is_null=True)

    @property
    def _type(self) -> str | None:
        return self.attribute.type if self.attribute is not None else None

    def set_value(self, value: Any) -> None:
        """Replace the value; it must suit the attribute's type."""
        attr_type = self._type
        if attr_type in STRING_TYPES and isinstance(value, str):
            self.value = value
        elif attr_type in INT_TYPES and isinstance(value, int) and not isinstance(value, bool):
            self.value = value
        elif (
            attr_type in FLOAT_TYPES
            and isinstance(value, (int, float))
            and not isinstance(value, bool)
        ):
            self.value = float(value)
        elif attr_type in DATE_TYPES and isinstance(value, DateDDMMYYYY):
            self.value = value
        else:
            raise TypeError(
                f"value {value!r} does not suit attribute type {attr_type!r}"
            )

    def path(self, root: str | Path) -> Path:
        """Return the column file ``root/<database>/<relation>/<attribute>.dat``."""
        relation = self.relation
        database = self.database
        if database is None and relation is not None:
            database = relation.database
        if self.attribute is None or relation is None or database is None:
            raise ValueError("value is not bound to a database, relation and attribute")
        return Path(root) / database.name / relation.name / f"{self.attribute.name}.dat"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColVal):
            return NotImplemented
        if self.is_null or other.is_null:
            return self.is_null and other.is_null
        if self._type != other._type:
            return False
        return self.value == other.value

    def __hash__(self) -> int:
        if self.is_null:
            return _NULL_HASH
        return hash((self._type, self.value))