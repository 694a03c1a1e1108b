"""Parsing of simple SELECT ... FROM ... [WHERE ...] [ORDER BY ...] queries."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_QUERY_RE = re.compile(
    r"select\s+(?P<cols>.*?)\s+from\s+(?P<rels>.*?)"
    r"(?:\s+where\s+(?P<conds>.*?))?"
    r"(?:\s+order\s+by\s+(?P<order>.*?))?\s*",
    re.IGNORECASE | re.DOTALL,
)


def split_items(text: str, delimiter: str = ",") -> list[str]:
    """Split on ``delimiter`` and drop all whitespace from each item.

    Empty items in the middle are kept; one empty trailing item is not.
    """
    if not text:
        return []
    parts = text.split(delimiter)
    if parts[-1] == "":
        parts.pop()
    return ["".join(ch for ch in part if not ch.isspace()) for part in parts]


@dataclass
class Query:
    """A parsed query; ``querystring`` holds the query in lower case."""

    querystring: str = ""
    result_cols: list[str] = field(default_factory=list)
    conditions: list[str] = field(default_factory=list)
    relations: list[str] = field(default_factory=list)
    order_by: list[str] = field(default_factory=list)

    @classmethod
    def from_string(cls, text: str) -> Query:
        """Parse ``text`` into a query."""
        return parse_query(text)


def parse_query(text: str) -> Query:
    """Parse a query string; keywords are case-insensitive."""
    if not text.lower().startswith("select"):
        raise ValueError("Invalid query format. Must start with SELECT.")
    match = _QUERY_RE.fullmatch(text)
    if match is None:
        raise ValueError("Invalid query format. Expected SELECT ... FROM ....")
    return Query(
        querystring=text.lower(),
        result_cols=split_items(match["cols"]),
        relations=split_items(match["rels"]),
        conditions=split_items(match["conds"] or ""),
        order_by=split_items(match["order"] or ""),
    )