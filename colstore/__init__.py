"""Column-store building blocks: XML schemas, typed values and soft-deleted column files."""

__version__ = "0.1.0"
__all__ = [
    "colval",
    "constraints",
    "dates",
    "deleter",
    "display",
    "install",
    "loader",
    "query",
    "rows",
    "schema",
    "storage",
]