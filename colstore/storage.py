"""Column files on disk: one record per row, each a deleted flag and a value.

A record is a single flag byte (0 live, anything else deleted) followed by
the value: integers as little-endian signed 64-bit numbers, decimals as
little-endian doubles, dates as three little-endian unsigned 16-bit numbers,
and strings (the default for any other type) as a little-endian unsigned
64-bit length followed by that many bytes.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO, Iterator

from colstore.colval import DATE_TYPES, FLOAT_TYPES, INT_TYPES, ColVal
from colstore.dates import DateDDMMYYYY

if TYPE_CHECKING:
    from colstore.schema import Attribute, Relation

_INT = struct.Struct("<q")
_FLOAT = struct.Struct("<d")
_LENGTH = struct.Struct("<Q")
_FLAG_SIZE = 1


@dataclass(frozen=True)
class Record:
    """One row of a column file: where it starts, its flag and its value."""

    offset: int
    deleted: bool
    value: Any


def column_path(relation: Relation, attribute: Attribute | str, root: str | Path) -> Path:
    """Return ``root/<database>/<relation>/<attribute>.dat``."""
    if relation.database is None:
        raise ValueError(f"relation {relation.name!r} belongs to no database")
    name = attribute if isinstance(attribute, str) else attribute.name
    return Path(root) / relation.database.name / relation.name / f"{name}.dat"


def _unwrap(value: Any) -> Any:
    return value.value if isinstance(value, ColVal) else value


def _encode(attr_type: str, value: Any) -> bytes:
    value = _unwrap(value)
    if attr_type in INT_TYPES:
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"integer column needs an int, got {value!r}")
        try:
            return _INT.pack(value)
        except struct.error as exc:
            raise ValueError(f"integer out of range: {value!r}") from exc
    if attr_type in FLOAT_TYPES:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise TypeError(f"decimal column needs a number, got {value!r}")
        return _FLOAT.pack(float(value))
    if attr_type in DATE_TYPES:
        if not isinstance(value, DateDDMMYYYY):
            raise TypeError(f"date column needs a date, got {value!r}")
        return value.to_bytes()
    if not isinstance(value, str):
        raise TypeError(f"string column needs a str, got {value!r}")
    data = value.encode("utf-8", errors="surrogateescape")
    return _LENGTH.pack(len(data)) + data


def _read_exact(stream: BinaryIO, size: int) -> bytes | None:
    data = stream.read(size)
    return data if len(data) == size else None


def _read_payload(stream: BinaryIO, attr_type: str) -> tuple[bool, Any]:
    """Read one value; the first item is False when the file ends too soon."""
    if attr_type in INT_TYPES:
        data = _read_exact(stream, _INT.size)
        return (False, None) if data is None else (True, _INT.unpack(data)[0])
    if attr_type in FLOAT_TYPES:
        data = _read_exact(stream, _FLOAT.size)
        return (False, None) if data is None else (True, _FLOAT.unpack(data)[0])
    if attr_type in DATE_TYPES:
        data = _read_exact(stream, DateDDMMYYYY.SIZE)
        return (False, None) if data is None else (True, DateDDMMYYYY.from_bytes(data))
    head = _read_exact(stream, _LENGTH.size)
    if head is None:
        return False, None
    (length,) = _LENGTH.unpack(head)
    data = _read_exact(stream, length)
    if data is None:
        return False, None
    return True, data.decode("utf-8", errors="surrogateescape")


def read_records(path: str | Path, attr_type: str) -> Iterator[Record]:
    """Yield every complete record of a column file; a cut-off tail is ignored."""
    with open(path, "rb") as stream:
        while True:
            offset = stream.tell()
            flag = stream.read(_FLAG_SIZE)
            if len(flag) != _FLAG_SIZE:
                return
            complete, value = _read_payload(stream, attr_type)
            if not complete:
                return
            yield Record(offset, flag[0] != 0, value)


def append_record(
    path: str | Path, attr_type: str, value: Any, deleted: bool = False
) -> None:
    """Append one record holding ``value`` to a column file."""
    payload = _encode(attr_type, value)
    with open(path, "ab") as stream:
        stream.write(bytes([1 if deleted else 0]) + payload)


def find_row(
    path: str | Path, attr_type: str, key: Any, deleted: bool = False
) -> int | None:
    """Return the index of the first row equal to ``key`` whose flag is ``deleted``."""
    key = _unwrap(key)
    for index, record in enumerate(read_records(path, attr_type)):
        if record.deleted == deleted and record.value == key:
            return index
    return None


def set_deleted_flag(path: str | Path, attr_type: str, row: int, flag: bool) -> None:
    """Overwrite the deleted flag of row ``row``."""
    records = list(read_records(path, attr_type))
    if not 0 <= row < len(records):
        raise IndexError(f"row {row} out of range for {path}")
    with open(path, "r+b") as stream:
        stream.seek(records[row].offset)
        stream.write(bytes([1 if flag else 0]))