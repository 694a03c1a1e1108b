"""Calendar dates written as DD/MM/YYYY."""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass
from typing import ClassVar

_DATE_RE = re.compile(r"\s*(\d{1,2})/\s*(\d{1,2})/\s*(\d{1,4})")
_LAYOUT = struct.Struct("<HHH")


@dataclass(frozen=True)
class DateDDMMYYYY:
    """A day, month and year; the default is all zeros."""

    day: int = 0
    month: int = 0
    year: int = 0

    SIZE: ClassVar[int] = _LAYOUT.size

    @classmethod
    def parse(cls, text: str) -> DateDDMMYYYY:
        """Parse ``DD/MM/YYYY``; anything after the year is ignored."""
        match = _DATE_RE.match(text)
        if match is None:
            raise ValueError("Invalid date format. Expected DD/MM/YYYY.")
        day, month, year = (int(part) for part in match.groups())
        return cls(day, month, year)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def to_bytes(self) -> bytes:
        """Pack as three little-endian unsigned 16-bit numbers: day, month, year."""
        return _LAYOUT.pack(self.day, self.month, self.year)

    @classmethod
    def from_bytes(cls, data: bytes) -> DateDDMMYYYY:
        """Unpack what :meth:`to_bytes` wrote."""
        if len(data) != cls.SIZE:
            raise ValueError(f"expected {cls.SIZE} bytes, got {len(data)}")
        return cls(*_LAYOUT.unpack(data))