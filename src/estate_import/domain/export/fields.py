"""Flat, typed field table built from an export document.

Export documents are schema-less: hundreds of human-readable field names, each
holding a string, boolean, number or date, repeated whenever the source has
more than one value. ``FieldTable`` keeps those values in source order and
centralises the coercion and "empty" rules so callers only ever see either a
usable value or ``None``.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date
from enum import StrEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

log = logging.getLogger(__name__)

type FieldScalar = bool | float | str
type FieldValue = FieldScalar | list[FieldScalar]

EMPTY_MARKERS: Final = frozenset({"", "None", "null", "undefined"})

_DAY_MONTH_YEAR: Final = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
# miscounted repeat groups leak their counters ("2") into name fields
_SHORT_DIGITS: Final = re.compile(r"^\d{1,3}$")


class ParseError(ValueError):
    """Raised when export markup is structurally invalid."""


class FieldKind(StrEnum):
    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"
    DATE = "date"


def render_text(value: FieldScalar) -> str:
    """Render a typed value the way it appeared in the export."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_empty(value: FieldScalar | None) -> str | None:
    """Return stripped text, or None for blanks, null markers and counter artifacts."""
    if value is None:
        return None
    text = render_text(value).strip()
    if text in EMPTY_MARKERS:
        return None
    if _SHORT_DIGITS.match(text):
        return None
    return text


def parse_export_date(text: str) -> str:
    """Convert ``D/M/YYYY`` to ISO ``YYYY-MM-DD``; anything else passes through.

    The first group is always read as the day. A first group above 12 can only be
    a day; at or below 12 the export convention is still day-first, so US-style
    dates come out with month and day swapped.
    """
    match = _DAY_MONTH_YEAR.match(text.strip())
    if match is None:
        return text
    day, month, year = match.groups()
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def parse_iso_date(text: str | None) -> date | None:
    """Return a ``date`` for a valid ISO string, else None."""
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        log.debug("Ignoring unusable date value %r", text)
        return None


def coerce_value(kind: FieldKind, text: str) -> FieldScalar:
    match kind:
        case FieldKind.BOOLEAN:
            return text.strip().lower() == "true"
        case FieldKind.NUMBER:
            try:
                number = float(text.strip())
            except ValueError:
                return 0.0
            # NaN and infinities do not survive the JSON session round trip
            return number if math.isfinite(number) else 0.0
        case FieldKind.DATE:
            return parse_export_date(text)
        case FieldKind.STRING:
            return text


def _same_kind(left: FieldScalar, right: FieldScalar) -> bool:
    return type(left) is type(right)


class FieldTable:
    """Ordered mapping from field name to a scalar or a homogeneous list."""

    __slots__ = ("_fields",)

    def __init__(self) -> None:
        self._fields: dict[str, FieldScalar | list[FieldScalar]] = {}

    @classmethod
    def from_dict(cls, data: Mapping[str, FieldValue]) -> FieldTable:
        table = cls()
        for name, value in data.items():
            items = value if isinstance(value, list) else [value]
            for item in items:
                table.add(name, float(item) if type(item) is int else item)
        return table

    def add(self, name: str, value: FieldScalar) -> None:
        """Append ``value``; a repeated name turns the entry into a list."""
        existing = self._fields.get(name)
        if existing is None:
            self._fields[name] = value
            return
        first = existing[0] if isinstance(existing, list) else existing
        if not _same_kind(first, value):
            log.warning(
                "Dropping %s value for field %r holding %s values",
                type(value).__name__,
                name,
                type(first).__name__,
            )
            return
        if isinstance(existing, list):
            existing.append(value)
        else:
            self._fields[name] = [existing, value]

    def raw(self, name: str) -> FieldValue | None:
        value = self._fields.get(name)
        return list(value) if isinstance(value, list) else value

    def values(self, name: str) -> list[FieldScalar]:
        value = self._fields.get(name)
        if value is None:
            return []
        return list(value) if isinstance(value, list) else [value]

    def text(self, name: str) -> str | None:
        """First normalised value of ``name``."""
        for value in self.values(name):
            normalized = normalize_empty(value)
            if normalized is not None:
                return normalized
        return None

    def texts(self, name: str) -> list[str | None]:
        """Normalised values position by position, for pairing parallel fields."""
        return [normalize_empty(value) for value in self.values(name)]

    def flag(self, name: str) -> bool:
        return self._fields.get(name) is True

    def number(self, name: str) -> float | None:
        for value in self.values(name):
            if isinstance(value, float):
                return value
        return None

    def with_prefix(self, *prefixes: str) -> dict[str, FieldValue]:
        return {
            name: (list(value) if isinstance(value, list) else value)
            for name, value in self._fields.items()
            if name.startswith(prefixes)
        }

    def to_dict(self) -> dict[str, FieldValue]:
        return {
            name: (list(value) if isinstance(value, list) else value)
            for name, value in self._fields.items()
        }

    def names(self) -> list[str]:
        return list(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __repr__(self) -> str:
        return f"FieldTable({len(self._fields)} fields)"
