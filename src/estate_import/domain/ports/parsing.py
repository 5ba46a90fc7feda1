"""Port for turning raw export markup into a field table."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from estate_import.domain.export import FieldTable


class ExportParser(Protocol):
    """Parse the whole document; raise ``ParseError`` on malformed markup."""

    def __call__(self, source: str) -> FieldTable: ...
