"""Parse sample exports into domain views."""

from __future__ import annotations

from typing import TYPE_CHECKING

from estate_import.adapters.wealthcounsel import parse_field_table
from estate_import.domain.export import extract_export

if TYPE_CHECKING:
    from estate_import.domain.export import ParsedExport


def parsed(source: str) -> ParsedExport:
    return extract_export(parse_field_table(source))
