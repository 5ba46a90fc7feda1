"""Parse WealthCounsel XML exports into a field table.

Exports look like::

    <wc:set xmlns:wc="http://counsel.com">
      <wc:data key="Client name">
        <wc:repeat><wc:string>Sandra Lynn Jenkins</wc:string></wc:repeat>
      </wc:data>
    </wc:set>

A ``data`` element may hold several ``repeat`` elements and a ``repeat`` may
hold several value nodes; every value is appended to the field in document
order. Value nodes sometimes carry attributes (``type``, ``id``, ``ref``,
``location``); only their text matters.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final
from xml.etree import ElementTree as ET

from estate_import.domain.export import FieldKind, FieldTable, ParseError, coerce_value

if TYPE_CHECKING:
    from estate_import.domain.ports import ExportParser

log = logging.getLogger(__name__)

NAMESPACE: Final = "http://counsel.com"
ROOT_TAG: Final = "set"
DATA_TAG: Final = "data"
REPEAT_TAG: Final = "repeat"
KEY_ATTRIBUTE: Final = "key"

_VALUE_KINDS: Final[dict[str, FieldKind]] = {kind.value: kind for kind in FieldKind}


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag


def parse_field_table(source: str) -> FieldTable:
    """Build a ``FieldTable`` from export markup; raise ``ParseError`` when malformed."""

    try:
        root = ET.fromstring(source)
    except ET.ParseError as exc:
        raise ParseError(f"Invalid export markup: {exc}") from exc

    if _local_name(root.tag) != ROOT_TAG:
        raise ParseError(f"Unexpected root element {_local_name(root.tag)!r}, expected 'set'")

    table = FieldTable()
    skipped = 0
    for element in root:
        if _local_name(element.tag) != DATA_TAG:
            continue
        key = element.get(KEY_ATTRIBUTE)
        repeats = [child for child in element if _local_name(child.tag) == REPEAT_TAG]
        if not key or not repeats:
            skipped += 1
            continue
        for repeat in repeats:
            _read_repeat(table, key, repeat)

    if skipped:
        log.debug("Skipped %d data elements without a key or values", skipped)
    log.debug("Parsed %d fields", len(table))
    return table


def _read_repeat(table: FieldTable, key: str, repeat: ET.Element) -> None:
    for node in repeat:
        kind = _VALUE_KINDS.get(_local_name(node.tag))
        if kind is None:
            log.debug("Ignoring %r node in field %r", _local_name(node.tag), key)
            continue
        text = "".join(node.itertext())
        table.add(key, coerce_value(kind, text))


class WealthCounselParser:
    """Callable form of ``parse_field_table`` for the parsing port."""

    def __call__(self, source: str) -> FieldTable:
        return parse_field_table(source)


if TYPE_CHECKING:
    _parser_check: ExportParser = WealthCounselParser()
