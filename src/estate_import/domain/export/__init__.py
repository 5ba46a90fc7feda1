"""Field table and structured view of a document-assembly export."""

from __future__ import annotations

from .extract import (
    DocumentOwner,
    ExportBeneficiary,
    ExportPerson,
    ExportTrust,
    ExportWill,
    Fiduciaries,
    FiduciaryMention,
    IndividualFiduciaries,
    ParsedExport,
    extract_export,
)
from .fields import (
    FieldKind,
    FieldScalar,
    FieldTable,
    FieldValue,
    ParseError,
    coerce_value,
    normalize_empty,
    parse_export_date,
    parse_iso_date,
)
from .summary import ExportSummary, FiduciaryRow, fiduciary_rows, role_label, summarize_export

__all__ = [
    "DocumentOwner",
    "ExportBeneficiary",
    "ExportPerson",
    "ExportSummary",
    "ExportTrust",
    "ExportWill",
    "FieldKind",
    "FieldScalar",
    "FieldTable",
    "FieldValue",
    "Fiduciaries",
    "FiduciaryMention",
    "FiduciaryRow",
    "IndividualFiduciaries",
    "ParseError",
    "ParsedExport",
    "coerce_value",
    "extract_export",
    "fiduciary_rows",
    "normalize_empty",
    "parse_export_date",
    "parse_iso_date",
    "role_label",
    "summarize_export",
]
