from __future__ import annotations

from estate_import.domain.export import FiduciaryRow, fiduciary_rows, role_label, summarize_export
from estate_import.domain.model import RoleType
from tests.fixtures.wealthcounsel import (
    EMPTY_XML,
    JOINT_TRUST_XML,
    MULTIPLE_CHILDREN_XML,
    SINGLE_CLIENT_WILL_XML,
)
from tests.helpers.exports import parsed


def test_joint_trust_summary() -> None:
    export = parsed(JOINT_TRUST_XML)

    summary = summarize_export(export)

    assert summary.client_summary == (
        "Matthew James Christensen & Desiree Marie Christensen (1 child)"
    )
    assert summary.plan_summary == "Christensen Legacy Family Trust (Joint)"
    assert summary.field_count == len(export.fields)
    assert summary.role_counts == {
        "trustees": 1,
        "successor_trustees": 1,
        "trust_protectors": 1,
        "client_fiduciaries": 3,
        "spouse_fiduciaries": 2,
        "beneficiaries": 1,
        "children": 1,
    }


def test_fiduciary_summary_counts_people_once() -> None:
    summary = summarize_export(parsed(JOINT_TRUST_XML))

    assert summary.fiduciaries.total_role_assignments == 8
    assert summary.fiduciaries.unique_people == 4
    assert summary.fiduciaries.role_types == [
        "Trustee",
        "Successor Trustee",
        "Trust Protector",
        "Financial Agent",
        "Healthcare Agent",
        "Guardian",
    ]


def test_will_based_summary() -> None:
    summary = summarize_export(parsed(SINGLE_CLIENT_WILL_XML))

    assert summary.client_summary == "Sandra Lynn Jenkins"
    assert summary.plan_summary == "Will-Based Plan"


def test_children_are_pluralised() -> None:
    summary = summarize_export(parsed(MULTIPLE_CHILDREN_XML))

    assert summary.client_summary == "Jane Smith (3 children)"


def test_empty_export_summary() -> None:
    summary = summarize_export(parsed(EMPTY_XML))

    assert summary.client_summary == "Unknown client"
    assert summary.field_count == 0
    assert set(summary.role_counts.values()) == {0}


def test_fiduciary_rows() -> None:
    rows = fiduciary_rows(parsed(JOINT_TRUST_XML))

    assert rows[0] == FiduciaryRow(
        name="Matthew James Christensen", role="Trustee", for_person="TRUST"
    )
    assert FiduciaryRow(
        name="Robert Christensen", role="Guardian", for_person="CLIENT"
    ) in rows


def test_role_label_falls_back_to_title_case() -> None:
    assert role_label(RoleType.ALTERNATE_FINANCIAL_AGENT) == "Successor Financial Agent"
    assert role_label(RoleType.ALTERNATE_EXECUTOR) == "Alternate Executor"
