from __future__ import annotations

import json
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from estate_import import app as app_module
from estate_import import main as main_module
from estate_import.adapters.memory import (
    InMemoryEstateStore,
    InMemorySessionCache,
    InMemoryUnitOfWork,
)
from estate_import.adapters.wealthcounsel import CachedParseSessionStore
from estate_import.domain.importing import ImportFailed, ImportResult
from estate_import.domain.transform import CreateNew, ImportOptions, UseExisting
from tests.fixtures.wealthcounsel import SINGLE_CLIENT_WILL_XML

if TYPE_CHECKING:
    from pathlib import Path

    from estate_import.domain.importing import ParseResult


@pytest.fixture
def export_file(tmp_path: Path) -> Path:
    path = tmp_path / "export.xml"
    path.write_text(SINGLE_CLIENT_WILL_XML, encoding="utf-8")
    return path


def test_preview_prints_summary_and_people(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    export_file: Path,
) -> None:
    store = InMemoryEstateStore()
    captured: dict[str, object] = {}

    def fake_preview(source: str, **kwargs: object) -> ParseResult:
        captured.update(kwargs)
        return app_module.preview_export(
            source,
            unit_of_work_factory=lambda: InMemoryUnitOfWork(store),
            sessions=CachedParseSessionStore(InMemorySessionCache()),
        )

    monkeypatch.setattr(main_module, "preview_export", fake_preview)

    main_module.main(["preview", str(export_file), "--match-limit", "3"])

    out = capsys.readouterr().out
    assert "Client:   Sandra Lynn Jenkins" in out
    assert "Plan:     Will-Based Plan" in out
    assert "John Jenkins [Executor (Client)]" in out
    assert captured["match_limit"] == 3


def test_import_passes_decisions_and_options(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    export_file: Path,
    tmp_path: Path,
) -> None:
    person_id = uuid4()
    plan_id = uuid4()
    decisions_file = tmp_path / "decisions.json"
    decisions_file.write_text(
        json.dumps(
            [
                {
                    "extractedName": "Sandra Lynn Jenkins",
                    "action": "use_existing",
                    "existingPersonId": str(person_id),
                },
                {"extractedName": "John Jenkins", "action": "create_new"},
            ]
        ),
        encoding="utf-8",
    )
    captured: dict[str, object] = {}

    def fake_import(source: str, **kwargs: object) -> ImportResult:
        captured["source"] = source
        captured.update(kwargs)
        return ImportResult(success=True, plan_id=plan_id, version_number=2, roles_created=4)

    monkeypatch.setattr(main_module, "import_export", fake_import)

    main_module.main(
        [
            "import",
            str(export_file),
            "--decisions",
            str(decisions_file),
            "--link-threshold",
            "90",
            "--create-clients",
            "--amend",
            str(plan_id),
            "--matter",
            "MAT-9",
        ]
    )

    assert captured["source"] == SINGLE_CLIENT_WILL_XML
    assert captured["overrides"] == {
        "Sandra Lynn Jenkins": UseExisting(person_id),
        "John Jenkins": CreateNew(),
    }
    assert captured["link_threshold"] == 90
    assert captured["options"] == ImportOptions(
        is_amendment=True,
        existing_plan_id=plan_id,
        create_client_records=True,
        link_to_matter_id="MAT-9",
    )
    out = capsys.readouterr().out
    assert f"Plan:            {plan_id}" in out
    assert "Roles created:   4" in out


def test_missing_file_exits_with_usage_error(
    capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["preview", str(tmp_path / "missing.xml")])

    assert excinfo.value.code == 2
    assert "Cannot read" in capsys.readouterr().err


def test_invalid_plan_id_exits_with_usage_error(
    capsys: pytest.CaptureFixture[str], export_file: Path
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["import", str(export_file), "--amend", "not-a-uuid"])

    assert excinfo.value.code == 2
    assert "Invalid plan id: not-a-uuid" in capsys.readouterr().err


def test_invalid_decisions_file_exits_with_usage_error(
    capsys: pytest.CaptureFixture[str], export_file: Path, tmp_path: Path
) -> None:
    decisions_file = tmp_path / "decisions.json"
    decisions_file.write_text('[{"extractedName": "X", "action": "merge"}]', encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["import", str(export_file), "--decisions", str(decisions_file)])

    assert excinfo.value.code == 2
    assert "Invalid decisions file" in capsys.readouterr().err


def test_failed_import_reports_partial_result(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    export_file: Path,
) -> None:
    def fake_import(source: str, **kwargs: object) -> ImportResult:
        _ = source, kwargs
        partial = ImportResult(people_created=3, errors=["grantor missing"])
        raise ImportFailed(partial, RuntimeError("grantor missing"))

    monkeypatch.setattr(main_module, "import_export", fake_import)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["import", str(export_file)])

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert "Import failed: grantor missing" in captured.err
    assert "People created:  3" in captured.out
    assert "! grantor missing" in captured.out


def test_unexpected_error_exits_with_failure(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    export_file: Path,
) -> None:
    def fake_preview(source: str, **kwargs: object) -> ParseResult:
        _ = source, kwargs
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(main_module, "preview_export", fake_preview)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["preview", str(export_file)])

    assert excinfo.value.code == 1
    assert "Error: database unavailable" in capsys.readouterr().err
