#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv
from pydantic import TypeAdapter, ValidationError

from estate_import.adapters.wealthcounsel import PersonDecisionPayload
from estate_import.app import import_export, preview_export
from estate_import.config import ConfigurationError, configure_logging, get_import_config
from estate_import.domain.importing import ImportFailed
from estate_import.domain.matching import confidence_label, format_match_type
from estate_import.domain.transform import ImportOptions

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from estate_import.domain.importing import ImportResult, ParseResult
    from estate_import.domain.transform import PersonDecision

_DECISIONS = TypeAdapter(list[PersonDecisionPayload])


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import WealthCounsel estate plan exports")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    commands = parser.add_subparsers(dest="command", required=True)

    preview = commands.add_parser("preview", help="Show what an export contains and who matches")
    preview.add_argument("file", type=Path, help="WealthCounsel XML export")
    preview.add_argument(
        "--match-limit",
        type=int,
        help="Maximum match suggestions per person (default: from configuration)",
    )

    run_import = commands.add_parser("import", help="Parse and store an export")
    run_import.add_argument("file", type=Path, help="WealthCounsel XML export")
    run_import.add_argument(
        "--decisions",
        type=Path,
        help="JSON list of {extractedName, action, existingPersonId} decisions",
    )
    run_import.add_argument(
        "--link-threshold",
        type=int,
        help="Link undecided people to a best match at or above this confidence",
    )
    run_import.add_argument(
        "--create-clients",
        action="store_true",
        help="Create client records for the grantors",
    )
    run_import.add_argument("--amend", type=str, help="Id of the existing plan to amend")
    run_import.add_argument("--matter", type=str, help="Matter id to link the plan to")
    return parser.parse_args(list(argv))


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Cannot read {path}: {exc}") from exc


def _read_decisions(path: Path | None) -> dict[str, PersonDecision]:
    if path is None:
        return {}
    try:
        payloads = _DECISIONS.validate_json(_read_source(path))
    except ValidationError as exc:
        raise ValueError(f"Invalid decisions file {path}: {exc}") from exc
    return {payload.extracted_name: payload.to_decision() for payload in payloads}


def _build_options(args: argparse.Namespace) -> ImportOptions:
    existing_plan_id = None
    if args.amend:
        try:
            existing_plan_id = UUID(args.amend)
        except ValueError as exc:
            raise ValueError(f"Invalid plan id: {args.amend}") from exc
    return ImportOptions(
        is_amendment=existing_plan_id is not None,
        existing_plan_id=existing_plan_id,
        create_client_records=args.create_clients,
        link_to_matter_id=args.matter,
    )


def _print_preview(result: ParseResult) -> None:
    summary = result.summary
    print(f"Session:  {result.session_id}")
    print(f"Client:   {summary.client_summary}")
    print(f"Plan:     {summary.plan_summary}")
    print(f"Fields:   {summary.field_count}")
    for label, count in summary.role_counts.items():
        if count:
            print(f"  {label}: {count}")
    print()
    for person in result.people:
        print(f"{person.name} [{', '.join(person.roles_in_plan)}]")
        for match in person.matches:
            print(
                f"    -> {match.person_name} ({match.person_id}) "
                f"{format_match_type(match.match_type)}, {match.confidence} "
                f"{confidence_label(match.confidence)}"
            )
    for plan in result.existing_plans:
        print(f"Existing plan: {plan.plan_name} ({plan.plan_id}) {plan.status}")


def _print_import(result: ImportResult) -> None:
    print(f"Plan:            {result.plan_id}")
    print(f"Version:         {result.version_number}")
    print(f"People created:  {result.people_created}")
    print(f"People linked:   {result.people_linked}")
    print(f"Clients created: {result.clients_created}")
    print(f"Roles created:   {result.roles_created}")
    for error in result.errors:
        print(f"  ! {error}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    overrides: dict[str, PersonDecision] = {}
    options: ImportOptions | None = None
    try:
        parsed_args = _parse_args(argv if argv is not None else sys.argv[1:])
        configure_logging(
            level=logging.DEBUG if parsed_args.verbose else logging.INFO,
            force=parsed_args.verbose,
        )
        config = get_import_config()
        source = _read_source(parsed_args.file)
        if parsed_args.command == "import":
            overrides = _read_decisions(parsed_args.decisions)
            options = _build_options(parsed_args)
    except (ValueError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        if parsed_args.command == "preview":
            _print_preview(
                preview_export(source, config=config, match_limit=parsed_args.match_limit)
            )
        else:
            _print_import(
                import_export(
                    source,
                    overrides=overrides,
                    link_threshold=parsed_args.link_threshold,
                    options=options,
                    config=config,
                )
            )
    except ImportFailed as exc:
        print(f"Error: {exc}", file=sys.stderr)
        _print_import(exc.result)
        sys.exit(1)
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
