from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from anonrules import __version__
from anonrules.app import RuleEdit, apply_rule_edits, load_overview, load_rules_report
from anonrules.config import configure_logging
from anonrules.domain.model import (
    AmbiguousEntityError,
    Rule,
    UnknownEntityError,
    require_restriction_days,
)
from anonrules.domain.reporting import ReportFilters, count_by_rule

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from anonrules.domain.aggregation import DashboardSummary
    from anonrules.domain.reconciliation import SaveReport
    from anonrules.domain.reporting import RulesReport

log = logging.getLogger(__name__)

ALL_CLEAR_MESSAGE = "All rules are configured correctly"


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Administer document anonymization rules")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output, including HTTP requests",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("overview", help="Show counts, rule distribution and alerts")

    report = subparsers.add_parser("report", help="List every entity that carries a rule")
    report.add_argument(
        "--rule",
        type=str,
        help="Only show entries with this rule (ALLOWED, RESTRICTED, NOT_ALLOWED)",
    )
    report.add_argument(
        "--search",
        type=str,
        help="Case-insensitive substring of a class, type or label name",
    )
    report.add_argument(
        "--document-class",
        type=str,
        help="Exact document class name",
    )

    edit = subparsers.add_parser("edit", help="Apply a batch of rule edits")
    edit.add_argument(
        "--set",
        dest="edits",
        action="append",
        required=True,
        metavar="ID=RULE[:DAYS]",
        help="Assign RULE to the entity ID; DAYS only applies to RESTRICTED (repeatable)",
    )

    return parser.parse_args(list(argv))


def _parse_rule(value: str) -> Rule:
    normalized = value.strip().upper().replace("-", "_")
    try:
        return Rule(normalized)
    except ValueError as exc:
        choices = ", ".join(rule.value for rule in Rule)
        raise ValueError(f"Invalid rule {value!r}; expected one of {choices}") from exc


def _parse_edit(value: str) -> RuleEdit:
    entity_id, separator, assignment = value.partition("=")
    entity_id = entity_id.strip()
    if not separator or not entity_id or not assignment.strip():
        raise ValueError(f"Invalid edit {value!r}; expected ID=RULE[:DAYS]")

    rule_text, _, days_text = assignment.partition(":")
    rule = _parse_rule(rule_text)
    days_input: str | None = None
    if days_text.strip():
        if rule is not Rule.RESTRICTED:
            raise ValueError(f"Days can only be given for RESTRICTED rules: {value!r}")
        require_restriction_days(days_text)
        days_input = days_text.strip()
    return RuleEdit(entity_id=entity_id, rule=rule, days_input=days_input)


def _build_filters(args: argparse.Namespace) -> ReportFilters:
    return ReportFilters(
        rule=_parse_rule(args.rule) if args.rule else None,
        search=args.search,
        document_class=args.document_class,
    )


def _log_overview(summary: DashboardSummary) -> None:
    counts = summary.counts
    log.info(
        "Classes: %s, types: %s, labels: %s",
        counts.class_count,
        counts.type_count,
        counts.label_count,
    )
    for share in summary.distribution:
        log.info("%s: %s (%s%%)", share.rule, share.count, share.percentage)
    for level in summary.breakdown:
        log.info(
            "%s rules: allowed=%s, restricted=%s, blocked=%s",
            level.level,
            level.allowed,
            level.restricted,
            level.blocked,
        )
    log.info("Rule coverage: %s%%", summary.coverage)
    if summary.all_clear:
        log.info(ALL_CLEAR_MESSAGE)
    for alert in summary.alerts:
        log.warning("[%s] %s: %s", alert.severity, alert.title, alert.description)


def _log_report(report: RulesReport) -> None:
    log.info(
        "Rules configured: %s classes, %s types, %s labels",
        report.total_classes,
        report.total_types,
        report.total_labels,
    )
    counts = count_by_rule(report.entries)
    log.info(
        "Showing %s entries: allowed=%s, restricted=%s, blocked=%s",
        len(report.entries),
        counts[Rule.ALLOWED],
        counts[Rule.RESTRICTED],
        counts[Rule.NOT_ALLOWED],
    )
    for entry in report.entries:
        path = " / ".join(
            name for name in (entry.class_name, entry.type_name, entry.label_name) if name
        )
        days = f" ({entry.days} days)" if entry.days is not None else ""
        log.info("%-5s %-8s %s: %s%s", entry.level, entry.entity_id, path, entry.rule, days)


def _log_save_report(report: SaveReport) -> None:
    if report.attempted == 0 and report.unexpected_error is None:
        log.info("No pending edits to save")
        return
    for ok, message in report.notifications():
        if ok:
            log.info(message)
        else:
            log.error(message)
    if report.refresh_error is not None:
        log.warning("Could not reload rules after saving: %s", report.refresh_error)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    edits: list[RuleEdit] = []
    filters: ReportFilters | None = None
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(verbose=parsed_args.verbose)
        if parsed_args.command == "edit":
            edits = [_parse_edit(value) for value in parsed_args.edits]
        elif parsed_args.command == "report":
            filters = _build_filters(parsed_args)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "overview":
            _log_overview(load_overview())
        elif parsed_args.command == "report":
            _log_report(load_rules_report(filters))
        elif parsed_args.command == "edit":
            report = apply_rule_edits(edits)
            _log_save_report(report)
            if report.has_failures:
                sys.exit(1)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except (UnknownEntityError, AmbiguousEntityError):
        log.exception("Unknown or ambiguous entity in edit request")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
