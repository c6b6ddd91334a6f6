"""Flat rule reports: one row per entity that carries a rule."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from anonrules.domain.model import EntityLevel, Rule

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from anonrules.domain.model import Hierarchy


@dataclass(frozen=True, slots=True)
class RuleReportEntry:
    level: EntityLevel
    entity_id: str
    class_name: str
    rule: Rule
    type_name: str | None = None
    label_name: str | None = None
    days: int | None = None

    @property
    def name(self) -> str:
        return self.label_name or self.type_name or self.class_name


@dataclass(frozen=True, slots=True)
class RulesReport:
    total_classes: int
    total_types: int
    total_labels: int
    entries: tuple[RuleReportEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class ReportFilters:
    rule: Rule | None = None
    search: str | None = None
    document_class: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.rule is None and not self.search and not self.document_class


def build_report(hierarchy: Hierarchy) -> RulesReport:
    """Derive the report the service would return for ``hierarchy``."""

    entries: list[RuleReportEntry] = []
    for document_class in hierarchy.classes:
        if document_class.rule is not None:
            entries.append(
                RuleReportEntry(
                    level=EntityLevel.CLASS,
                    entity_id=document_class.id,
                    class_name=document_class.name,
                    rule=document_class.rule,
                    days=document_class.restriction_days,
                )
            )
    for document_class in hierarchy.classes:
        for document_type in document_class.document_types:
            if document_type.rule is not None:
                entries.append(
                    RuleReportEntry(
                        level=EntityLevel.TYPE,
                        entity_id=document_type.id,
                        class_name=document_class.name,
                        type_name=document_type.name,
                        rule=document_type.rule,
                        days=document_type.restriction_days,
                    )
                )
    for document_class in hierarchy.classes:
        for document_type in document_class.document_types:
            for label in document_type.labels:
                if label.rule is not None:
                    entries.append(
                        RuleReportEntry(
                            level=EntityLevel.LABEL,
                            entity_id=label.id,
                            class_name=document_class.name,
                            type_name=document_type.name,
                            label_name=label.name,
                            rule=label.rule,
                            days=label.restriction_days,
                        )
                    )

    return RulesReport(
        total_classes=sum(1 for entry in entries if entry.level is EntityLevel.CLASS),
        total_types=sum(1 for entry in entries if entry.level is EntityLevel.TYPE),
        total_labels=sum(1 for entry in entries if entry.level is EntityLevel.LABEL),
        entries=tuple(entries),
    )


def filter_entries(
    entries: Iterable[RuleReportEntry],
    filters: ReportFilters,
) -> list[RuleReportEntry]:
    search = filters.search.lower() if filters.search else None
    filtered: list[RuleReportEntry] = []
    for entry in entries:
        if filters.rule is not None and entry.rule is not filters.rule:
            continue
        if search is not None and not _matches_search(entry, search):
            continue
        if filters.document_class and entry.class_name != filters.document_class:
            continue
        filtered.append(entry)
    return filtered


def count_by_rule(entries: Sequence[RuleReportEntry]) -> dict[Rule, int]:
    counts = dict.fromkeys(Rule, 0)
    for entry in entries:
        counts[entry.rule] += 1
    return counts


def document_class_names(entries: Iterable[RuleReportEntry]) -> list[str]:
    return list(dict.fromkeys(entry.class_name for entry in entries))


def _matches_search(entry: RuleReportEntry, search: str) -> bool:
    names = (entry.class_name, entry.type_name, entry.label_name)
    return any(name is not None and search in name.lower() for name in names)
