"""Dashboard statistics derived from a hierarchy snapshot.

Every function here is a pure read of the snapshot: the same hierarchy always
yields the same numbers, and nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from anonrules.domain.model import AlertSeverity, EntityLevel, Rule

if TYPE_CHECKING:
    from collections.abc import Iterable

    from anonrules.domain.model import Hierarchy, HierarchyEntity

RULE_DISPLAY_ORDER: tuple[Rule, ...] = (Rule.ALLOWED, Rule.RESTRICTED, Rule.NOT_ALLOWED)


@dataclass(frozen=True, slots=True)
class HierarchyCounts:
    class_count: int = 0
    type_count: int = 0
    label_count: int = 0
    allowed_count: int = 0
    restricted_count: int = 0
    blocked_count: int = 0

    @property
    def total_items(self) -> int:
        return self.class_count + self.type_count + self.label_count

    @property
    def total_rules(self) -> int:
        """Number of entities that carry a rule."""
        return self.allowed_count + self.restricted_count + self.blocked_count

    def count_for(self, rule: Rule) -> int:
        match rule:
            case Rule.ALLOWED:
                return self.allowed_count
            case Rule.RESTRICTED:
                return self.restricted_count
            case Rule.NOT_ALLOWED:
                return self.blocked_count


@dataclass(frozen=True, slots=True)
class Alert:
    severity: AlertSeverity
    title: str
    description: str
    count: int


@dataclass(frozen=True, slots=True)
class RuleShare:
    rule: Rule
    count: int
    percentage: int


@dataclass(frozen=True, slots=True)
class LevelBreakdown:
    level: EntityLevel
    allowed: int
    restricted: int
    blocked: int

    @property
    def total(self) -> int:
        return self.allowed + self.restricted + self.blocked


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    counts: HierarchyCounts
    distribution: tuple[RuleShare, ...]
    breakdown: tuple[LevelBreakdown, ...]
    coverage: int
    alerts: tuple[Alert, ...]

    @property
    def all_clear(self) -> bool:
        return not self.alerts


def compute_counts(hierarchy: Hierarchy) -> HierarchyCounts:
    """Walk every class, type and label once and tally levels and rules."""

    classes = tuple(hierarchy.classes)
    types = tuple(hierarchy.iter_types())
    labels = tuple(hierarchy.iter_labels())
    tally = _tally_rules((*classes, *types, *labels))
    return HierarchyCounts(
        class_count=len(classes),
        type_count=len(types),
        label_count=len(labels),
        allowed_count=tally[Rule.ALLOWED],
        restricted_count=tally[Rule.RESTRICTED],
        blocked_count=tally[Rule.NOT_ALLOWED],
    )


def compute_percentage(count: int, total: int) -> int:
    """Return ``count / total`` as a whole percentage, rounding halves up."""

    if total == 0:
        return 0
    # integer round-half-up of count * 100 / total
    return (count * 200 + total) // (total * 2)


def compute_alerts(hierarchy: Hierarchy) -> list[Alert]:
    """Return the dashboard alerts in fixed order, skipping empty categories.

    An empty list means there is nothing to flag.
    """

    alerts: list[Alert] = []

    unruled_classes = sum(1 for document_class in hierarchy.classes if document_class.rule is None)
    if unruled_classes > 0:
        alerts.append(
            Alert(
                severity=AlertSeverity.WARNING,
                title="Classes without rules",
                description=f"{unruled_classes} classes have no anonymization rule defined",
                count=unruled_classes,
            )
        )

    restricted_types = sum(
        1 for document_type in hierarchy.iter_types() if document_type.rule is Rule.RESTRICTED
    )
    if restricted_types > 0:
        alerts.append(
            Alert(
                severity=AlertSeverity.INFO,
                title="Restricted types",
                description=f"{restricted_types} types have restrictive rules",
                count=restricted_types,
            )
        )

    blocked_labels = sum(1 for label in hierarchy.iter_labels() if label.rule is Rule.NOT_ALLOWED)
    if blocked_labels > 0:
        alerts.append(
            Alert(
                severity=AlertSeverity.ERROR,
                title="Blocked labels",
                description=f"{blocked_labels} fields are fully blocked",
                count=blocked_labels,
            )
        )

    return alerts


def compute_rule_distribution(hierarchy: Hierarchy) -> tuple[RuleShare, ...]:
    counts = compute_counts(hierarchy)
    total = counts.total_rules
    return tuple(
        RuleShare(
            rule=rule,
            count=counts.count_for(rule),
            percentage=compute_percentage(counts.count_for(rule), total),
        )
        for rule in RULE_DISPLAY_ORDER
    )


def compute_level_breakdown(hierarchy: Hierarchy) -> tuple[LevelBreakdown, ...]:
    levels: tuple[tuple[EntityLevel, Iterable[HierarchyEntity]], ...] = (
        (EntityLevel.CLASS, hierarchy.classes),
        (EntityLevel.TYPE, hierarchy.iter_types()),
        (EntityLevel.LABEL, hierarchy.iter_labels()),
    )
    breakdown: list[LevelBreakdown] = []
    for level, entities in levels:
        tally = _tally_rules(entities)
        breakdown.append(
            LevelBreakdown(
                level=level,
                allowed=tally[Rule.ALLOWED],
                restricted=tally[Rule.RESTRICTED],
                blocked=tally[Rule.NOT_ALLOWED],
            )
        )
    return tuple(breakdown)


def compute_coverage(counts: HierarchyCounts) -> int:
    """Share of entities, across all levels, that carry any rule."""

    return compute_percentage(counts.total_rules, counts.total_items)


def summarize(hierarchy: Hierarchy) -> DashboardSummary:
    counts = compute_counts(hierarchy)
    return DashboardSummary(
        counts=counts,
        distribution=compute_rule_distribution(hierarchy),
        breakdown=compute_level_breakdown(hierarchy),
        coverage=compute_coverage(counts),
        alerts=tuple(compute_alerts(hierarchy)),
    )


def _tally_rules(entities: Iterable[HierarchyEntity]) -> dict[Rule, int]:
    tally = dict.fromkeys(Rule, 0)
    for entity in entities:
        if entity.rule is not None:
            tally[entity.rule] += 1
    return tally
