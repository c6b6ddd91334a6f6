from __future__ import annotations

import pytest

from anonrules.adapters.rules_service import fixture_hierarchy
from anonrules.domain.aggregation import (
    HierarchyCounts,
    compute_alerts,
    compute_counts,
    compute_coverage,
    compute_level_breakdown,
    compute_percentage,
    compute_rule_distribution,
    summarize,
)
from anonrules.domain.model import (
    AlertSeverity,
    DocumentClass,
    DocumentType,
    EntityLevel,
    Hierarchy,
    Label,
    Rule,
)
from tests.helpers.hierarchy import make_hierarchy


def test_compute_counts_tallies_levels_and_rules() -> None:
    counts = compute_counts(make_hierarchy())

    assert counts == HierarchyCounts(
        class_count=2,
        type_count=1,
        label_count=2,
        allowed_count=1,
        restricted_count=1,
        blocked_count=1,
    )
    assert counts.total_items == 5
    assert counts.total_rules == 3


def test_compute_counts_rules_never_exceed_entities() -> None:
    counts = compute_counts(fixture_hierarchy())

    assert counts.total_rules <= counts.total_items
    assert counts.class_count == 3
    assert counts.type_count == 5
    assert counts.label_count == 10


def test_compute_counts_empty_hierarchy() -> None:
    assert compute_counts(Hierarchy()) == HierarchyCounts()


def test_compute_counts_is_deterministic() -> None:
    hierarchy = fixture_hierarchy()

    assert compute_counts(hierarchy) == compute_counts(hierarchy)
    assert compute_alerts(hierarchy) == compute_alerts(hierarchy)


@pytest.mark.parametrize(
    ("count", "total", "expected"),
    [
        (0, 0, 0),
        (5, 0, 0),
        (1, 3, 33),
        (2, 3, 67),
        (1, 8, 13),
        (1, 200, 1),
        (1, 201, 0),
        (3, 3, 100),
        (0, 7, 0),
    ],
)
def test_compute_percentage(count: int, total: int, expected: int) -> None:
    assert compute_percentage(count, total) == expected


def test_compute_percentage_stays_in_range() -> None:
    for total in range(1, 40):
        for count in range(total + 1):
            assert 0 <= compute_percentage(count, total) <= 100


def test_compute_alerts_in_fixed_order() -> None:
    alerts = compute_alerts(make_hierarchy())

    assert [alert.severity for alert in alerts] == [
        AlertSeverity.WARNING,
        AlertSeverity.INFO,
        AlertSeverity.ERROR,
    ]
    assert [alert.title for alert in alerts] == [
        "Classes without rules",
        "Restricted types",
        "Blocked labels",
    ]
    assert [alert.count for alert in alerts] == [1, 1, 1]
    assert alerts[0].description == "1 classes have no anonymization rule defined"


def test_compute_alerts_skips_empty_categories() -> None:
    hierarchy = Hierarchy(
        classes=(
            DocumentClass(
                id="1",
                name="Fiscal",
                rule=Rule.ALLOWED,
                document_types=(
                    DocumentType(
                        id="1-1",
                        name="Invoice",
                        class_id="1",
                        rule=Rule.ALLOWED,
                        labels=(
                            Label(id="1-1-1", name="Key", type_id="1-1", rule=Rule.NOT_ALLOWED),
                            Label(id="1-1-2", name="Total", type_id="1-1", rule=Rule.NOT_ALLOWED),
                        ),
                    ),
                ),
            ),
        )
    )

    alerts = compute_alerts(hierarchy)

    assert len(alerts) == 1
    assert alerts[0].severity is AlertSeverity.ERROR
    assert alerts[0].description == "2 fields are fully blocked"


def test_compute_alerts_empty_hierarchy_is_all_clear() -> None:
    assert compute_alerts(Hierarchy()) == []
    assert summarize(Hierarchy()).all_clear


def test_compute_alerts_only_considers_class_level_for_missing_rules() -> None:
    # types and labels without rules do not raise the missing-rule alert
    hierarchy = Hierarchy(
        classes=(
            DocumentClass(
                id="1",
                name="Fiscal",
                rule=Rule.ALLOWED,
                document_types=(DocumentType(id="1-1", name="Invoice", class_id="1"),),
            ),
        )
    )

    assert compute_alerts(hierarchy) == []


def test_compute_rule_distribution_over_ruled_entities() -> None:
    distribution = compute_rule_distribution(fixture_hierarchy())

    assert [share.rule for share in distribution] == [
        Rule.ALLOWED,
        Rule.RESTRICTED,
        Rule.NOT_ALLOWED,
    ]
    assert [share.count for share in distribution] == [7, 6, 4]
    assert [share.percentage for share in distribution] == [41, 35, 24]


def test_compute_level_breakdown() -> None:
    breakdown = compute_level_breakdown(make_hierarchy())

    assert [level.level for level in breakdown] == [
        EntityLevel.CLASS,
        EntityLevel.TYPE,
        EntityLevel.LABEL,
    ]
    assert [(level.allowed, level.restricted, level.blocked) for level in breakdown] == [
        (1, 0, 0),
        (0, 1, 0),
        (0, 0, 1),
    ]
    assert sum(level.total for level in breakdown) == 3


def test_compute_coverage() -> None:
    assert compute_coverage(compute_counts(make_hierarchy())) == 60
    assert compute_coverage(HierarchyCounts()) == 0


def test_summarize_bundles_statistics() -> None:
    summary = summarize(make_hierarchy())

    assert summary.counts.class_count == 2
    assert summary.coverage == 60
    assert len(summary.alerts) == 3
    assert not summary.all_clear
