from __future__ import annotations

import pytest

from anonrules.domain.model import (
    AmbiguousEntityError,
    DocumentClass,
    DocumentType,
    EntityLevel,
    Hierarchy,
    InvalidRestrictionDaysError,
    Label,
    Rule,
    RuleChange,
    UnknownEntityError,
    parse_restriction_days,
    require_restriction_days,
)
from tests.helpers.hierarchy import make_hierarchy


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("30", 30),
        (" 7 ", 7),
        ("0", None),
        ("-1", None),
        ("12.5", None),
        ("30abc", None),
        ("", None),
        ("٣", None),
        (None, None),
    ],
)
def test_parse_restriction_days(raw: str | None, expected: int | None) -> None:
    assert parse_restriction_days(raw) == expected


def test_require_restriction_days_raises() -> None:
    assert require_restriction_days("90") == 90
    with pytest.raises(InvalidRestrictionDaysError):
        require_restriction_days("never")


def test_rule_change_drops_days_for_other_rules() -> None:
    assert RuleChange(rule=Rule.ALLOWED, restriction_days=30).restriction_days is None
    assert RuleChange(rule=Rule.RESTRICTED, restriction_days=30).restriction_days == 30


def test_rule_change_rejects_non_positive_days() -> None:
    with pytest.raises(InvalidRestrictionDaysError):
        RuleChange(rule=Rule.RESTRICTED, restriction_days=0)


def test_classify_searches_every_level() -> None:
    hierarchy = make_hierarchy()

    assert hierarchy.classify("C1") is EntityLevel.CLASS
    assert hierarchy.classify("T1") is EntityLevel.TYPE
    assert hierarchy.classify("L2") is EntityLevel.LABEL
    assert hierarchy.name_of("L1") == "Full Name"
    assert "L1" in hierarchy
    assert "missing" not in hierarchy


def test_find_unknown_id_raises() -> None:
    with pytest.raises(UnknownEntityError) as excinfo:
        make_hierarchy().find("missing")

    assert excinfo.value.entity_id == "missing"


def test_duplicate_ids_are_ambiguous(caplog: pytest.LogCaptureFixture) -> None:
    hierarchy = Hierarchy(
        classes=(
            DocumentClass(
                id="7",
                name="Class",
                document_types=(
                    DocumentType(
                        id="7-1",
                        name="Type",
                        class_id="7",
                        labels=(Label(id="7", name="Label", type_id="7-1"),),
                    ),
                ),
            ),
        )
    )

    assert hierarchy.ambiguous_ids == frozenset({"7"})
    assert "duplicate ids: 7" in caplog.text
    with pytest.raises(AmbiguousEntityError) as excinfo:
        hierarchy.classify("7")
    assert excinfo.value.levels == ("class", "label")
    assert hierarchy.classify("7-1") is EntityLevel.TYPE


def test_original_values() -> None:
    hierarchy = make_hierarchy()

    assert hierarchy.original_rule("T1") is Rule.RESTRICTED
    assert hierarchy.original_days("T1") == 30
    assert hierarchy.original_rule("C2") is None
    assert hierarchy.original_rule("missing") is None
    assert hierarchy.original_days("missing") is None


def test_iteration_order() -> None:
    hierarchy = make_hierarchy()

    assert [document_class.id for document_class in hierarchy] == ["C1", "C2"]
    assert [label.id for label in hierarchy.iter_labels()] == ["L1", "L2"]
    assert len(hierarchy) == 2
