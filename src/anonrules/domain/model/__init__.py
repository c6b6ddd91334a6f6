"""Public domain model surface."""

from __future__ import annotations

from anonrules.domain.model.enums import AlertSeverity, EntityLevel, Rule
from anonrules.domain.model.errors import (
    AmbiguousEntityError,
    InvalidRestrictionDaysError,
    UnknownEntityError,
)
from anonrules.domain.model.hierarchy import (
    DEFAULT_RESTRICTION_DAYS,
    DocumentClass,
    DocumentType,
    Hierarchy,
    HierarchyEntity,
    Label,
    RuleChange,
    parse_restriction_days,
    require_restriction_days,
)

__all__ = [
    "DEFAULT_RESTRICTION_DAYS",
    "AlertSeverity",
    "AmbiguousEntityError",
    "DocumentClass",
    "DocumentType",
    "EntityLevel",
    "Hierarchy",
    "HierarchyEntity",
    "InvalidRestrictionDaysError",
    "Label",
    "Rule",
    "RuleChange",
    "UnknownEntityError",
    "parse_restriction_days",
    "require_restriction_days",
]
