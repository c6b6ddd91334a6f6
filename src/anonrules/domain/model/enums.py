"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Rule(StrEnum):
    """Whether a document field may be anonymized."""

    ALLOWED = "ALLOWED"
    RESTRICTED = "RESTRICTED"
    NOT_ALLOWED = "NOT_ALLOWED"


class EntityLevel(StrEnum):
    """Position of an entity in the class → type → label hierarchy."""

    CLASS = "class"
    TYPE = "type"
    LABEL = "label"


class AlertSeverity(StrEnum):
    WARNING = "warning"
    INFO = "info"
    ERROR = "error"
