"""Public interface for the rule-storage service adapter."""

from __future__ import annotations

from .client import RulesServiceClient, RulesServiceError, report_query, rule_path
from .fixtures import FIXTURE_DOCUMENT_CLASSES, fixture_hierarchy
from .translator import parse_document_class, parse_hierarchy, parse_report, serialize_change

__all__ = [
    "FIXTURE_DOCUMENT_CLASSES",
    "RulesServiceClient",
    "RulesServiceError",
    "fixture_hierarchy",
    "parse_document_class",
    "parse_hierarchy",
    "parse_report",
    "report_query",
    "rule_path",
    "serialize_change",
]
