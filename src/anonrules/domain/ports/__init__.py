"""Domain port definitions for adapters."""

from __future__ import annotations

from .rules import HierarchySource, RuleGateway, RuleWriter

__all__ = ["HierarchySource", "RuleGateway", "RuleWriter"]
