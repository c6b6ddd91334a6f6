"""Errors raised by hierarchy lookups and rule validation."""

from __future__ import annotations


class UnknownEntityError(LookupError):
    """Raised when an id does not exist anywhere in the hierarchy."""

    def __init__(self, entity_id: str) -> None:
        super().__init__(f"Unknown entity id: {entity_id}")
        self.entity_id = entity_id


class AmbiguousEntityError(LookupError):
    """Raised when an id occurs more than once across classes, types and labels."""

    def __init__(self, entity_id: str, levels: tuple[str, ...]) -> None:
        joined = ", ".join(levels)
        super().__init__(f"Entity id {entity_id} is ambiguous (found as {joined})")
        self.entity_id = entity_id
        self.levels = levels


class InvalidRestrictionDaysError(ValueError):
    """Raised when a restriction day count is not a positive integer."""
