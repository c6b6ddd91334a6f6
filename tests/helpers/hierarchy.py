"""Reusable hierarchies and a fake rule gateway for reconciliation tests."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import TYPE_CHECKING

from anonrules.domain.model import (
    DocumentClass,
    DocumentType,
    EntityLevel,
    Hierarchy,
    Label,
    Rule,
    RuleChange,
)
from anonrules.domain.ports import RuleGateway

if TYPE_CHECKING:
    from collections.abc import Mapping


def make_hierarchy() -> Hierarchy:
    """Two classes: C1 (ALLOWED) with T1 (RESTRICTED 30) and labels L1, L2; C2 without rule."""

    return Hierarchy(
        classes=(
            DocumentClass(
                id="C1",
                name="Civil Certificate",
                rule=Rule.ALLOWED,
                document_types=(
                    DocumentType(
                        id="T1",
                        name="Birth Certificate",
                        class_id="C1",
                        rule=Rule.RESTRICTED,
                        restriction_days=30,
                        labels=(
                            Label(id="L1", name="Full Name", type_id="T1", rule=Rule.NOT_ALLOWED),
                            Label(id="L2", name="Birth Date", type_id="T1"),
                        ),
                    ),
                ),
            ),
            DocumentClass(id="C2", name="Bank Document"),
        )
    )


def apply_change(hierarchy: Hierarchy, entity_id: str, change: RuleChange) -> Hierarchy:
    """Return a copy of ``hierarchy`` with ``change`` persisted on ``entity_id``."""

    def updated[T: (DocumentClass, DocumentType, Label)](entity: T) -> T:
        if entity.id != entity_id:
            return entity
        return replace(entity, rule=change.rule, restriction_days=change.restriction_days)

    classes = tuple(
        updated(
            replace(
                document_class,
                document_types=tuple(
                    updated(
                        replace(
                            document_type,
                            labels=tuple(updated(label) for label in document_type.labels),
                        )
                    )
                    for document_type in document_class.document_types
                ),
            )
        )
        for document_class in hierarchy.classes
    )
    return Hierarchy(classes=classes)


class FakeRuleGateway(RuleGateway):
    """In-memory rule service that persists accepted changes into its hierarchy."""

    def __init__(
        self,
        hierarchy: Hierarchy,
        *,
        failures: Mapping[str, BaseException] | None = None,
        fetch_error: BaseException | None = None,
    ) -> None:
        self.hierarchy = hierarchy
        self.failures = dict(failures or {})
        self.fetch_error = fetch_error
        self.updates: list[tuple[EntityLevel, str, RuleChange]] = []
        self.fetch_count = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_hierarchy(self) -> Hierarchy:
        self.fetch_count += 1
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.hierarchy

    async def update_rule(
        self,
        level: EntityLevel,
        entity_id: str,
        change: RuleChange,
    ) -> None:
        self.updates.append((level, entity_id, change))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            error = self.failures.get(entity_id)
            if error is not None:
                raise error
            self.hierarchy = apply_change(self.hierarchy, entity_id, change)
        finally:
            self.in_flight -= 1


class ServiceError(Exception):
    """Stand-in for an adapter error carrying a structured message."""

    def __init__(self, message: str) -> None:
        super().__init__(f"service said: {message}")
        self.message = message
