"""Ports for reading the hierarchy and writing rule assignments."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from anonrules.domain.model import EntityLevel, Hierarchy, RuleChange


@runtime_checkable
class HierarchySource(Protocol):
    """Port for retrieving the authoritative hierarchy snapshot."""

    async def fetch_hierarchy(self) -> Hierarchy: ...


@runtime_checkable
class RuleWriter(Protocol):
    """Port for persisting one rule assignment.

    Implementations raise on failure; the raised exception's ``message``
    attribute, when present, is shown to the user.
    """

    async def update_rule(
        self,
        level: EntityLevel,
        entity_id: str,
        change: RuleChange,
    ) -> None: ...


@runtime_checkable
class RuleGateway(HierarchySource, RuleWriter, Protocol):
    """Both halves of the rule-storage service, as used by a batch save."""
