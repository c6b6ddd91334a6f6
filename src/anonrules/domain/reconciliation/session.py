"""Batch editing of rule assignments.

A :class:`BatchEditSession` keeps a provisional overlay of rule changes on top
of a hierarchy snapshot. The overlay is keyed by entity id and lives beside
two other mappings: the raw day-count text the user typed, and the last save
error per id.

Per id the lifecycle is::

    unedited -> pending (set_rule / set_days)
             -> saving
             -> unedited            (update accepted)
             -> pending with error  (update rejected; further edits clear it)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from anonrules.domain.model import (
    DEFAULT_RESTRICTION_DAYS,
    EntityLevel,
    Hierarchy,
    Rule,
    RuleChange,
    parse_restriction_days,
)

from .contracts import (
    UNEXPECTED_SAVE_ERROR_MESSAGE,
    DisplayRow,
    ItemFailure,
    SaveReport,
    describe_failure,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from anonrules.domain.model import HierarchyEntity
    from anonrules.domain.ports import RuleGateway

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Dispatch:
    entity_id: str
    level: EntityLevel
    name: str
    change: RuleChange


@dataclass(slots=True)
class BatchEditSession:
    hierarchy: Hierarchy
    pending: dict[str, RuleChange] = field(default_factory=dict)
    raw_days: dict[str, str] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def has_pending_edits(self) -> bool:
        return bool(self.pending)

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    def effective_rule(self, entity_id: str) -> Rule | None:
        change = self.pending.get(entity_id)
        if change is not None:
            return change.rule
        return self.hierarchy.original_rule(entity_id)

    def effective_days(self, entity_id: str) -> int | None:
        change = self.pending.get(entity_id)
        if change is not None and change.restriction_days is not None:
            return change.restriction_days
        return self.hierarchy.original_days(entity_id)

    def set_rule(self, entity_id: str, rule: Rule) -> None:
        """Propose ``rule`` for ``entity_id``.

        A RESTRICTED rule takes its day count from the typed input when that is
        valid, then from the current effective days, then the default.
        """

        self.hierarchy.find(entity_id)
        days: int | None = None
        if rule is Rule.RESTRICTED:
            days = (
                parse_restriction_days(self.raw_days.get(entity_id))
                or self._current_restricted_days(entity_id)
                or DEFAULT_RESTRICTION_DAYS
            )
        self.pending[entity_id] = RuleChange(rule=rule, restriction_days=days)
        self.errors.pop(entity_id, None)

    def set_days(self, entity_id: str, raw_input: str) -> None:
        """Record typed day-count text and fold it into the overlay when valid.

        Invalid text is only stored; the overlay and any save error are left
        as they were.
        """

        self.hierarchy.find(entity_id)
        self.raw_days[entity_id] = raw_input
        days = parse_restriction_days(raw_input)
        if days is None:
            return

        if self.effective_rule(entity_id) is Rule.RESTRICTED:
            current = self.pending.get(entity_id)
            original_rule = self.hierarchy.original_rule(entity_id)
            unchanged = days == self.hierarchy.original_days(entity_id) and (
                current is None or current.rule is original_rule
            )
            if unchanged:
                # retyping the persisted value is not an edit
                self.pending.pop(entity_id, None)
            else:
                self.pending[entity_id] = RuleChange(rule=Rule.RESTRICTED, restriction_days=days)
        self.errors.pop(entity_id, None)

    def is_valid_days_input(self, entity_id: str) -> bool:
        """False while the id is RESTRICTED and its typed days are not usable."""

        if self.effective_rule(entity_id) is not Rule.RESTRICTED:
            return True
        raw = self.raw_days.get(entity_id)
        return raw is None or parse_restriction_days(raw) is not None

    def discard(self) -> None:
        """Abandon the session: drop every pending edit, typed input and error."""

        self.pending.clear()
        self.raw_days.clear()
        self.errors.clear()

    def display_rows(self) -> Iterator[DisplayRow]:
        """Yield every entity in display order with its pending edit merged in."""

        for document_class in self.hierarchy.classes:
            yield self._display_row(document_class, depth=0)
            for document_type in document_class.document_types:
                yield self._display_row(document_type, depth=1)
                for label in document_type.labels:
                    yield self._display_row(label, depth=2)

    async def save(self, gateway: RuleGateway) -> SaveReport:
        """Send every pending edit as an independent update and reconcile outcomes.

        All updates run concurrently and every outcome is collected; one
        rejected update never cancels or rolls back another. Accepted edits
        leave the overlay, rejected ones stay with an error attached. The
        hierarchy is fetched again once afterwards.
        """

        if not self.pending:
            return SaveReport()

        try:
            dispatches, failures = self._plan_dispatches()
            outcomes = await asyncio.gather(
                *(
                    gateway.update_rule(dispatch.level, dispatch.entity_id, dispatch.change)
                    for dispatch in dispatches
                ),
                return_exceptions=True,
            )

            succeeded: list[str] = []
            for dispatch, outcome in zip(dispatches, outcomes, strict=True):
                if isinstance(outcome, BaseException):
                    if not isinstance(outcome, Exception):
                        raise outcome
                    message = describe_failure(outcome)
                    log.warning(
                        "Update of %s %s failed: %s", dispatch.level, dispatch.entity_id, message
                    )
                    failures.append(
                        ItemFailure(
                            entity_id=dispatch.entity_id,
                            level=dispatch.level,
                            name=dispatch.name,
                            message=message,
                        )
                    )
                else:
                    succeeded.append(dispatch.entity_id)
        except Exception:
            log.exception("Unexpected error while saving %s pending rule(s)", len(self.pending))
            return SaveReport(unexpected_error=UNEXPECTED_SAVE_ERROR_MESSAGE)

        for entity_id in succeeded:
            self.pending.pop(entity_id, None)
            self.raw_days.pop(entity_id, None)
            self.errors.pop(entity_id, None)
        for failure in failures:
            self.errors[failure.entity_id] = failure.message

        refresh_error: str | None = None
        try:
            self.hierarchy = await gateway.fetch_hierarchy()
        except Exception as exc:  # noqa: BLE001
            refresh_error = describe_failure(exc)
            log.warning("Could not reload hierarchy after save: %s", refresh_error)

        log.info("Saved %s rule(s), %s failed", len(succeeded), len(failures))
        return SaveReport(
            succeeded=tuple(succeeded),
            failures=tuple(failures),
            refreshed=refresh_error is None,
            refresh_error=refresh_error,
        )

    def _plan_dispatches(self) -> tuple[list[_Dispatch], list[ItemFailure]]:
        dispatches: list[_Dispatch] = []
        failures: list[ItemFailure] = []
        for entity_id, change in self.pending.items():
            try:
                entity = self.hierarchy.find(entity_id)
            except LookupError as exc:
                # unknown or duplicated ids are reported, never guessed
                failures.append(
                    ItemFailure(
                        entity_id=entity_id,
                        level=None,
                        name=entity_id,
                        message=describe_failure(exc),
                    )
                )
                continue
            dispatches.append(
                _Dispatch(entity_id=entity_id, level=entity.LEVEL, name=entity.name, change=change)
            )
        return dispatches, failures

    def _current_restricted_days(self, entity_id: str) -> int | None:
        change = self.pending.get(entity_id)
        if change is not None and change.rule is Rule.RESTRICTED:
            return change.restriction_days
        return self.hierarchy.original_days(entity_id)

    def _display_row(self, entity: HierarchyEntity, *, depth: int) -> DisplayRow:
        change = self.pending.get(entity.id)
        rule = change.rule if change is not None else entity.rule
        days = entity.restriction_days
        if change is not None and change.restriction_days is not None:
            days = change.restriction_days
        return DisplayRow(
            level=entity.LEVEL,
            depth=depth,
            entity_id=entity.id,
            name=entity.name,
            original_rule=entity.rule,
            original_days=entity.restriction_days,
            rule=rule,
            restriction_days=days if rule is Rule.RESTRICTED else None,
            pending=change is not None,
            days_input=self.raw_days.get(entity.id),
            error=self.errors.get(entity.id),
        )
