"""Result and view types produced by a batch edit session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from anonrules.domain.model import EntityLevel

if TYPE_CHECKING:
    from collections.abc import Iterator

    from anonrules.domain.model import Rule

UNKNOWN_ERROR_MESSAGE = "Unknown error"
UNEXPECTED_SAVE_ERROR_MESSAGE = "Unexpected error while saving rules"
NOTHING_SAVED_MESSAGE = "No rule was saved"

_LEVEL_NOUNS = {
    EntityLevel.CLASS: "class",
    EntityLevel.TYPE: "type",
    EntityLevel.LABEL: "label",
}


def describe_failure(error: BaseException | str | None) -> str:
    """Extract a human-readable message from a failed update.

    Prefers a structured ``message`` attribute, then the string form, then a
    generic message.
    """

    if isinstance(error, str):
        return error or UNKNOWN_ERROR_MESSAGE
    if error is None:
        return UNKNOWN_ERROR_MESSAGE
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    text = str(error)
    return text or UNKNOWN_ERROR_MESSAGE


@dataclass(frozen=True, slots=True)
class ItemFailure:
    entity_id: str
    level: EntityLevel | None
    name: str
    message: str

    def describe(self) -> str:
        noun = _LEVEL_NOUNS[self.level] if self.level is not None else "item"
        return f'Failed to update {noun} "{self.name}": {self.message}'


@dataclass(frozen=True, slots=True)
class SaveReport:
    """Aggregate outcome of one batch save."""

    succeeded: tuple[str, ...] = ()
    failures: tuple[ItemFailure, ...] = ()
    refreshed: bool = False
    refresh_error: str | None = None
    unexpected_error: str | None = None

    @property
    def attempted(self) -> int:
        return len(self.succeeded) + len(self.failures)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures) or self.unexpected_error is not None

    @property
    def nothing_saved(self) -> bool:
        return self.has_failures and not self.succeeded

    def failure_messages(self) -> dict[str, str]:
        return {failure.entity_id: failure.message for failure in self.failures}

    def notifications(self) -> Iterator[tuple[bool, str]]:
        """Yield ``(ok, message)`` pairs for display, one per failed item.

        Failures sharing a root cause are not merged.
        """

        if self.unexpected_error is not None:
            yield False, self.unexpected_error
            return
        for failure in self.failures:
            yield False, failure.describe()
        if self.succeeded:
            yield True, f"{self.success_count} rule(s) saved successfully"
        elif self.failures:
            yield False, NOTHING_SAVED_MESSAGE


@dataclass(frozen=True, slots=True)
class DisplayRow:
    """One entity of the hierarchy with any pending edit merged in."""

    level: EntityLevel
    depth: int
    entity_id: str
    name: str
    original_rule: Rule | None
    original_days: int | None
    rule: Rule | None
    restriction_days: int | None
    pending: bool
    days_input: str | None
    error: str | None
