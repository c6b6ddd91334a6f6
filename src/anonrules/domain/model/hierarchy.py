"""Document class → document type → label hierarchy.

The hierarchy is a read-only snapshot of what the rule-storage service
returned. Entities never change in place: after a save the whole snapshot is
replaced by a fresh fetch.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar, Final

from .enums import EntityLevel, Rule
from .errors import AmbiguousEntityError, InvalidRestrictionDaysError, UnknownEntityError

if TYPE_CHECKING:
    from collections.abc import Iterator

log = getLogger(__name__)

DEFAULT_RESTRICTION_DAYS: Final[int] = 30


def parse_restriction_days(raw: str | None) -> int | None:
    """Return ``raw`` as a positive day count, or ``None`` if it is not one."""

    if raw is None:
        return None
    text = raw.strip()
    if not (text.isascii() and text.isdigit()):
        return None
    value = int(text)
    return value if value > 0 else None


def require_restriction_days(raw: str) -> int:
    days = parse_restriction_days(raw)
    if days is None:
        raise InvalidRestrictionDaysError(f"Restriction days must be a positive integer: {raw!r}")
    return days


@dataclass(frozen=True, slots=True)
class Label:
    id: str
    name: str
    type_id: str
    rule: Rule | None = None
    restriction_days: int | None = None

    LEVEL: ClassVar[EntityLevel] = EntityLevel.LABEL


@dataclass(frozen=True, slots=True)
class DocumentType:
    id: str
    name: str
    class_id: str
    rule: Rule | None = None
    restriction_days: int | None = None
    labels: tuple[Label, ...] = ()

    LEVEL: ClassVar[EntityLevel] = EntityLevel.TYPE


@dataclass(frozen=True, slots=True)
class DocumentClass:
    id: str
    name: str
    rule: Rule | None = None
    restriction_days: int | None = None
    document_types: tuple[DocumentType, ...] = ()

    LEVEL: ClassVar[EntityLevel] = EntityLevel.CLASS


type HierarchyEntity = DocumentClass | DocumentType | Label


@dataclass(frozen=True, slots=True)
class RuleChange:
    """A proposed rule assignment for one entity."""

    rule: Rule
    restriction_days: int | None = None

    def __post_init__(self) -> None:
        if self.rule is not Rule.RESTRICTED and self.restriction_days is not None:
            object.__setattr__(self, "restriction_days", None)
        if self.restriction_days is not None and self.restriction_days <= 0:
            raise InvalidRestrictionDaysError(
                f"Restriction days must be positive, got {self.restriction_days}"
            )


@dataclass(slots=True)
class Hierarchy:
    """Ordered snapshot of document classes with an id index over all levels."""

    classes: tuple[DocumentClass, ...] = ()
    _index: dict[str, list[HierarchyEntity]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        index: dict[str, list[HierarchyEntity]] = defaultdict(list)
        # classes first, then types, then labels: lookup order for classify()
        for document_class in self.classes:
            index[document_class.id].append(document_class)
        for document_type in self.iter_types():
            index[document_type.id].append(document_type)
        for label in self.iter_labels():
            index[label.id].append(label)
        self._index = dict(index)

        ambiguous = self.ambiguous_ids
        if ambiguous:
            log.warning("Hierarchy contains duplicate ids: %s", ", ".join(sorted(ambiguous)))

    def __iter__(self) -> Iterator[DocumentClass]:
        return iter(self.classes)

    def __len__(self) -> int:
        return len(self.classes)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._index

    @property
    def ambiguous_ids(self) -> frozenset[str]:
        return frozenset(entity_id for entity_id, hits in self._index.items() if len(hits) > 1)

    def iter_types(self) -> Iterator[DocumentType]:
        for document_class in self.classes:
            yield from document_class.document_types

    def iter_labels(self) -> Iterator[Label]:
        for document_type in self.iter_types():
            yield from document_type.labels

    def find(self, entity_id: str) -> HierarchyEntity:
        hits = self._index.get(entity_id)
        if not hits:
            raise UnknownEntityError(entity_id)
        if len(hits) > 1:
            raise AmbiguousEntityError(entity_id, tuple(str(hit.LEVEL) for hit in hits))
        return hits[0]

    def get(self, entity_id: str) -> HierarchyEntity | None:
        """Like ``find`` but returns ``None`` for unknown ids."""

        if entity_id not in self._index:
            return None
        return self.find(entity_id)

    def classify(self, entity_id: str) -> EntityLevel:
        return self.find(entity_id).LEVEL

    def name_of(self, entity_id: str) -> str:
        return self.find(entity_id).name

    def original_rule(self, entity_id: str) -> Rule | None:
        entity = self.get(entity_id)
        return entity.rule if entity is not None else None

    def original_days(self, entity_id: str) -> int | None:
        entity = self.get(entity_id)
        return entity.restriction_days if entity is not None else None
