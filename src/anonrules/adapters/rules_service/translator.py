"""Translate rule-service payloads into domain objects and back."""

from __future__ import annotations

from collections.abc import Mapping

from anonrules.domain.model import (
    DocumentClass,
    DocumentType,
    EntityLevel,
    Hierarchy,
    Label,
    RuleChange,
)
from anonrules.domain.reporting import RuleReportEntry, RulesReport

from .schema import (
    DocumentClassList,
    DocumentClassPayload,
    DocumentTypePayload,
    LabelPayload,
    RulesReportResponse,
    RuleUpdateBody,
)

UNKNOWN_PARENT_NAME = "-"


def parse_hierarchy(payload: object) -> Hierarchy:
    models = DocumentClassList.validate_python(payload)
    return Hierarchy(classes=tuple(_to_document_class(model) for model in models))


def parse_document_class(payload: DocumentClassPayload | Mapping[str, object]) -> DocumentClass:
    model = (
        payload
        if isinstance(payload, DocumentClassPayload)
        else DocumentClassPayload.model_validate(payload)
    )
    return _to_document_class(model)


def parse_report(payload: RulesReportResponse | Mapping[str, object]) -> RulesReport:
    """Flatten a report response into one entry per class, type and label with a rule."""

    model = (
        payload
        if isinstance(payload, RulesReportResponse)
        else RulesReportResponse.model_validate(payload)
    )

    entries: list[RuleReportEntry] = []
    for item in model.classes:
        if item.rule is None:
            continue
        entries.append(
            RuleReportEntry(
                level=EntityLevel.CLASS,
                entity_id=item.id,
                class_name=item.name,
                rule=item.rule,
                days=item.restriction_days,
            )
        )
    for item in model.types:
        if item.rule is None:
            continue
        parent_class = item.document_class
        entries.append(
            RuleReportEntry(
                level=EntityLevel.TYPE,
                entity_id=item.id,
                class_name=parent_class.name if parent_class else UNKNOWN_PARENT_NAME,
                type_name=item.name,
                rule=item.rule,
                days=item.restriction_days,
            )
        )
    for item in model.labels:
        if item.rule is None:
            continue
        parent = item.document_type
        grandparent = parent.document_class if parent else None
        entries.append(
            RuleReportEntry(
                level=EntityLevel.LABEL,
                entity_id=item.id,
                class_name=grandparent.name if grandparent else UNKNOWN_PARENT_NAME,
                type_name=parent.name if parent else UNKNOWN_PARENT_NAME,
                label_name=item.name,
                rule=item.rule,
                days=item.restriction_days,
            )
        )

    return RulesReport(
        total_classes=model.summary.total_classes,
        total_types=model.summary.total_types,
        total_labels=model.summary.total_labels,
        entries=tuple(entries),
    )


def serialize_change(change: RuleChange) -> dict[str, object]:
    body = RuleUpdateBody(rule=change.rule, days=change.restriction_days)
    return body.model_dump(mode="json", exclude_none=True)


def _to_document_class(model: DocumentClassPayload) -> DocumentClass:
    return DocumentClass(
        id=model.id,
        name=model.name,
        rule=model.rule,
        restriction_days=model.restriction_days,
        document_types=tuple(
            _to_document_type(item, class_id=model.id) for item in model.document_types
        ),
    )


def _to_document_type(model: DocumentTypePayload, *, class_id: str) -> DocumentType:
    return DocumentType(
        id=model.id,
        name=model.name,
        class_id=model.class_id or class_id,
        rule=model.rule,
        restriction_days=model.restriction_days,
        labels=tuple(_to_label(item, type_id=model.id) for item in model.labels),
    )


def _to_label(model: LabelPayload, *, type_id: str) -> Label:
    return Label(
        id=model.id,
        name=model.name,
        type_id=model.type_id or type_id,
        rule=model.rule,
        restriction_days=model.restriction_days,
    )
