"""Pydantic models describing the rule-storage service payloads.

The service is not consistent about field names: day counts arrive as
``restrictionDays`` or ``days``, a class's children as ``documentTypes`` or
``types``, and a label's parent as ``typeId`` or ``documentTypeId``. The
models accept either spelling and expose one attribute each.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import ClassVar, cast

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from anonrules.domain.model import Rule


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _coerce_id(value: object) -> object:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def _positive_or_none(value: object) -> object:
    value = _blank_to_none(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value <= 0:
        return None
    return value


def _prefer_canonical(value: object, aliases: Mapping[str, str]) -> object:
    """Copy an alternate key onto its canonical key when the canonical one is empty."""

    if not isinstance(value, Mapping):
        return value
    data: dict[str, object] = dict(cast(Mapping[str, object], value))
    for alternate, canonical in aliases.items():
        if data.get(canonical) in (None, "", 0) and data.get(alternate) not in (None, ""):
            data[canonical] = data[alternate]
    return data


class RulesServiceBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RuledPayload(RulesServiceBaseModel):
    id: str
    name: str
    rule: Rule | None = None
    restriction_days: int | None = Field(default=None, alias="restrictionDays")

    _normalize_id = field_validator("id", mode="before")(_coerce_id)
    _normalize_rule = field_validator("rule", mode="before")(_blank_to_none)
    _normalize_days = field_validator("restriction_days", mode="before")(_positive_or_none)

    field_aliases: ClassVar[Mapping[str, str]] = {"days": "restrictionDays"}

    @model_validator(mode="before")
    @classmethod
    def _normalize_aliases(cls, value: object) -> object:
        return _prefer_canonical(value, cls.field_aliases)


class LabelPayload(RuledPayload):
    type_id: str | None = Field(default=None, alias="typeId")

    _normalize_type_id = field_validator("type_id", mode="before")(_coerce_id)

    field_aliases: ClassVar[Mapping[str, str]] = {
        "days": "restrictionDays",
        "documentTypeId": "typeId",
    }


class DocumentTypePayload(RuledPayload):
    class_id: str | None = Field(default=None, alias="documentClassId")
    labels: list[LabelPayload] = Field(default_factory=list["LabelPayload"])

    _normalize_class_id = field_validator("class_id", mode="before")(_coerce_id)

    @field_validator("labels", mode="before")
    @classmethod
    def _null_to_empty(cls, value: object) -> object:
        return [] if value is None else value


class DocumentClassPayload(RuledPayload):
    document_types: list[DocumentTypePayload] = Field(
        default_factory=list["DocumentTypePayload"], alias="documentTypes"
    )

    field_aliases: ClassVar[Mapping[str, str]] = {
        "days": "restrictionDays",
        "types": "documentTypes",
    }

    @field_validator("document_types", mode="before")
    @classmethod
    def _null_to_empty(cls, value: object) -> object:
        return [] if value is None else value


DocumentClassList = TypeAdapter(list[DocumentClassPayload])


class ReportClassRef(RulesServiceBaseModel):
    id: str | None = None
    name: str

    _normalize_id = field_validator("id", mode="before")(_coerce_id)


class ReportTypeRef(RulesServiceBaseModel):
    id: str | None = None
    name: str
    document_class: ReportClassRef | None = Field(default=None, alias="class")

    _normalize_id = field_validator("id", mode="before")(_coerce_id)


class ReportClassItem(RuledPayload):
    """A class row of the rules report; carries no parent reference."""


class ReportTypeItem(RuledPayload):
    document_class: ReportClassRef | None = Field(default=None, alias="class")


class ReportLabelItem(RuledPayload):
    document_type: ReportTypeRef | None = Field(default=None, alias="type")


class ReportSummary(RulesServiceBaseModel):
    total_classes: int = Field(default=0, alias="totalClasses")
    total_types: int = Field(default=0, alias="totalTypes")
    total_labels: int = Field(default=0, alias="totalLabels")


class RulesReportResponse(RulesServiceBaseModel):
    summary: ReportSummary = Field(default_factory=ReportSummary)
    classes: list[ReportClassItem] = Field(default_factory=list["ReportClassItem"])
    types: list[ReportTypeItem] = Field(default_factory=list["ReportTypeItem"])
    labels: list[ReportLabelItem] = Field(default_factory=list["ReportLabelItem"])


class ErrorResponse(RulesServiceBaseModel):
    message: str | None = None

    @field_validator("message", mode="before")
    @classmethod
    def _join_messages(cls, value: object) -> object:
        # validation failures arrive as a list of messages
        if isinstance(value, list):
            value = "; ".join(str(item) for item in cast(list[object], value) if item)
        return _blank_to_none(value)


class RuleUpdateBody(RulesServiceBaseModel):
    rule: Rule
    days: int | None = None
