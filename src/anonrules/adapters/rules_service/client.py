"""HTTP client for the rule-storage service."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from anonrules.adapters.http_resilience import ResilienceConfig, ResilientClient
from anonrules.config.rules_service import RulesServiceConfig, get_rules_service_config
from anonrules.domain.model import EntityLevel
from anonrules.domain.ports import RuleGateway
from anonrules.domain.reporting import ReportFilters, build_report, filter_entries

from .fixtures import fixture_hierarchy
from .schema import ErrorResponse
from .translator import parse_document_class, parse_hierarchy, parse_report, serialize_change

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from anonrules.domain.model import DocumentClass, Hierarchy, RuleChange
    from anonrules.domain.reporting import RulesReport

log = getLogger(__name__)

DOCUMENT_CLASSES_PATH = "/document-classes"
RULES_REPORT_PATH = "/rules/report"

_RULE_PATHS: dict[EntityLevel, str] = {
    EntityLevel.CLASS: "/rules/class",
    EntityLevel.TYPE: "/rules/type",
    EntityLevel.LABEL: "/rules/label",
}


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class RulesServiceError(RuntimeError):
    """Raised when the rule service rejects a request or answers with garbage."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def rule_path(level: EntityLevel, entity_id: str) -> str:
    return f"{_RULE_PATHS[level]}/{entity_id}"


def report_query(filters: ReportFilters | None) -> dict[str, str]:
    if filters is None:
        return {}
    params: dict[str, str] = {}
    if filters.rule is not None:
        params["rule"] = str(filters.rule)
    if filters.search:
        params["search"] = filters.search
    if filters.document_class:
        params["documentClass"] = filters.document_class
    return params


def _error_message(response: httpx.Response) -> str:
    fallback = f"HTTP error, status {response.status_code}"
    try:
        payload = response.json()
    except ValueError:
        return fallback
    if not isinstance(payload, dict):
        return fallback
    try:
        error = ErrorResponse.model_validate(payload)
    except ValidationError:
        return fallback
    return error.message or fallback


@dataclass(slots=True)
class RulesServiceClient:
    """Reads the hierarchy and reports, and writes rule assignments.

    When the service cannot be reached at all (as opposed to answering with
    an error status) and fixture fallback is enabled, reads are answered from
    the bundled demonstration dataset and writes are accepted without effect.

    One HTTP client, with its rate limiter and cache, is opened on first use
    and shared by every request until ``aclose``. A closed client opens a
    fresh HTTP client on its next request.
    """

    config: RulesServiceConfig = field(default_factory=get_rules_service_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _http: ResilientClient | None = field(default=None, init=False, repr=False)

    async def __aenter__(self) -> RulesServiceClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        http, self._http = self._http, None
        if http is not None:
            await http.aclose()

    async def fetch_hierarchy(self) -> Hierarchy:
        payload = await self._perform_request("GET", DOCUMENT_CLASSES_PATH)
        if payload is None:
            return fixture_hierarchy()
        try:
            return parse_hierarchy(payload)
        except ValidationError as exc:
            raise RulesServiceError("Unexpected document class list payload") from exc

    async def fetch_document_class(self, class_id: str) -> DocumentClass:
        payload = await self._perform_request("GET", f"{DOCUMENT_CLASSES_PATH}/{class_id}")
        if payload is None:
            for document_class in fixture_hierarchy().classes:
                if document_class.id == class_id:
                    return document_class
            raise RulesServiceError(f"Document class {class_id} not found", status=404)
        if not isinstance(payload, dict):
            raise RulesServiceError("Unexpected document class payload")
        try:
            return parse_document_class(payload)
        except ValidationError as exc:
            raise RulesServiceError("Unexpected document class payload") from exc

    async def update_rule(
        self,
        level: EntityLevel,
        entity_id: str,
        change: RuleChange,
    ) -> None:
        payload = await self._perform_request(
            "PUT",
            rule_path(level, entity_id),
            body=serialize_change(change),
        )
        if payload is None:
            log.info("Fixture mode: accepted %s rule %s for %s", level, change.rule, entity_id)

    async def fetch_report(self, filters: ReportFilters | None = None) -> RulesReport:
        payload = await self._perform_request(
            "GET",
            RULES_REPORT_PATH,
            params=report_query(filters),
        )
        if payload is None:
            report = build_report(fixture_hierarchy())
            if filters is None or filters.is_empty:
                return report
            return replace(report, entries=tuple(filter_entries(report.entries, filters)))
        if not isinstance(payload, dict):
            raise RulesServiceError("Unexpected rules report payload")
        try:
            return parse_report(payload)
        except ValidationError as exc:
            raise RulesServiceError("Unexpected rules report payload") from exc

    def _http_client(self) -> ResilientClient:
        if self._http is None:
            self._http = self.client_factory(self.config.resilience)
        return self._http

    def _url(self, path: str) -> str:
        base_url = self.config.resilience.base_url
        if base_url is None:
            raise RulesServiceError("Missing rule service base_url in resilience configuration")
        return f"{base_url.rstrip('/')}{path}"

    async def _perform_request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        body: dict[str, object] | None = None,
    ) -> object | None:
        """Return the decoded JSON body, or ``None`` when fixtures should answer."""

        if self.config.use_fixture_data:
            return None

        url = self._url(path)
        try:
            response = await self._http_client().request(
                method, url, params=params or None, json=body
            )
        except httpx.TransportError as exc:
            if not self.config.fallback_to_fixtures:
                raise RulesServiceError(f"Rule service unreachable: {exc}") from exc
            log.warning(
                "Rule service not available at %s (%s); using demonstration data",
                self.config.resilience.base_url,
                exc,
            )
            return None

        if response.is_error:
            message = _error_message(response)
            log.error("%s %s failed with %s: %s", method, path, response.status_code, message)
            raise RulesServiceError(message, status=response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise RulesServiceError(f"Malformed JSON from {method} {path}") from exc


if TYPE_CHECKING:
    _gateway_check: RuleGateway = RulesServiceClient()
