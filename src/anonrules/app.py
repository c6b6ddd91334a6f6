"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack
from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING

from anonrules.adapters.rules_service import RulesServiceClient
from anonrules.domain.aggregation import summarize
from anonrules.domain.model import Rule
from anonrules.domain.reconciliation import BatchEditSession
from anonrules.domain.reporting import filter_entries

if TYPE_CHECKING:
    from collections.abc import Sequence

    from anonrules.domain.aggregation import DashboardSummary
    from anonrules.domain.model import Hierarchy
    from anonrules.domain.ports import HierarchySource, RuleGateway
    from anonrules.domain.reconciliation import SaveReport
    from anonrules.domain.reporting import ReportFilters, RulesReport


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RuleEdit:
    """One requested change: the new rule and, for RESTRICTED, the typed days."""

    entity_id: str
    rule: Rule
    days_input: str | None = None


async def _enter[T](stack: AsyncExitStack, resource: T) -> T:
    # HTTP clients are closed before the event loop of asyncio.run ends
    if isinstance(resource, RulesServiceClient):
        await stack.enter_async_context(resource)
    return resource


def load_hierarchy(*, source: HierarchySource | None = None) -> Hierarchy:
    hierarchy = asyncio.run(_load_hierarchy(source or RulesServiceClient()))
    log.debug("Loaded hierarchy with %s document classes", len(hierarchy.classes))
    return hierarchy


async def _load_hierarchy(source: HierarchySource) -> Hierarchy:
    async with AsyncExitStack() as stack:
        return await (await _enter(stack, source)).fetch_hierarchy()


def load_overview(*, source: HierarchySource | None = None) -> DashboardSummary:
    """Fetch the hierarchy and compute the dashboard statistics for it."""

    return summarize(load_hierarchy(source=source))


def load_rules_report(
    filters: ReportFilters | None = None,
    *,
    client: RulesServiceClient | None = None,
) -> RulesReport:
    report = asyncio.run(_load_rules_report(client or RulesServiceClient(), filters))
    if filters is None or filters.is_empty:
        return report
    # the service may ignore query parameters it does not know
    return replace(report, entries=tuple(filter_entries(report.entries, filters)))


async def _load_rules_report(
    client: RulesServiceClient,
    filters: ReportFilters | None,
) -> RulesReport:
    async with client:
        return await client.fetch_report(filters)


def apply_rule_edits(
    edits: Sequence[RuleEdit],
    *,
    gateway: RuleGateway | None = None,
) -> SaveReport:
    """Stage ``edits`` on a fresh session over the current hierarchy and save them."""

    return asyncio.run(_apply_rule_edits(edits, gateway or RulesServiceClient()))


async def _apply_rule_edits(edits: Sequence[RuleEdit], gateway: RuleGateway) -> SaveReport:
    async with AsyncExitStack() as stack:
        await _enter(stack, gateway)
        session = BatchEditSession(await gateway.fetch_hierarchy())
        for edit in edits:
            session.set_rule(edit.entity_id, edit.rule)
            if edit.rule is Rule.RESTRICTED and edit.days_input is not None:
                session.set_days(edit.entity_id, edit.days_input)

        log.info("Saving %s pending rule(s)", session.pending_count)
        report = await session.save(gateway)

    log.info(
        "Finished saving rules: saved=%s, failed=%s, refreshed=%s",
        report.success_count,
        len(report.failures),
        report.refreshed,
    )
    return report
