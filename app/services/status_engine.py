"""Status transition engine.

Validates manual status changes against the status graph, applies the
configured auto-assignment rules, and runs the idle sweep that force-moves
leads which have sat in a timed status for too long.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from app.models.activity_log import SYSTEM_USER_ID, ActivityLog
from app.models.lead import Lead
from app.services.status_graph import StatusGraph

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


class StatusEngineError(Exception):
    """Base class for status engine errors."""


class LeadNotFoundError(StatusEngineError):
    def __init__(self, lead_id: str):
        super().__init__(f"Lead {lead_id} not found")
        self.lead_id = lead_id


class InvalidTransitionError(StatusEngineError):
    def __init__(self, current_status: Optional[str], new_status: str):
        super().__init__(f'Invalid status transition from "{current_status}" to "{new_status}"')
        self.current_status = current_status
        self.new_status = new_status


@dataclass(frozen=True)
class AssignmentRule:
    trigger_status: str
    role: str


DEFAULT_ASSIGNMENT_RULES = (AssignmentRule(trigger_status="Screening Pass", role="Manager"),)


@dataclass
class SweepResult:
    scanned: int = 0
    moved: int = 0
    skipped: bool = False


@dataclass
class AttentionItem:
    lead: Lead
    days_since_update: int
    suggested_action: str


def days_since(then: datetime, now: datetime) -> int:
    """Whole days elapsed between two timestamps; partial days do not count."""
    return (now - then) // ONE_DAY


class StatusEngine:
    """Status graph semantics over the lead store.

    Args:
        stores_factory: Zero-arg callable returning an async context manager
            that yields ``EngineStores``. Each operation runs in its own unit.
        assignment_rules: ``AssignmentRule`` list evaluated on manual transitions.
        clock: Returns the current naive-UTC time.
    """

    def __init__(
        self,
        stores_factory,
        assignment_rules: Sequence[AssignmentRule] = DEFAULT_ASSIGNMENT_RULES,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self._stores_factory = stores_factory
        self.assignment_rules = list(assignment_rules)
        self._clock = clock
        self._sweep_lock = asyncio.Lock()

    @property
    def sweep_running(self) -> bool:
        return self._sweep_lock.locked()

    async def _load_graph(self, stores) -> StatusGraph:
        definitions = await stores.statuses.get_all_status_definitions()
        return StatusGraph.from_definitions(definitions)

    async def get_status_graph(self) -> StatusGraph:
        async with self._stores_factory() as stores:
            return await self._load_graph(stores)

    async def validate_transition(self, current_status: Optional[str], new_status: str) -> bool:
        graph = await self.get_status_graph()
        return graph.can_transition(current_status, new_status)

    async def list_available_transitions(self, current_status: Optional[str]) -> List[str]:
        graph = await self.get_status_graph()
        return graph.allowed_next(current_status)

    async def apply_manual_transition(self, lead_id: str, new_status: str, actor_user_id: str) -> Lead:
        """Move a lead to ``new_status`` on behalf of ``actor_user_id``.

        Raises:
            LeadNotFoundError: the lead does not exist.
            InvalidTransitionError: ``new_status`` is not reachable from the lead's status.
        """
        async with self._stores_factory() as stores:
            lead = await stores.leads.get_lead(lead_id)
            if lead is None:
                raise LeadNotFoundError(lead_id)

            old_status = lead.current_status
            graph = await self._load_graph(stores)
            if not graph.can_transition(old_status, new_status):
                raise InvalidTransitionError(old_status, new_status)

            now = self._clock()
            changes = {
                "last_status": old_status,
                "current_status": new_status,
                "last_status_updated_date": now,
            }

            entries = []
            for rule in self.assignment_rules:
                if rule.trigger_status != new_status:
                    continue
                assignee = await stores.users.find_first_user_with_role(rule.role)
                if assignee is None:
                    logger.info("No %s user found to auto-assign lead %s", rule.role, lead_id)
                    continue
                changes["assigned_to_user_id"] = assignee.id
                entries.append(ActivityLog(
                    timestamp=now,
                    user_id=actor_user_id,
                    action="auto_assign",
                    entity="lead",
                    entity_id=lead_id,
                    details=(
                        f"Auto-assigned lead {lead.company_name} to {rule.role} "
                        f"{assignee.username} after status change to {new_status}"
                    ),
                ))

            updated = await stores.leads.update_lead(lead_id, changes)
            if updated is None:
                raise LeadNotFoundError(lead_id)

            entries.append(ActivityLog(
                timestamp=now,
                user_id=actor_user_id,
                action="status_change",
                entity="lead",
                entity_id=lead_id,
                details=f'Changed status from "{old_status}" to "{new_status}" for {updated.company_name}',
            ))
            for entry in entries:
                await stores.audit.append_log(entry)

            logger.info(
                "Lead %s moved %r -> %r by %s", lead_id, old_status, new_status, actor_user_id
            )
            return updated

    async def run_idle_sweep(self) -> SweepResult:
        """Force-move every lead that has sat in a timed status past its day limit.

        At most one sweep runs per engine; a call made while one is in
        progress returns ``SweepResult(skipped=True)`` without touching the store.
        """
        if self._sweep_lock.locked():
            logger.warning("Status sweep already running, skipping")
            return SweepResult(skipped=True)

        async with self._sweep_lock:
            result = SweepResult()
            async with self._stores_factory() as stores:
                leads = await stores.leads.get_all_leads()
                graph = await self._load_graph(stores)

                now = self._clock()
                pending_logs = []

                for lead in leads:
                    result.scanned += 1
                    rule = graph.timed(lead.current_status)
                    if rule is None:
                        continue

                    elapsed_days = days_since(lead.last_status_updated_date, now)
                    if elapsed_days < rule.days_limit:
                        continue

                    old_status = lead.current_status
                    await stores.leads.update_lead(lead.id, {
                        "current_status": rule.auto_move_to,
                        "last_status": old_status,
                        "last_status_updated_date": now,
                    })
                    pending_logs.append(ActivityLog(
                        timestamp=now,
                        user_id=SYSTEM_USER_ID,
                        action="auto_status_change",
                        entity="lead",
                        entity_id=lead.id,
                        details=(
                            f'Automatically moved from "{old_status}" to "{rule.auto_move_to}" '
                            f"after {rule.days_limit} days"
                        ),
                    ))
                    result.moved += 1
                    logger.info(
                        "Lead %s auto-moved %r -> %r after %d days idle",
                        lead.id, old_status, rule.auto_move_to, elapsed_days,
                    )

                if pending_logs:
                    await stores.audit.append_logs(pending_logs)

            logger.info(
                "Status sweep complete: scanned=%d moved=%d", result.scanned, result.moved
            )
            return result

    async def list_leads_requiring_attention(self) -> List[AttentionItem]:
        """Leads due for automatic transition within a day, or already overdue."""
        async with self._stores_factory() as stores:
            leads = await stores.leads.get_all_leads()
            graph = await self._load_graph(stores)

        now = self._clock()
        items = []
        for lead in leads:
            rule = graph.timed(lead.current_status)
            if rule is None:
                continue

            elapsed_days = days_since(lead.last_status_updated_date, now)
            if elapsed_days < rule.days_limit - 1:
                continue

            if elapsed_days >= rule.days_limit:
                action = f'Will be automatically moved to "{rule.auto_move_to}"'
            else:
                remaining = rule.days_limit - elapsed_days
                action = f'Will be moved to "{rule.auto_move_to}" in {remaining} day(s)'
            items.append(AttentionItem(lead=lead, days_since_update=elapsed_days, suggested_action=action))

        return items
