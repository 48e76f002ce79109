"""Collaborator interfaces consumed by the status engine, with SQLAlchemy implementations.

The engine only talks to these four narrow interfaces:

- LeadStore: bulk read, single read, partial update by id
- StatusGraphStore: bulk read of status definitions
- AuditLogSink: append-only activity log writes
- UserDirectory: "first user with role X"

Each SQL implementation commits its own writes, so a failure part way
through a sweep leaves earlier updates in place.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Dict, Iterable, List, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity_log import ActivityLog
from app.models.lead import Lead
from app.models.status_definition import StatusDefinition
from app.models.user import User

logger = logging.getLogger(__name__)


class LeadStore(Protocol):
    async def get_all_leads(self) -> List[Lead]: ...

    async def get_lead(self, lead_id: str) -> Optional[Lead]: ...

    async def update_lead(self, lead_id: str, changes: Dict[str, Any]) -> Optional[Lead]: ...


class StatusGraphStore(Protocol):
    async def get_all_status_definitions(self) -> List[StatusDefinition]: ...


class AuditLogSink(Protocol):
    async def append_log(self, entry: ActivityLog) -> None: ...

    async def append_logs(self, entries: Iterable[ActivityLog]) -> None: ...


class UserDirectory(Protocol):
    async def find_first_user_with_role(self, role: str) -> Optional[User]: ...


@dataclass
class EngineStores:
    """The collaborators for one unit of engine work."""
    leads: LeadStore
    statuses: StatusGraphStore
    audit: AuditLogSink
    users: UserDirectory


class SqlLeadStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all_leads(self) -> List[Lead]:
        result = await self.db.execute(select(Lead).order_by(Lead.created_on_date))
        return list(result.scalars().all())

    async def get_lead(self, lead_id: str) -> Optional[Lead]:
        result = await self.db.execute(select(Lead).where(Lead.id == lead_id))
        return result.scalar_one_or_none()

    async def update_lead(self, lead_id: str, changes: Dict[str, Any]) -> Optional[Lead]:
        lead = await self.get_lead(lead_id)
        if lead is None:
            return None
        for field, value in changes.items():
            setattr(lead, field, value)
        await self.db.commit()
        await self.db.refresh(lead)
        return lead


class SqlStatusGraphStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all_status_definitions(self) -> List[StatusDefinition]:
        result = await self.db.execute(select(StatusDefinition))
        return list(result.scalars().all())

    async def get_status_definition(self, status_id: str) -> Optional[StatusDefinition]:
        result = await self.db.execute(select(StatusDefinition).where(StatusDefinition.id == status_id))
        return result.scalar_one_or_none()

    async def create_status_definition(self, values: Dict[str, Any]) -> StatusDefinition:
        definition = StatusDefinition(**values)
        self.db.add(definition)
        await self.db.commit()
        await self.db.refresh(definition)
        return definition

    async def update_status_definition(self, status_id: str, changes: Dict[str, Any]) -> Optional[StatusDefinition]:
        definition = await self.get_status_definition(status_id)
        if definition is None:
            return None
        for field, value in changes.items():
            setattr(definition, field, value)
        await self.db.commit()
        await self.db.refresh(definition)
        return definition

    async def delete_status_definition(self, status_id: str) -> bool:
        definition = await self.get_status_definition(status_id)
        if definition is None:
            return False
        await self.db.delete(definition)
        await self.db.commit()
        return True


class SqlAuditLogSink:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def append_log(self, entry: ActivityLog) -> None:
        self.db.add(entry)
        await self.db.commit()

    async def append_logs(self, entries: Iterable[ActivityLog]) -> None:
        entries = list(entries)
        if not entries:
            return
        self.db.add_all(entries)
        await self.db.commit()
        logger.debug("Wrote %d activity log entries", len(entries))


class SqlUserDirectory:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_first_user_with_role(self, role: str) -> Optional[User]:
        result = await self.db.execute(
            select(User)
            .where(User.role == role, User.is_active.is_(True))
            .order_by(User.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()


def sql_stores(session_factory: Callable[[], AsyncSession]):
    """Return a stores factory that opens a fresh session per unit of work."""

    @asynccontextmanager
    async def open_stores() -> AsyncIterator[EngineStores]:
        async with session_factory() as db:
            yield EngineStores(
                leads=SqlLeadStore(db),
                statuses=SqlStatusGraphStore(db),
                audit=SqlAuditLogSink(db),
                users=SqlUserDirectory(db),
            )

    return open_stores
