"""Status hierarchy administration and the default pipeline seed."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.status_definition import StatusDefinition
from app.services.status_graph import StatusGraphError, join_next_statuses, parse_next_statuses, validate_definition
from app.services.stores import SqlStatusGraphStore

logger = logging.getLogger(__name__)

# (status_name, next_statuses, days_limit, auto_move_to)
DEFAULT_STATUS_HIERARCHY = [
    ("New Lead", ["RNR", "Call Back", "Not Interested", "Interested"], None, None),
    ("RNR", ["Interested", "Reject - RNR"], 6, "Reject - RNR"),
    ("Call Back", ["Interested", "Reject - Not Attend"], 6, "Reject - Not Attend"),
    ("Not Interested", ["Reject - Not Interested"], None, None),
    ("Interested", ["Reject - Screening Fail", "Screening Pass"], None, None),
    ("Screening Pass", ["Proposal to be Sent"], None, None),
    ("Proposal to be Sent", ["Proposal Sent"], None, None),
    ("Proposal Sent", ["Not Interested", "Payment Link Sent"], None, None),
    ("Payment Link Sent", ["Not Paid", "Paid"], None, None),
    ("Not Paid", ["Reject - Payment Not Done"], None, None),
    ("Paid", ["To Apply"], None, None),
    ("To Apply", ["Applied"], None, None),
    ("Applied", ["Rejected", "Approved"], None, None),
    ("Rejected", ["Final Reject"], None, None),
    ("Approved", [], None, None),
    # Reject statuses (final states)
    ("Reject - RNR", [], None, None),
    ("Reject - Not Attend", [], None, None),
    ("Reject - Not Interested", [], None, None),
    ("Reject - Screening Fail", [], None, None),
    ("Reject - Payment Not Done", [], None, None),
    ("Final Reject", [], None, None),
    ("Rules Reject", [], None, None),
]


async def get_status_hierarchy(db: AsyncSession) -> List[StatusDefinition]:
    result = await db.execute(select(StatusDefinition).order_by(StatusDefinition.status_name))
    return list(result.scalars().all())


async def _known_names(db: AsyncSession, exclude_id: Optional[str] = None) -> List[str]:
    rows = await SqlStatusGraphStore(db).get_all_status_definitions()
    return [row.status_name for row in rows if row.id != exclude_id]


async def _ensure_not_auto_move_target(db: AsyncSession, definition: StatusDefinition) -> None:
    """Refuse to drop a name that another status automatically moves leads into."""
    rows = await SqlStatusGraphStore(db).get_all_status_definitions()
    dependents = sorted(
        row.status_name for row in rows
        if row.id != definition.id and row.auto_move_to == definition.status_name
    )
    if dependents:
        raise StatusGraphError(
            f'Status "{definition.status_name}" is the automatic target of: {", ".join(dependents)}'
        )


async def add_status_definition(
    db: AsyncSession,
    status_name: str,
    next_statuses: List[str],
    days_limit: Optional[int] = None,
    auto_move_to: Optional[str] = None,
) -> StatusDefinition:
    """Validate and insert a new status.

    Raises:
        StatusGraphError: the name already exists or the timed fields are inconsistent.
    """
    status_name = status_name.strip()
    known = await _known_names(db)
    if status_name in known:
        raise StatusGraphError(f'Status "{status_name}" already exists')

    validate_definition(status_name, next_statuses, days_limit, auto_move_to, known + [status_name])

    definition = await SqlStatusGraphStore(db).create_status_definition({
        "status_name": status_name,
        "next_statuses": join_next_statuses(next_statuses),
        "days_limit": days_limit,
        "auto_move_to": auto_move_to or None,
    })
    logger.info("Status %r added (next=%s)", status_name, definition.next_statuses)
    return definition


async def update_status_definition(
    db: AsyncSession, status_id: str, changes: Dict[str, Any]
) -> Optional[StatusDefinition]:
    """Apply a partial update. Returns None when the status does not exist."""
    store = SqlStatusGraphStore(db)
    current = await store.get_status_definition(status_id)
    if current is None:
        return None

    merged = {
        "status_name": changes.get("status_name") or current.status_name,
        "next_statuses": changes.get("next_statuses"),
        "days_limit": changes.get("days_limit", current.days_limit),
        "auto_move_to": changes.get("auto_move_to", current.auto_move_to),
    }
    if merged["next_statuses"] is None:
        merged["next_statuses"] = list(parse_next_statuses(current.next_statuses))
    merged["status_name"] = merged["status_name"].strip()
    if merged["status_name"] != current.status_name:
        await _ensure_not_auto_move_target(db, current)

    known = await _known_names(db, exclude_id=status_id)
    if merged["status_name"] in known:
        raise StatusGraphError(f'Status "{merged["status_name"]}" already exists')
    validate_definition(
        merged["status_name"],
        merged["next_statuses"],
        merged["days_limit"],
        merged["auto_move_to"],
        known + [merged["status_name"]],
    )

    merged["next_statuses"] = join_next_statuses(merged["next_statuses"])
    merged["auto_move_to"] = merged["auto_move_to"] or None
    updated = await store.update_status_definition(status_id, merged)
    logger.info("Status %s updated: %s", status_id, merged)
    return updated


async def delete_status_definition(db: AsyncSession, status_id: str) -> bool:
    """Delete a status. Returns False when it does not exist.

    Raises:
        StatusGraphError: another status still auto-moves leads into this one.
    """
    store = SqlStatusGraphStore(db)
    current = await store.get_status_definition(status_id)
    if current is None:
        return False
    await _ensure_not_auto_move_target(db, current)

    deleted = await store.delete_status_definition(status_id)
    if deleted:
        logger.info("Status %s deleted", status_id)
    return deleted


async def initialize_status_hierarchy(db: AsyncSession) -> int:
    """Insert the default pipeline when the table is empty. Returns rows inserted."""
    existing = await get_status_hierarchy(db)
    if existing:
        return 0

    for status_name, next_statuses, days_limit, auto_move_to in DEFAULT_STATUS_HIERARCHY:
        db.add(StatusDefinition(
            status_name=status_name,
            next_statuses=join_next_statuses(next_statuses),
            days_limit=days_limit,
            auto_move_to=auto_move_to,
        ))
    await db.commit()
    logger.info("Default status hierarchy initialized (%d statuses)", len(DEFAULT_STATUS_HIERARCHY))
    return len(DEFAULT_STATUS_HIERARCHY)


async def reinitialize_status_hierarchy(db: AsyncSession) -> List[StatusDefinition]:
    """Drop every status and reseed the defaults."""
    for definition in await get_status_hierarchy(db):
        await db.delete(definition)
    await db.commit()
    await initialize_status_hierarchy(db)
    return await get_status_hierarchy(db)
