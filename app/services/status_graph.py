"""Parsed, in-memory status graph.

Rows from the `status_hierarchy` table are parsed once into one of three node
shapes:

- ``TerminalStatus``: no outgoing transitions at all.
- ``ManualStatus``: operator-driven transitions only.
- ``TimedStatus``: operator-driven transitions plus one forced transition
  fired when a lead sits in the status for ``days_limit`` days.

A timed node always carries both ``days_limit`` and ``auto_move_to``.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union

from app.models.status_definition import NEXT_STATUS_SEPARATOR

logger = logging.getLogger(__name__)


class StatusGraphError(ValueError):
    """Raised when a status definition cannot be accepted into the graph."""


@dataclass(frozen=True)
class TerminalStatus:
    name: str

    @property
    def next_statuses(self) -> Tuple[str, ...]:
        return ()


@dataclass(frozen=True)
class ManualStatus:
    name: str
    next_statuses: Tuple[str, ...]


@dataclass(frozen=True)
class TimedStatus:
    name: str
    next_statuses: Tuple[str, ...]
    days_limit: int
    auto_move_to: str


StatusNode = Union[TerminalStatus, ManualStatus, TimedStatus]


def parse_next_statuses(raw: Optional[str]) -> Tuple[str, ...]:
    """Split a stored ``"A;B; C;"`` string into ``("A", "B", "C")``."""
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(NEXT_STATUS_SEPARATOR) if part.strip())


def join_next_statuses(names: Iterable[str]) -> str:
    return NEXT_STATUS_SEPARATOR.join(name.strip() for name in names if name and name.strip())


def validate_definition(
    status_name: str,
    next_statuses: Iterable[str],
    days_limit: Optional[int],
    auto_move_to: Optional[str],
    known_statuses: Iterable[str],
) -> None:
    """Reject a definition before it is written.

    ``known_statuses`` should include every status name that will exist once the
    write lands (including ``status_name`` itself).
    """
    if not status_name or not status_name.strip():
        raise StatusGraphError("Status name is required")
    if (days_limit is None) != (not auto_move_to):
        raise StatusGraphError("daysLimit and autoMoveTo must be set together")
    if days_limit is not None and days_limit <= 0:
        raise StatusGraphError("daysLimit must be a positive number of days")
    if auto_move_to and auto_move_to not in set(known_statuses):
        raise StatusGraphError(f'autoMoveTo references unknown status "{auto_move_to}"')
    if any(NEXT_STATUS_SEPARATOR in name for name in next_statuses):
        raise StatusGraphError(f'Status names may not contain "{NEXT_STATUS_SEPARATOR}"')


class StatusGraph:
    """Lookup structure over the parsed status nodes."""

    def __init__(self, nodes: Iterable[StatusNode]):
        self._nodes: Dict[str, StatusNode] = {}
        for node in nodes:
            self._nodes[node.name] = node

    @classmethod
    def from_definitions(cls, definitions) -> "StatusGraph":
        """Build the graph from ``StatusDefinition`` rows (or objects with the same attributes).

        Misconfigured timed edges are logged and dropped so the node keeps only
        its manual transitions.
        """
        rows = list(definitions)
        known = {row.status_name for row in rows}
        nodes: List[StatusNode] = []

        for row in rows:
            name = row.status_name
            next_statuses = parse_next_statuses(row.next_statuses)
            days_limit = row.days_limit
            auto_move_to = (row.auto_move_to or "").strip() or None

            timed = days_limit is not None or auto_move_to is not None
            if timed:
                problem = None
                if days_limit is None or auto_move_to is None:
                    problem = "daysLimit and autoMoveTo must be set together"
                elif days_limit <= 0:
                    problem = f"daysLimit {days_limit} is not positive"
                elif auto_move_to not in known:
                    problem = f'autoMoveTo "{auto_move_to}" is not a known status'

                if problem:
                    logger.warning("Status %r: %s; automatic transition disabled", name, problem)
                else:
                    if auto_move_to not in next_statuses:
                        logger.debug(
                            "Status %r auto-moves to %r which is not a manual next status",
                            name,
                            auto_move_to,
                        )
                    nodes.append(TimedStatus(name, next_statuses, int(days_limit), auto_move_to))
                    continue

            if next_statuses:
                nodes.append(ManualStatus(name, next_statuses))
            else:
                nodes.append(TerminalStatus(name))

        return cls(nodes)

    def get(self, name: Optional[str]) -> Optional[StatusNode]:
        if name is None:
            return None
        return self._nodes.get(name)

    def allowed_next(self, name: Optional[str]) -> List[str]:
        node = self.get(name)
        if node is None:
            return []
        return list(node.next_statuses)

    def can_transition(self, current: Optional[str], new: Optional[str]) -> bool:
        node = self.get(current)
        if node is None:
            return False
        return new in node.next_statuses

    def timed(self, name: Optional[str]) -> Optional[TimedStatus]:
        node = self.get(name)
        return node if isinstance(node, TimedStatus) else None
