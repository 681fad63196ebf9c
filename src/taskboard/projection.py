from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from .models import TaskEntity


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class TaskBoard:
    """A user's tasks split into the Today list and the Backlog."""

    today: List[TaskEntity] = field(default_factory=list)
    backlog: List[TaskEntity] = field(default_factory=list)
    total: int = 0


def _ordered(tasks: List[TaskEntity]) -> List[TaskEntity]:
    # Newest first, then a stable sort sinks completed tasks below open ones
    ordered = sorted(tasks, key=lambda t: t["created_at"], reverse=True)
    ordered.sort(key=lambda t: t["is_completed"])
    return ordered


# PUBLIC_INTERFACE
def project(tasks: Iterable[TaskEntity]) -> TaskBoard:
    """
    Partition tasks by list membership and order each list.

    Within a list, open tasks come first and completed tasks last; each group
    is ordered most recent first. Pure: no I/O, input is not modified.
    """
    items = list(tasks)
    return TaskBoard(
        today=_ordered([t for t in items if t["is_today"]]),
        backlog=_ordered([t for t in items if not t["is_today"]]),
        total=len(items),
    )
