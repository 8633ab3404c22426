"""
JobTrack - Dashboard helpers.

Picks the tasks shown in the dashboard's "Today" list and builds the payload
for toggling a task between completed and pending.
"""
from datetime import date, datetime
from typing import Dict, Any, List, Optional

from ..schemas import Task

TODAY_TASK_LIMIT = 5

PRIORITY_ORDER = {'urgent': 0, 'high': 1, 'medium': 2, 'low': 3}


def _is_for_today(task: Task, today_key: str) -> bool:
    due = (task.due_date or '')[:10]
    if due:
        if due == today_key:
            return True
        # ISO dates compare correctly as strings
        return due < today_key and task.status != 'completed'
    return (task.created_at or '')[:10] == today_key


def _today_sort_key(task: Task):
    return (
        task.status == 'completed',
        PRIORITY_ORDER.get(task.priority or '', len(PRIORITY_ORDER)),
    )


def select_today_tasks(tasks: List[Task], today: date, limit: int = TODAY_TASK_LIMIT) -> List[Task]:
    """
    Tasks due today, overdue and not completed, or undated and created today.

    Open tasks come before completed ones, then by priority (urgent first).
    """
    today_key = today.isoformat()
    selected = [t for t in tasks if _is_for_today(t, today_key)]
    return sorted(selected, key=_today_sort_key)[:limit]


def toggle_payload(task: Task, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Update body flipping a task between completed and pending."""
    if task.status == 'completed':
        return {"status": "pending", "completed_at": None}
    now = now or datetime.utcnow()
    return {"status": "completed", "completed_at": now.isoformat()}
