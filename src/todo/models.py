from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from src.record_store import ArchivableRecord


class TaskStatus(str, Enum):
    """表示用のタスク状態。is_completed/is_archivedから導出する。"""

    TODO = "todo"
    DONE = "done"
    ARCHIVED = "archived"


class Task(ArchivableRecord):
    """タスクリストの1件"""

    title: str
    note: str = ""
    category: Optional[str] = None
    due_date: Optional[date] = None
    is_completed: bool = False
    completed_at: Optional[datetime] = None

    @property
    def status(self) -> TaskStatus:
        if self.is_archived:
            return TaskStatus.ARCHIVED
        if self.is_completed:
            return TaskStatus.DONE
        return TaskStatus.TODO

    def is_overdue(self, today: Optional[date] = None) -> bool:
        if self.due_date is None or self.is_completed:
            return False
        return self.due_date < (today or date.today())
