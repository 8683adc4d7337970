"""Task Store

タスクリストのストア。完了トグルとアーカイブ（論理削除）を持つ。
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional
from uuid import UUID

from src.record_store import ArchivableRecordStore
from src.record_store import query as q

from .models import Task


class TaskStore(ArchivableRecordStore[Task]):
    """タスクの永続化と検索"""

    model = Task
    key = "tasks"

    def toggle_complete(self, task_id: UUID) -> Optional[Task]:
        task = self.get(task_id)
        if task is None:
            return None
        return self.set_completed(task_id, not task.is_completed)

    def set_completed(self, task_id: UUID, completed: bool = True) -> Optional[Task]:
        return self.set_fields(
            task_id,
            is_completed=completed,
            completed_at=datetime.now() if completed else None,
        )

    def search(
        self,
        text: str = "",
        category: Optional[str] = None,
        include_completed: bool = True,
        sort_key: Optional[q.SortKey] = None,
        ascending: bool = True,
    ) -> List[Task]:
        """アーカイブされていないタスクをタイトル/メモとカテゴリで絞り込む"""
        return self.active(
            q.all_of(
                q.text_contains(text, "title", "note"),
                q.field_equals("category", category) if category is not None else None,
                None if include_completed else q.field_equals("is_completed", False),
            ),
            sort_key,
            ascending,
        )

    def overdue(self, today: Optional[date] = None) -> List[Task]:
        return self.active(lambda task: task.is_overdue(today), "due_date")

    def completion_rate(self) -> float:
        """アーカイブ以外のタスクに占める完了タスクの割合"""
        total = self.count(q.is_archived(False))
        if not total:
            return 0.0
        done = self.count(q.all_of(q.is_archived(False), q.field_equals("is_completed", True)))
        return done / total

    def category_counts(self) -> Dict[Optional[str], int]:
        return self.group_counts("category", q.is_archived(False))
