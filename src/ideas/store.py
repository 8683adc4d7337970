"""Idea Store

余暇アイデアの一覧とランダム提案。
"""

from __future__ import annotations

import random
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from src.record_store import RecordStore
from src.record_store import query as q

from .models import LeisureIdea


class IdeaStore(RecordStore[LeisureIdea]):
    model = LeisureIdea
    key = "ideas"

    def toggle_favorite(self, idea_id: UUID) -> Optional[LeisureIdea]:
        return self.toggle(idea_id, "is_favorite")

    def mark_done(self, idea_id: UUID, when: Optional[datetime] = None) -> Optional[LeisureIdea]:
        idea = self.get(idea_id)
        if idea is None:
            return None
        return self.set_fields(idea_id, times_done=idea.times_done + 1, last_done_at=when or datetime.now())

    def favorites(self) -> List[LeisureIdea]:
        return self.query(q.field_equals("is_favorite", True), "title")

    def random_idea(
        self,
        category: Optional[str] = None,
        favorites_only: bool = False,
        rng: Optional[random.Random] = None,
    ) -> Optional[LeisureIdea]:
        """条件に合うアイデアから1件をランダムに選ぶ。候補がなければNone。"""
        candidates = self.query(
            q.all_of(
                q.field_equals("category", category) if category is not None else None,
                q.field_equals("is_favorite", True) if favorites_only else None,
            )
        )
        if not candidates:
            return None
        return (rng or random).choice(candidates)

    def category_counts(self) -> Dict[str, int]:
        return self.group_counts("category")

    def most_done(self) -> Optional[LeisureIdea]:
        ranked = self.query(lambda idea: idea.times_done > 0, "times_done", ascending=False)
        return ranked[0] if ranked else None
