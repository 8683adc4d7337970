"""Vocabulary Store

単語帳。習得済みフラグとタグ（名前変更・削除は全単語に反映）を持つ。
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from src.record_store import RecordStore
from src.record_store import query as q

from .models import Word

logger = logging.getLogger(__name__)


class VocabularyStore(RecordStore[Word]):
    model = Word
    key = "words"

    def toggle_learned(self, word_id: UUID) -> Optional[Word]:
        word = self.get(word_id)
        if word is None:
            return None
        learned = not word.is_learned
        return self.set_fields(word_id, is_learned=learned, learned_at=datetime.now() if learned else None)

    def search(
        self,
        text: str = "",
        tag: Optional[str] = None,
        learned: Optional[bool] = None,
        sort_key: q.SortKey = "term",
        ascending: bool = True,
    ) -> List[Word]:
        return self.query(
            q.all_of(
                q.text_contains(text, "term", "translation", "example"),
                (lambda word: tag in word.tags) if tag is not None else None,
                q.field_equals("is_learned", learned) if learned is not None else None,
            ),
            sort_key,
            ascending,
        )

    def learned_ratio(self) -> float:
        if not len(self):
            return 0.0
        return self.count(q.field_equals("is_learned", True)) / len(self)

    def tag_counts(self) -> Dict[str, int]:
        return q.group_counts([tag for word in self.records for tag in word.tags], lambda tag: tag)

    def rename_tag(self, old: str, new: str) -> int:
        """タグ名を変更し、変更した単語数を返す"""
        return self._rewrite_tags(old, new)

    def remove_tag(self, tag: str) -> int:
        """全単語からタグを外し、変更した単語数を返す"""
        return self._rewrite_tags(tag, None)

    def _rewrite_tags(self, old: str, new: Optional[str]) -> int:
        changed = 0
        for index, word in enumerate(self._records):
            if old not in word.tags:
                continue
            tags: List[str] = []
            for tag in word.tags:
                replacement = new if tag == old else tag
                if replacement is not None and replacement not in tags:
                    tags.append(replacement)
            self._records[index] = word.model_copy(update={"tags": tuple(tags)})
            changed += 1
        if changed:
            logger.info("Rewrote tag '%s' -> '%s' on %d words", old, new, changed)
            self._commit()
        return changed
