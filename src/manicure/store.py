"""Manicure Store

ネイル施術履歴と、その統計（よく使う色・形、曜日別・月別件数）。
"""

from __future__ import annotations

from typing import Dict, List, Optional

from src.record_store import RecordStore
from src.record_store import query as q

from .models import ManicureEntry, NailShape


class ManicureStore(RecordStore[ManicureEntry]):
    model = ManicureEntry
    key = "manicures"

    def history(self, text: str = "", period: q.Period = q.Period.ALL) -> List[ManicureEntry]:
        """新しい施術日順の履歴"""
        return self.query(
            q.all_of(
                q.text_contains(text, "design", "color", "salon", "note"),
                q.in_period("date", period),
            ),
            "date",
            ascending=False,
        )

    def favorite_color(self) -> Optional[str]:
        return self.most_frequent("color", lambda entry: entry.color is not None)

    def favorite_shape(self) -> Optional[NailShape]:
        return self.most_frequent("shape")

    def count_by_weekday(self) -> Dict[str, int]:
        return q.count_by_weekday(self.records, "date")

    def count_by_month(self) -> Dict[str, int]:
        return q.count_by_month(self.records, "date")

    def average_rating(self) -> Optional[float]:
        ratings = [entry.rating for entry in self.records if entry.rating is not None]
        if not ratings:
            return None
        return sum(ratings) / len(ratings)
