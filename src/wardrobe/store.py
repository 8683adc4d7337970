"""Wardrobe Store"""

from __future__ import annotations

from typing import Dict, List, Optional, Union
from uuid import UUID

from src.record_store import RecordStore
from src.record_store import query as q

from .models import Season, WardrobeItem, WardrobeStatus


class WardrobeStore(RecordStore[WardrobeItem]):
    model = WardrobeItem
    key = "wardrobe_items"

    def change_status(self, item_id: UUID, status: Union[WardrobeStatus, str]) -> Optional[WardrobeItem]:
        """状態を変更する。文字列は値（"store"など）として検証される。"""
        return self.set_fields(item_id, status=status)

    def by_status(
        self,
        status: WardrobeStatus,
        text: str = "",
        categories: tuple[str, ...] = (),
        season: Optional[Season] = None,
    ) -> List[WardrobeItem]:
        return self.query(
            q.all_of(
                q.field_equals("status", status),
                q.text_contains(text, "name", "category", "color", "note"),
                q.field_in("category", categories),
                q.field_in("season", (season, Season.ALL)) if season is not None else None,
            ),
            "name",
        )

    def shopping_list(self) -> List[WardrobeItem]:
        return self.by_status(WardrobeStatus.BUY)

    def status_counts(self) -> Dict[WardrobeStatus, int]:
        counts = {status: 0 for status in WardrobeStatus}
        counts.update(self.group_counts("status"))
        return counts

    def category_counts(self, status: Optional[WardrobeStatus] = None) -> Dict[str, int]:
        return self.group_counts(
            "category", q.field_equals("status", status) if status is not None else None
        )
