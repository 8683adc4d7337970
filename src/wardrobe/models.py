from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from src.record_store import Record


class WardrobeStatus(str, Enum):
    """アイテムの状態。遷移に制約はない。"""

    IN_USE = "in_use"
    STORE = "store"  # しまってある
    BUY = "buy"  # 購入予定


class Season(str, Enum):
    ALL = "all"
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


class WardrobeItem(Record):
    """ワードローブの1アイテム"""

    name: str
    category: str = Field(..., description="カテゴリ（トップス、靴など）")
    status: WardrobeStatus = WardrobeStatus.IN_USE
    season: Season = Season.ALL
    color: Optional[str] = None
    note: str = ""
