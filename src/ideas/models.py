from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from src.record_store import Record


class LeisureIdea(Record):
    """余暇の過ごし方のアイデア"""

    title: str
    category: str = Field(..., description="カテゴリ（屋外、家で、など）")
    description: str = ""
    is_favorite: bool = False
    times_done: int = Field(default=0, ge=0)
    last_done_at: Optional[datetime] = None
