from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import Field

from src.record_store import Record


class NailShape(str, Enum):
    SQUARE = "square"
    ROUND = "round"
    OVAL = "oval"
    ALMOND = "almond"
    STILETTO = "stiletto"
    COFFIN = "coffin"


class ManicureEntry(Record):
    """ネイル施術の記録"""

    date: dt.date = Field(default_factory=dt.date.today, description="施術日")
    design: str = Field(..., description="デザイン名")
    color: Optional[str] = None
    shape: NailShape = NailShape.ROUND
    salon: Optional[str] = None
    note: str = ""
    rating: Optional[int] = Field(None, ge=1, le=5, description="満足度（1-5）")
