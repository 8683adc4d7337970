from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple

from src.record_store import Record


class Word(Record):
    """単語帳の1語"""

    term: str
    translation: str = ""
    example: str = ""
    tags: Tuple[str, ...] = ()
    is_learned: bool = False
    learned_at: Optional[datetime] = None
