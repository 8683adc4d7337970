"""
レコードストアの基底データモデル

関連モジュール:
- src/record_store/store.py - RecordStore（コレクションの所有と永続化）
- src/record_store/codec.py - JSONエンコード/デコード
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """永続化されるレコードの基底モデル

    idとcreated_atは作成時に割り当てられ、以後変更されない。
    それ以外のフィールドはupdateで丸ごと置き換えられる。
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: UUID = Field(default_factory=uuid4, description="レコードID")
    created_at: datetime = Field(default_factory=datetime.now, description="作成日時")


class ArchivableRecord(Record):
    """論理削除（アーカイブ）に対応したレコード"""

    is_archived: bool = Field(default=False, description="アーカイブ済みフラグ")
    archived_at: Optional[datetime] = Field(None, description="アーカイブ日時")
