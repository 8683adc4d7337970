"""Record codec

レコード配列とストレージ上のバイト列を相互変換する。
フィールド名ベースのJSONなので、フィールドの追加には前後方向とも耐える。
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Generic, Optional, Sequence, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from .exceptions import CodecError
from .models import Record

T = TypeVar("T")
RecordT = TypeVar("RecordT", bound=Record)


@dataclass(slots=True)
class CodecResult(Generic[T]):
    """エンコード/デコード結果。失敗時はvalueがNoneでerrorが入る。"""

    value: Optional[T] = None
    error: Optional[CodecError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@lru_cache(maxsize=None)
def _adapter(model: Type[Record]) -> TypeAdapter:
    return TypeAdapter(list[model])  # type: ignore[valid-type]


def encode_records(model: Type[RecordT], records: Sequence[RecordT]) -> CodecResult[bytes]:
    """レコード配列をJSONバイト列に変換する

    Args:
        model: レコードのモデルクラス
        records: エンコードするレコード

    Returns:
        CodecResult: 成功時はvalueにバイト列
    """
    try:
        return CodecResult(value=_adapter(model).dump_json(list(records)))
    except (ValueError, TypeError) as exc:
        return CodecResult(error=CodecError(f"Failed to encode {model.__name__} records: {exc}"))


def decode_records(model: Type[RecordT], data: bytes) -> CodecResult[list[RecordT]]:
    """JSONバイト列をレコード配列に変換する

    Args:
        model: レコードのモデルクラス
        data: ストレージから読み込んだバイト列

    Returns:
        CodecResult: 成功時はvalueにレコードのリスト
    """
    try:
        return CodecResult(value=_adapter(model).validate_json(data))
    except (ValidationError, ValueError, TypeError) as exc:
        return CodecResult(error=CodecError(f"Failed to decode {model.__name__} records: {exc}"))
