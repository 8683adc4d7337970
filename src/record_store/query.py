"""Query helpers

インメモリのレコード列に対する純粋関数群（フィルタ・ソート・集計）。
ストレージには一切触れない。
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, TypeVar, Union

T = TypeVar("T")

Predicate = Callable[[Any], bool]
KeyFunc = Callable[[Any], Any]
SortKey = Union[str, KeyFunc]

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


class Period(str, Enum):
    """作成日などによる期間フィルタ"""

    ALL = "all"
    TODAY = "today"
    WEEK = "week"  # 直近7日
    MONTH = "month"  # 今月1日以降


def _getter(key: SortKey) -> KeyFunc:
    if callable(key):
        return key
    return lambda record: getattr(record, key)


def _as_datetime(value: Union[date, datetime]) -> datetime:
    """比較用のnaiveなローカル時刻へ揃える（aware値はローカル時刻へ変換）"""
    if not isinstance(value, datetime):
        return datetime.combine(value, datetime.min.time())
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


# -------------------- predicates --------------------


def text_contains(text: Optional[str], *fields: str) -> Predicate:
    """いずれかの文字列フィールドにtextを含む（大文字小文字を区別しない）

    文字列リストのフィールドは要素のどれかが含めば一致。空のtextは全件一致。
    """
    needle = (text or "").strip().casefold()

    def predicate(record: Any) -> bool:
        if not needle:
            return True
        for field in fields:
            value = getattr(record, field, None)
            if value is None:
                continue
            values = value if isinstance(value, (list, tuple, set, frozenset)) else [value]
            if any(needle in str(item).casefold() for item in values):
                return True
        return False

    return predicate


def field_equals(field: str, value: Any) -> Predicate:
    return lambda record: getattr(record, field) == value


def field_in(field: str, values: Iterable[Any]) -> Predicate:
    """fieldがvaluesのいずれかと一致する。valuesが空なら全件一致。"""
    allowed = set(values)
    return lambda record: not allowed or getattr(record, field) in allowed


def date_between(
    field: str,
    start: Optional[Union[date, datetime]] = None,
    end: Optional[Union[date, datetime]] = None,
) -> Predicate:
    """start <= field <= end（両端含む）。Noneの端は無制限。

    dateで指定したendはその日の終わりまでを含む。
    """
    lower = _as_datetime(start) if start is not None else None
    if end is None:
        upper = None
    elif isinstance(end, datetime):
        upper = _as_datetime(end)
    else:
        upper = datetime.combine(end, datetime.max.time())

    def predicate(record: Any) -> bool:
        value = getattr(record, field)
        if value is None:
            return False
        moment = _as_datetime(value)
        if lower is not None and moment < lower:
            return False
        if upper is not None and moment > upper:
            return False
        return True

    return predicate


def in_period(field: str, period: Period, now: Optional[datetime] = None) -> Predicate:
    reference = _as_datetime(now or datetime.now())
    if period is Period.ALL:
        return lambda record: True
    if period is Period.TODAY:
        return date_between(field, reference.date(), reference.date())
    if period is Period.WEEK:
        return date_between(field, reference - timedelta(weeks=1), None)
    if period is Period.MONTH:
        return date_between(field, reference.date().replace(day=1), None)
    raise ValueError(f"Unknown period: {period}")


def is_archived(flag: bool = True) -> Predicate:
    return lambda record: bool(getattr(record, "is_archived", False)) is flag


def all_of(*predicates: Optional[Predicate]) -> Predicate:
    active = [p for p in predicates if p is not None]
    return lambda record: all(p(record) for p in active)


def any_of(*predicates: Predicate) -> Predicate:
    return lambda record: any(p(record) for p in predicates)


def negate(predicate: Predicate) -> Predicate:
    return lambda record: not predicate(record)


# -------------------- sorting --------------------


def sort_records(records: Iterable[T], key: Optional[SortKey] = None, ascending: bool = True) -> List[T]:
    """安定ソート。同値のレコードは元の挿入順を保つ（降順でも）。

    文字列は大文字小文字を区別せず比較し、Noneは昇順・降順とも末尾に置く。
    """
    items = list(records)
    if key is None:
        return items if ascending else items[::-1]

    getter = _getter(key)

    def sort_key(record: Any) -> tuple:
        value = getter(record)
        if isinstance(value, str):
            value = value.casefold()
        elif isinstance(value, Enum):
            value = value.value
        elif isinstance(value, datetime):
            value = _as_datetime(value)
        missing = value is None
        # reverse=Trueでも同値の順序は保たれるので、Noneの位置だけ反転させる
        return (missing if ascending else not missing, value if not missing else 0)

    return sorted(items, key=sort_key, reverse=not ascending)


# -------------------- aggregates --------------------


def group_counts(records: Iterable[Any], key: SortKey) -> Dict[Hashable, int]:
    """キーごとの件数。キーは初出順。"""
    getter = _getter(key)
    return dict(Counter(getter(record) for record in records))


def distribution(records: Iterable[Any], key: SortKey) -> List[tuple]:
    """(キー, 件数)を件数の多い順に。同数は初出順。"""
    return Counter(_getter(key)(record) for record in records).most_common()


def most_frequent(records: Iterable[Any], key: SortKey) -> Optional[Hashable]:
    """最頻値。同数なら先に現れた方、レコードがなければNone。"""
    ranked = distribution(records, key)
    return ranked[0][0] if ranked else None


def count_by_weekday(records: Iterable[Any], field: str = "created_at") -> Dict[str, int]:
    counts = {name: 0 for name in WEEKDAYS}
    for record in records:
        value = getattr(record, field)
        if value is not None:
            counts[WEEKDAYS[_as_datetime(value).weekday()]] += 1
    return counts


def count_by_month(records: Iterable[Any], field: str = "created_at") -> Dict[str, int]:
    """"YYYY-MM"ごとの件数（昇順）"""
    counts: Counter = Counter()
    for record in records:
        value = getattr(record, field)
        if value is not None:
            moment = _as_datetime(value)
            counts[f"{moment.year:04d}-{moment.month:02d}"] += 1
    return dict(sorted(counts.items()))


def daily_average(records: Iterable[Any], field: str = "created_at", now: Optional[datetime] = None) -> float:
    """最古のレコードから現在までの1日あたり件数（最低1日として計算）"""
    moments = [_as_datetime(getattr(r, field)) for r in records if getattr(r, field) is not None]
    if not moments:
        return 0.0
    reference = _as_datetime(now or datetime.now())
    days = max((reference - min(moments)).days, 1)
    return len(moments) / days
