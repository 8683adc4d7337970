"""Record Store

1エンティティ種別のレコードコレクションを所有し、ミューテーションの度に
コレクション全体をストレージへ書き戻すストア。

Related Classes: Record (models.py), KeyValueStorage (storage.py)

並行性: 単一スレッドからの呼び出しを前提とし、内部でロックは取らない。
複数の呼び出し元が交互にミューテーションした場合は後勝ちになる。
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Generic, Hashable, Iterable, Iterator, List, Optional, Type, TypeVar
from uuid import UUID

from . import query as q
from .codec import decode_records, encode_records
from .exceptions import RecordStoreError, StorageError, StoreWriteError
from .models import ArchivableRecord, Record
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=Record)
ArchivableT = TypeVar("ArchivableT", bound=ArchivableRecord)

Subscriber = Callable[["RecordStore[Any]"], None]


class RecordStore(Generic[RecordT]):
    """インメモリコレクション + キーバリューストレージへの全件永続化

    サブクラスはmodelとkeyをクラス属性で宣言できる::

        class TaskStore(ArchivableRecordStore[Task]):
            model = Task
            key = "tasks"
    """

    model: Type[RecordT]
    key: str

    def __init__(
        self,
        storage: KeyValueStorage,
        key: Optional[str] = None,
        model: Optional[Type[RecordT]] = None,
        *,
        raise_on_write_error: bool = False,
    ):
        if model is not None:
            self.model = model
        if key is not None:
            self.key = key
        if getattr(self, "model", None) is None or getattr(self, "key", None) is None:
            raise TypeError(f"{type(self).__name__} requires both a record model and a storage key")

        self.storage = storage
        self.raise_on_write_error = raise_on_write_error
        self.last_error: Optional[RecordStoreError] = None
        self._records: List[RecordT] = []
        self._subscribers: List[Subscriber] = []
        self._records = self._load()

    # -------------------- loading / persistence --------------------

    def _load(self) -> List[RecordT]:
        """保存済みコレクションを読み込む。欠損・破損時は空で開始する。"""
        try:
            data = self.storage.read(self.key)
        except StorageError as exc:
            logger.warning("Failed to read '%s', starting empty: %s", self.key, exc)
            self.last_error = exc
            return []

        if data is None:
            return []

        result = decode_records(self.model, data)
        if not result.ok:
            logger.warning("Corrupt data under '%s', starting empty: %s", self.key, result.error)
            self.last_error = result.error
            return []
        return result.value or []

    def _persist(self) -> None:
        """コレクション全体をエンコードして上書き保存する

        失敗してもインメモリの状態は巻き戻さない。
        """
        result = encode_records(self.model, self._records)
        error: Optional[RecordStoreError] = result.error
        if result.ok:
            try:
                self.storage.write(self.key, result.value)
            except StorageError as exc:
                error = exc

        if error is None:
            self.last_error = None
            return

        logger.error("Failed to persist '%s' (%d records): %s", self.key, len(self._records), error)
        self.last_error = error

    def _commit(self) -> None:
        self._persist()
        self._notify()
        if self.raise_on_write_error and self.last_error is not None:
            raise StoreWriteError(str(self.last_error)) from self.last_error

    def reload(self) -> None:
        """ストレージから読み直す"""
        self.last_error = None
        self._records = self._load()
        self._notify()

    # -------------------- subscription --------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """変更通知を購読する。戻り値を呼ぶと購読解除。"""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            try:
                callback(self)
            except Exception:
                logger.exception("Subscriber %r failed for '%s'", callback, self.key)

    # -------------------- read access --------------------

    @property
    def records(self) -> tuple[RecordT, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RecordT]:
        return iter(self.records)

    def __contains__(self, record_id: object) -> bool:
        return any(record.id == record_id for record in self._records)

    def get(self, record_id: UUID) -> Optional[RecordT]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def _index_of(self, record_id: UUID) -> Optional[int]:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    # -------------------- mutations --------------------

    def _validated(self, record: Record, **overrides: Any) -> RecordT:
        """model_copy経由の値も含めてモデルの制約で検証し直す。失敗時はValidationError。"""
        return self.model.model_validate({**record.model_dump(warnings=False), **overrides})

    def add(self, record: RecordT) -> RecordT:
        """末尾に追加して保存する。id重複のチェックは行わない。"""
        record = self._validated(record)
        self._records.append(record)
        self._commit()
        return record

    def create(self, **fields: Any) -> RecordT:
        """フィールドからレコードを生成して追加する（id/created_atは自動採番）"""
        return self.add(self.model(**fields))

    def update(self, record: RecordT) -> Optional[RecordT]:
        """同じidのレコードを同じ位置で置き換える

        created_atは保存済みの値を維持する。該当なしの場合は何もせずNone。
        モデルの制約に反する値はValidationErrorとなり、コレクションは変更されない。
        """
        index = self._index_of(record.id)
        if index is None:
            logger.debug("update ignored, no record %s in '%s'", record.id, self.key)
            return None

        record = self._validated(record, created_at=self._records[index].created_at)
        self._records[index] = record
        self._commit()
        return record

    def set_fields(self, record_id: UUID, **changes: Any) -> Optional[RecordT]:
        """現在のレコードの一部フィールドを差し替えてupdateする"""
        current = self.get(record_id)
        if current is None:
            logger.debug("set_fields ignored, no record %s in '%s'", record_id, self.key)
            return None
        return self.update(self.model.model_validate({**current.model_dump(), **changes}))

    def toggle(self, record_id: UUID, field: str) -> Optional[RecordT]:
        """boolフィールドを反転する"""
        current = self.get(record_id)
        if current is None:
            return None
        return self.set_fields(record_id, **{field: not getattr(current, field)})

    def delete(self, record_id: UUID) -> bool:
        return self.delete_many([record_id]) > 0

    def delete_many(self, record_ids: Iterable[UUID]) -> int:
        """指定idのレコードをすべて削除し、削除件数を返す"""
        targets = set(record_ids)
        remaining = [record for record in self._records if record.id not in targets]
        removed = len(self._records) - len(remaining)
        if not removed:
            return 0
        self._records = remaining
        self._commit()
        return removed

    # -------------------- queries --------------------

    def query(
        self,
        predicate: Optional[q.Predicate] = None,
        sort_key: Optional[q.SortKey] = None,
        ascending: bool = True,
    ) -> List[RecordT]:
        """条件に合うレコードを安定ソートして返す"""
        selected = [r for r in self._records if predicate is None or predicate(r)]
        return q.sort_records(selected, sort_key, ascending)

    def count(self, predicate: Optional[q.Predicate] = None) -> int:
        return sum(1 for r in self._records if predicate is None or predicate(r))

    def group_counts(self, key: q.SortKey, predicate: Optional[q.Predicate] = None) -> Dict[Hashable, int]:
        return q.group_counts(self.query(predicate), key)

    def most_frequent(self, key: q.SortKey, predicate: Optional[q.Predicate] = None) -> Optional[Hashable]:
        return q.most_frequent(self.query(predicate), key)


class ArchivableRecordStore(RecordStore[ArchivableT]):
    """アーカイブ（論理削除）に対応したストア"""

    def archive(self, record_id: UUID, when: Optional[datetime] = None) -> Optional[ArchivableT]:
        return self.set_fields(record_id, is_archived=True, archived_at=when or datetime.now())

    def restore(self, record_id: UUID) -> Optional[ArchivableT]:
        return self.set_fields(record_id, is_archived=False, archived_at=None)

    def archive_many(self, record_ids: Iterable[UUID], when: Optional[datetime] = None) -> int:
        return self._set_archived(record_ids, True, when or datetime.now())

    def restore_many(self, record_ids: Iterable[UUID]) -> int:
        return self._set_archived(record_ids, False, None)

    def _set_archived(self, record_ids: Iterable[UUID], flag: bool, when: Optional[datetime]) -> int:
        targets = set(record_ids)
        changed = 0
        for index, record in enumerate(self._records):
            if record.id in targets:
                self._records[index] = record.model_copy(update={"is_archived": flag, "archived_at": when})
                changed += 1
        if changed:
            self._commit()
        return changed

    def active(
        self,
        predicate: Optional[q.Predicate] = None,
        sort_key: Optional[q.SortKey] = None,
        ascending: bool = True,
    ) -> List[ArchivableT]:
        return self.query(q.all_of(q.is_archived(False), predicate), sort_key, ascending)

    def archived(
        self,
        predicate: Optional[q.Predicate] = None,
        sort_key: Optional[q.SortKey] = "archived_at",
        ascending: bool = False,
    ) -> List[ArchivableT]:
        return self.query(q.all_of(q.is_archived(True), predicate), sort_key, ascending)
