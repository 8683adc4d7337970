"""RecordStore Unit Tests

RecordStoreの永続化・順序・通知・失敗時挙動のテスト
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

import pytest
from pydantic import ValidationError

from src.record_store import (
    ArchivableRecord,
    ArchivableRecordStore,
    InMemoryStorage,
    RecordStore,
    StorageError,
    StoreWriteError,
)
from src.record_store import query as q


class Item(ArchivableRecord):
    title: str
    category: Optional[str] = None
    count: int = 0


class FailingStorage(InMemoryStorage):
    """書き込みだけ失敗するストレージ"""

    def __init__(self, fail_writes: bool = True):
        super().__init__()
        self.fail_writes = fail_writes

    def write(self, key: str, data: bytes) -> None:
        if self.fail_writes:
            raise StorageError("disk full")
        super().write(key, data)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def store(storage):
    return ArchivableRecordStore(storage, "items", Item)


@pytest.fixture
def shopping(store):
    """milk / eggs / milk substitute の3件"""
    a = store.add(Item(title="milk", category="dairy"))
    b = store.add(Item(title="eggs", category="protein"))
    c = store.add(Item(title="milk substitute", category="dairy"))
    return a, b, c


def reopen(storage) -> ArchivableRecordStore:
    return ArchivableRecordStore(storage, "items", Item)


def test_empty_storage_starts_empty(store):
    assert store.records == ()
    assert len(store) == 0
    assert store.last_error is None


def test_add_round_trips_through_reload(store, storage):
    created = datetime(2024, 5, 1, 9, 30)
    item = Item(title="Write report", category="work", count=3, created_at=created)
    store.add(item)

    reloaded = reopen(storage)
    assert reloaded.records == (item,)
    assert reloaded.get(item.id).created_at == created


def test_create_assigns_id_and_created_at(store):
    first = store.create(title="a")
    second = store.create(title="b")

    assert first.id != second.id
    assert isinstance(first.created_at, datetime)
    assert [r.title for r in store.records] == ["a", "b"]


def test_add_appends_in_insertion_order(store, shopping):
    assert list(store.records) == list(shopping)


def test_update_replaces_in_place(store, shopping):
    a, b, c = shopping
    updated = store.update(b.model_copy(update={"title": "free-range eggs"}))

    assert updated.title == "free-range eggs"
    assert [r.id for r in store.records] == [a.id, b.id, c.id]
    assert store.get(b.id).title == "free-range eggs"


def test_update_is_idempotent(store, shopping):
    _, b, _ = shopping
    changed = b.model_copy(update={"count": 7})

    store.update(changed)
    once = store.records
    store.update(changed)

    assert store.records == once


def test_update_keeps_created_at(store, shopping):
    a, _, _ = shopping
    store.update(a.model_copy(update={"created_at": datetime(2000, 1, 1), "title": "oat milk"}))

    assert store.get(a.id).created_at == a.created_at
    assert store.get(a.id).title == "oat milk"


def test_update_unknown_id_is_noop(store, shopping, storage):
    before = store.records
    snapshot = storage.read("items")

    result = store.update(Item(title="ghost"))

    assert result is None
    assert store.records == before
    assert storage.read("items") == snapshot


def test_invalid_values_never_reach_storage(store, shopping, storage):
    a, b, _ = shopping
    snapshot = storage.read("items")
    seen = []
    store.subscribe(lambda s: seen.append(len(s)))

    with pytest.raises(ValidationError):
        store.set_fields(a.id, count="many")
    with pytest.raises(ValidationError):
        store.update(b.model_copy(update={"title": None}))
    with pytest.raises(ValidationError):
        store.add(Item.model_construct(title=42))

    assert store.records == shopping
    assert storage.read("items") == snapshot
    assert seen == []
    assert reopen(storage).records == shopping


def test_delete_is_terminal(store, shopping, storage):
    a, _, _ = shopping

    assert store.delete(a.id) is True
    assert store.get(a.id) is None
    assert a.id not in store
    assert reopen(storage).get(a.id) is None


def test_delete_unknown_id_returns_false(store, shopping):
    assert store.delete(uuid4()) is False
    assert len(store) == 3


def test_delete_many_leaves_remaining(store, shopping):
    a, b, c = shopping

    assert store.delete_many({a.id, b.id}) == 2
    assert list(store.records) == [c]


def test_query_text_and_category(store, shopping):
    a, _, c = shopping

    assert store.query(q.text_contains("MILK", "title")) == [a, c]
    assert store.query(q.field_equals("category", "dairy")) == [a, c]


def test_query_sort_ties_keep_insertion_order(store):
    x = store.create(title="x", count=1)
    y = store.create(title="y", count=2)
    z = store.create(title="z", count=1)

    assert store.query(sort_key="count") == [x, z, y]
    assert store.query(sort_key="count", ascending=False) == [y, x, z]


def test_aggregates_reflect_current_state(store, shopping):
    a, _, _ = shopping
    assert store.group_counts("category") == {"dairy": 2, "protein": 1}
    assert store.most_frequent("category") == "dairy"

    store.delete(a.id)

    assert store.group_counts("category") == {"protein": 1, "dairy": 1}
    assert store.most_frequent("category") == "protein"


def test_corrupt_payload_loads_empty():
    storage = InMemoryStorage({"items": b"{not json"})
    store = reopen(storage)

    assert store.records == ()
    assert store.last_error is not None


def test_wrong_shape_payload_loads_empty():
    storage = InMemoryStorage({"items": b'{"title": "not a list"}'})
    assert len(reopen(storage)) == 0


def test_unknown_fields_are_ignored_and_missing_fields_defaulted():
    payload = (
        b'[{"id": "8c6a1a7e-2f0f-4a9b-9a4e-5b1f2a3c4d5e", '
        b'"created_at": "2024-01-02T03:04:05", "title": "legacy", "colour": "blue"}]'
    )
    store = reopen(InMemoryStorage({"items": payload}))

    [item] = store.records
    assert item.title == "legacy"
    assert item.count == 0
    assert item.is_archived is False


def test_archive_and_restore_round_trip(store, shopping):
    a, b, c = shopping

    archived = store.archive(b.id)
    assert archived.is_archived is True
    assert archived.archived_at is not None
    assert store.active() == [a, c]
    assert [r.id for r in store.archived()] == [b.id]

    restored = store.restore(b.id)
    assert restored.is_archived is False
    assert restored.archived_at is None
    assert [r.id for r in store.active()] == [a.id, b.id, c.id]


def test_archive_many_and_restore_many(store, shopping):
    a, b, c = shopping

    assert store.archive_many([a.id, c.id]) == 2
    assert [r.id for r in store.active()] == [b.id]
    assert store.restore_many([a.id, c.id, uuid4()]) == 2
    assert store.count(q.is_archived(True)) == 0


def test_toggle_flips_boolean_field(store, shopping):
    a, _, _ = shopping
    assert store.toggle(a.id, "is_archived").is_archived is True
    assert store.toggle(a.id, "is_archived").is_archived is False
    assert store.toggle(uuid4(), "is_archived") is None


def test_subscribers_are_notified_on_mutation(store):
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append(len(s)))

    item = store.create(title="a")
    store.update(item.model_copy(update={"title": "b"}))
    store.update(Item(title="ghost"))
    store.delete(item.id)
    unsubscribe()
    store.create(title="c")

    assert seen == [1, 1, 0]


def test_failing_subscriber_does_not_break_mutation(store):
    seen = []

    def broken(_):
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(lambda s: seen.append(len(s)))

    store.create(title="a")

    assert len(store) == 1
    assert seen == [1]


def test_write_failure_keeps_in_memory_state():
    storage = FailingStorage()
    store = ArchivableRecordStore(storage, "items", Item)

    item = store.create(title="unsaved")

    assert store.get(item.id) == item
    assert isinstance(store.last_error, StorageError)
    assert storage.read("items") is None

    storage.fail_writes = False
    store.create(title="saved")
    assert store.last_error is None
    assert len(reopen(storage)) == 2


def test_write_failure_can_be_raised():
    store = ArchivableRecordStore(FailingStorage(), "items", Item, raise_on_write_error=True)

    with pytest.raises(StoreWriteError):
        store.create(title="unsaved")

    assert len(store) == 1


def test_reload_picks_up_external_changes(storage):
    first = reopen(storage)
    second = reopen(storage)
    first.create(title="from first")

    assert len(second) == 0
    second.reload()
    assert [r.title for r in second.records] == ["from first"]


def test_subclass_declares_model_and_key(storage):
    class ItemStore(RecordStore[Item]):
        model = Item
        key = "declared"

    store = ItemStore(storage)
    store.create(title="a")

    assert storage.read("declared") is not None


def test_missing_model_or_key_is_rejected(storage):
    with pytest.raises(TypeError):
        RecordStore(storage)
