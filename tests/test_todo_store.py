from datetime import date

from src.record_store import InMemoryStorage
from src.todo import Task, TaskStatus, TaskStore


def test_task_store_crud_cycle():
    storage = InMemoryStorage()
    store = TaskStore(storage)

    created = store.create(
        title="Write report",
        note="Quarterly numbers",
        category="work",
        due_date=date(2025, 12, 1),
    )
    assert created.title == "Write report"
    assert created.status is TaskStatus.TODO
    assert len(store) == 1

    done = store.toggle_complete(created.id)
    assert done.is_completed is True
    assert done.completed_at is not None
    assert done.status is TaskStatus.DONE

    undone = store.toggle_complete(created.id)
    assert undone.is_completed is False
    assert undone.completed_at is None

    assert TaskStore(storage).get(created.id) == undone

    assert store.delete(created.id) is True
    assert store.records == ()


def test_search_hides_archived_tasks():
    store = TaskStore(InMemoryStorage())
    milk = store.create(title="Buy milk", category="shopping")
    eggs = store.create(title="Buy eggs", category="shopping")
    call = store.create(title="Call mom", note="about milk", category="family")

    store.archive(eggs.id)

    assert store.search("buy") == [milk]
    assert store.search("MILK") == [milk, call]
    assert store.search(category="family") == [call]
    assert [t.id for t in store.archived()] == [eggs.id]
    assert store.get(eggs.id).status is TaskStatus.ARCHIVED

    store.restore(eggs.id)
    assert [t.id for t in store.search("buy")] == [milk.id, eggs.id]


def test_search_can_skip_completed_and_sort():
    store = TaskStore(InMemoryStorage())
    late = store.create(title="b", due_date=date(2025, 3, 1))
    early = store.create(title="a", due_date=date(2025, 1, 1))
    undated = store.create(title="c")
    store.set_completed(late.id)

    assert store.search(include_completed=False) == [early, undated]
    assert [t.id for t in store.search(sort_key="due_date")] == [early.id, late.id, undated.id]


def test_overdue_and_completion_rate():
    store = TaskStore(InMemoryStorage())
    overdue = store.create(title="pay rent", due_date=date(2025, 1, 1))
    store.create(title="future", due_date=date(2030, 1, 1))
    finished = store.create(title="done already", due_date=date(2024, 1, 1))
    store.set_completed(finished.id)

    assert store.overdue(today=date(2025, 6, 1)) == [overdue]
    assert store.completion_rate() == 1 / 3

    store.archive(finished.id)
    assert store.completion_rate() == 0.0


def test_category_counts_ignore_archived():
    store = TaskStore(InMemoryStorage())
    store.create(title="a", category="home")
    store.create(title="b", category="home")
    gone = store.create(title="c", category="work")
    store.archive(gone.id)

    assert store.category_counts() == {"home": 2}


def test_unknown_task_helpers_are_noops():
    store = TaskStore(InMemoryStorage())
    ghost = Task(title="ghost")

    assert store.toggle_complete(ghost.id) is None
    assert store.archive(ghost.id) is None
    assert store.restore(ghost.id) is None
    assert len(store) == 0
