# tests/test_service.py

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from todoapi.errors import InvalidInput, NotFound
from todoapi.schemas import TodoRequest
from todoapi.service import TodoService


def _req(title: str, description: str = "", completed: bool = False) -> TodoRequest:
    return TodoRequest(title=title, description=description, completed=completed)


def test_create_assigns_increasing_ids_starting_at_one(service: TodoService) -> None:
    ids = [service.create(_req(f"task {i}")).id for i in range(5)]
    assert ids == [1, 2, 3, 4, 5]


def test_create_sets_both_timestamps_and_defaults(service: TodoService) -> None:
    todo = service.create(_req("Buy milk"))
    assert todo.completed is False
    assert todo.description == ""
    assert todo.created_at == todo.updated_at


@pytest.mark.parametrize("title", ["", "   ", "\t\n"])
def test_create_rejects_blank_title_without_mutation(service: TodoService, title: str) -> None:
    service.create(_req("existing"))
    before = service.list()

    with pytest.raises(InvalidInput) as exc:
        service.create(_req(title))

    assert exc.value.message == "Title is required"
    assert service.list() == before
    # the rejected call must not burn an id either
    assert service.create(_req("next")).id == 2


def test_ids_are_never_reused_after_delete(service: TodoService) -> None:
    service.create(_req("a"))
    second = service.create(_req("b"))
    service.delete(second.id)
    assert service.create(_req("c")).id == 3


def test_missing_ids_raise_not_found(service: TodoService) -> None:
    todo = service.create(_req("a"))
    service.delete(todo.id)

    for missing in (todo.id, 42):
        with pytest.raises(NotFound):
            service.get(missing)
        with pytest.raises(NotFound):
            service.update(missing, _req("x"))
        with pytest.raises(NotFound):
            service.delete(missing)


def test_repeated_delete_keeps_reporting_not_found(service: TodoService) -> None:
    service.create(_req("keep"))
    for _ in range(3):
        with pytest.raises(NotFound):
            service.delete(7)
    assert [t.title for t in service.list()] == ["keep"]


def test_update_overwrites_all_fields_and_refreshes_updated_at(service: TodoService) -> None:
    todo = service.create(_req("Buy milk", "whole", completed=True))

    updated = service.update(todo.id, _req("Buy oat milk", "2%"))

    assert updated.title == "Buy oat milk"
    assert updated.description == "2%"
    # completed is overwritten from the request, not preserved
    assert updated.completed is False
    assert updated.created_at == todo.created_at
    assert updated.updated_at > todo.updated_at

    fetched = service.get(todo.id)
    assert fetched == updated


def test_update_with_blank_title_leaves_record_untouched(service: TodoService) -> None:
    todo = service.create(_req("Buy milk"))
    with pytest.raises(InvalidInput):
        service.update(todo.id, _req("  ", "changed", True))
    assert service.get(todo.id) == todo


def test_update_blank_title_on_missing_id_is_invalid_input(service: TodoService) -> None:
    with pytest.raises(InvalidInput):
        service.update(99, _req(""))


def test_updated_at_never_goes_backwards(service: TodoService, clock) -> None:
    todo = service.create(_req("a"))
    clock.rewind(timedelta(hours=1))
    updated = service.update(todo.id, _req("b"))
    assert updated.updated_at >= todo.updated_at
    assert updated.updated_at >= updated.created_at


def test_delete_preserves_relative_order(service: TodoService) -> None:
    for title in ("a", "b", "c", "d"):
        service.create(_req(title))
    service.delete(2)
    assert [t.id for t in service.list()] == [1, 3, 4]
    assert [t.title for t in service.list()] == ["a", "c", "d"]


def test_list_filters_partition_all(service: TodoService) -> None:
    for i in range(6):
        service.create(_req(f"t{i}", completed=i % 3 == 0))

    everything = {t.id for t in service.list("all")}
    done = {t.id for t in service.list("completed")}
    pending = {t.id for t in service.list("pending")}

    assert done | pending == everything
    assert not done & pending
    assert [t.id for t in service.list("pending")] == [2, 3, 5, 6]
    assert [t.id for t in service.list(status_filter="completed")] == [1, 4]


@pytest.mark.parametrize("flt", [None, "", "bogus", "ALL"])
def test_unknown_filter_behaves_as_all(service: TodoService, flt) -> None:
    service.create(_req("a", completed=True))
    service.create(_req("b"))
    assert [t.id for t in service.list(flt)] == [1, 2]


def test_stats_totals_add_up(service: TodoService) -> None:
    assert service.stats().model_dump() == {"total": 0, "pending": 0, "completed": 0}

    for i in range(5):
        service.create(_req(f"t{i}", completed=i < 2))
    stats = service.stats()

    assert stats.total == stats.pending + stats.completed
    assert stats.total == len(service.list("all"))
    assert (stats.pending, stats.completed) == (3, 2)


def test_returned_records_are_detached_from_store(service: TodoService) -> None:
    todo = service.create(_req("a"))
    todo.title = "mutated by caller"
    assert service.get(todo.id).title == "a"


def test_end_to_end_scenario(service: TodoService) -> None:
    first = service.create(_req("Buy milk"))
    assert (first.id, first.completed) == (1, False)
    assert service.create(_req("Clean")).id == 2

    updated = service.update(1, _req("Buy milk", "2%", True))
    assert updated.completed is True

    assert [t.id for t in service.list("pending")] == [2]

    service.delete(2)
    with pytest.raises(NotFound):
        service.get(2)

    assert service.stats().model_dump() == {"total": 1, "pending": 0, "completed": 1}


def test_concurrent_creates_get_unique_sequential_ids() -> None:
    service = TodoService()
    n = 2000

    with ThreadPoolExecutor(max_workers=16) as pool:
        ids = list(pool.map(lambda i: service.create(_req(f"t{i}")).id, range(n)))

    assert sorted(ids) == list(range(1, n + 1))
    assert service.stats().total == n
    assert [t.id for t in service.list()] == list(range(1, n + 1))
