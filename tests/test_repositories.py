import pytest

from taskboard.db import SQLiteRepository
from taskboard.errors import AlreadyExists
from taskboard.repositories import InMemoryRepository


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "sqlite":
        return SQLiteRepository(str(tmp_path / "nested" / "taskboard.db"))
    return InMemoryRepository()


class TestUsers:
    def test_create_and_lookup(self, store):
        user = store.create_user("ada@example.com", "hash")
        assert store.get_user(user["id"]) == user
        assert store.get_user_by_email("ada@example.com") == user
        assert store.get_user_by_email("ADA@example.com") is None
        assert store.get_user("missing") is None

    def test_duplicate_email(self, store):
        store.create_user("ada@example.com", "hash")
        with pytest.raises(AlreadyExists):
            store.create_user("ada@example.com", "other")


class TestTasks:
    def test_create_get(self, store):
        owner = store.create_user("ada@example.com", "hash")["id"]
        task = store.create_task(owner, "Buy milk", "ESSENTIALS", True)
        assert task["user_id"] == owner
        assert task["is_completed"] is False
        assert task["created_at"] == task["updated_at"]
        assert store.get_task(task["id"]) == task
        assert store.get_task("missing") is None

    def test_owner_without_user_row(self, store):
        task = store.create_task("ghost", "Orphan", "HEALTH", True)
        assert task["user_id"] == "ghost"
        assert store.list_tasks_by_owner("ghost") == [task]

    def test_creation_times_strictly_increase(self, store):
        owner = store.create_user("ada@example.com", "hash")["id"]
        created = [store.create_task(owner, f"t{i}", "FAMILY", True)["created_at"] for i in range(20)]
        assert all(a < b for a, b in zip(created, created[1:]))

    def test_list_is_scoped_by_owner(self, store):
        a = store.create_user("a@example.com", "hash")["id"]
        b = store.create_user("b@example.com", "hash")["id"]
        mine = {store.create_task(a, "one", "FAMILY", True)["id"], store.create_task(a, "two", "HEALTH", False)["id"]}
        store.create_task(b, "theirs", "CAREER", True)
        assert {t["id"] for t in store.list_tasks_by_owner(a)} == mine
        assert store.list_tasks_by_owner("nobody") == []

    def test_partial_update(self, store):
        owner = store.create_user("ada@example.com", "hash")["id"]
        task = store.create_task(owner, "Buy milk", "ESSENTIALS", True)

        updated = store.update_task(task["id"], {"is_completed": True})
        assert updated["is_completed"] is True
        assert updated["title"] == "Buy milk"
        assert updated["is_today"] is True
        assert updated["updated_at"] > task["updated_at"]
        assert updated["created_at"] == task["created_at"]

        updated = store.update_task(task["id"], {"title": "Buy bread", "is_today": False, "category": "FAMILY"})
        assert (updated["title"], updated["is_today"], updated["category"]) == ("Buy bread", False, "FAMILY")
        assert updated["is_completed"] is True
        assert store.get_task(task["id"]) == updated

    def test_empty_update_touches_timestamp(self, store):
        owner = store.create_user("ada@example.com", "hash")["id"]
        task = store.create_task(owner, "Buy milk", "ESSENTIALS", True)
        updated = store.update_task(task["id"], {})
        assert updated["updated_at"] > task["updated_at"]
        assert updated["title"] == task["title"]

    def test_update_missing(self, store):
        assert store.update_task("missing", {"title": "x"}) is None

    def test_update_rejects_unknown_fields(self, store):
        owner = store.create_user("ada@example.com", "hash")["id"]
        task = store.create_task(owner, "Buy milk", "ESSENTIALS", True)
        with pytest.raises(ValueError):
            store.update_task(task["id"], {"user_id": "someone-else"})
        assert store.get_task(task["id"])["user_id"] == owner

    def test_delete(self, store):
        owner = store.create_user("ada@example.com", "hash")["id"]
        task = store.create_task(owner, "Buy milk", "ESSENTIALS", True)
        assert store.delete_task(task["id"]) is True
        assert store.delete_task(task["id"]) is False
        assert store.get_task(task["id"]) is None


def test_sqlite_persists_across_instances(tmp_path):
    path = str(tmp_path / "taskboard.db")
    first = SQLiteRepository(path)
    owner = first.create_user("ada@example.com", "hash")["id"]
    task = first.create_task(owner, "Buy milk", "ESSENTIALS", False)

    second = SQLiteRepository(path)
    assert second.get_task(task["id"]) == task
    assert second.get_user_by_email("ada@example.com")["id"] == owner
