import pytest

from techmock_app.core.collection_store import JsonFileStore, MemoryStore, RecordCollection
from techmock_app.core.models import User, UserRole


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return JsonFileStore(tmp_path / "data")


def test_absent_key_reads_as_empty_collection(store):
    assert not store.contains("techmock_questions")
    assert store.read_collection("techmock_questions") == []
    assert store.read_value("techmock_current_user") is None


def test_collection_round_trip(store):
    items = [{"id": "1", "text": "été"}, {"id": "2", "text": "b"}]
    store.write_collection("things", items)

    assert store.contains("things")
    assert store.read_collection("things") == items


def test_corrupt_blob_reads_as_empty_but_still_exists(store):
    store._write_text("things", "{not json")

    assert store.read_collection("things") == []
    assert store.contains("things")


def test_null_and_non_list_blobs_read_as_empty(store):
    store._write_text("nothing", "null")
    store._write_text("object", '{"id": "1"}')

    assert store.read_collection("nothing") == []
    assert store.read_collection("object") == []


def test_value_write_and_remove(store):
    store.write_value("session", {"id": "u1"})
    assert store.read_value("session") == {"id": "u1"}

    store.remove("session")
    store.remove("session")

    assert store.read_value("session") is None
    assert not store.contains("session")


def test_file_store_writes_one_file_per_key(tmp_path):
    store = JsonFileStore(tmp_path)
    store.write_collection("techmock_users", [])

    assert (tmp_path / "techmock_users.json").read_text(encoding="utf-8") == "[]"
    assert not list(tmp_path.glob("*.tmp"))


@pytest.mark.parametrize("key", ["", "../escape", "a/b", ".hidden"])
def test_file_store_rejects_unsafe_keys(tmp_path, key):
    with pytest.raises(ValueError):
        JsonFileStore(tmp_path).contains(key)


def test_record_collection_skips_malformed_records(memory_store):
    good = User(id="u1", name="Ada", email="ada@x.com", role=UserRole.STUDENT)
    memory_store.write_collection(
        "techmock_users",
        [good.to_dict(), {"id": "u2", "name": "No email"}, {**good.to_dict(), "id": "u3", "role": "wizard"}],
    )
    users = RecordCollection(memory_store, "techmock_users", User.from_dict)

    assert users.exists()
    assert users.load() == [good]


def test_record_collection_save_replaces_whole_collection(memory_store):
    users = RecordCollection(memory_store, "techmock_users", User.from_dict)
    first = User(id="u1", name="Ada", email="ada@x.com", role=UserRole.STUDENT)
    second = User(id="u2", name="Grace", email="grace@x.com", role=UserRole.ADMIN)

    users.save([first, second])
    users.save([second])

    assert users.load() == [second]


def test_failed_replace_leaves_no_temp_file(tmp_path, monkeypatch):
    store = JsonFileStore(tmp_path)
    store.write_collection("things", [{"id": "1"}])

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("techmock_app.core.collection_store.os.replace", fail_replace)

    with pytest.raises(OSError):
        store.write_collection("things", [{"id": "2"}])
    assert not list(tmp_path.glob("*.tmp"))
    assert store.read_collection("things") == [{"id": "1"}]
