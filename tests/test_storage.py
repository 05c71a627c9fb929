from __future__ import annotations

import sqlite3

import pytest

from times_trainer import storage
from times_trainer.storage import STORAGE_KEY, MemoryKeyValueStore, SqliteKeyValueStore


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "data" / "times-trainer-test.db"


def test_sqlite_store_creates_parent_dir_and_reads_absent_as_none(db_path):
    kv = SqliteKeyValueStore(db_path)
    assert db_path.parent.exists()
    assert kv.read(STORAGE_KEY) is None


def test_sqlite_store_overwrites_existing_value(db_path):
    kv = SqliteKeyValueStore(db_path)
    kv.write(STORAGE_KEY, "{}")
    kv.write(STORAGE_KEY, '{"1x1": {"correct": 1, "wrong": 0}}')

    reopened = SqliteKeyValueStore(db_path)
    assert reopened.read(STORAGE_KEY) == '{"1x1": {"correct": 1, "wrong": 0}}'
    with sqlite3.connect(db_path) as connection:
        (count,) = connection.execute("SELECT COUNT(*) FROM kv").fetchone()
    assert count == 1


def test_sqlite_store_defaults_to_module_db_path(tmp_path, monkeypatch):
    path = tmp_path / "default.db"
    monkeypatch.setattr(storage, "DB_PATH", path)
    kv = SqliteKeyValueStore()
    assert kv.path == path


def test_sqlite_read_of_corrupt_file_is_treated_as_absent(db_path):
    kv = SqliteKeyValueStore(db_path)
    db_path.write_bytes(b"this is not a sqlite database" * 100)
    assert kv.read(STORAGE_KEY) is None


def test_memory_store_round_trip():
    kv = MemoryKeyValueStore({"other": "x"})
    kv.write(STORAGE_KEY, "{}")
    assert kv.read(STORAGE_KEY) == "{}"
    assert kv.read("missing") is None
    assert kv.read("other") == "x"


def test_sqlite_store_on_corrupt_file_at_startup_reads_as_absent(db_path):
    db_path.parent.mkdir(parents=True)
    db_path.write_bytes(b"this is not a sqlite database" * 100)

    kv = SqliteKeyValueStore(db_path)

    assert kv.read(STORAGE_KEY) is None


def test_trainer_loads_empty_progress_from_corrupt_file(db_path):
    from times_trainer.trainer import Trainer

    db_path.parent.mkdir(parents=True)
    db_path.write_bytes(b"\x00garbage" * 500)

    trainer = Trainer.load(SqliteKeyValueStore(db_path))

    assert len(trainer.store) == 0
    assert trainer.summary().total_correct == 0
    assert trainer.current is not None


def test_connect_closes_connection_on_exit(db_path):
    kv = SqliteKeyValueStore(db_path)
    with kv.connect() as connection:
        connection.execute("SELECT 1")

    with pytest.raises(sqlite3.ProgrammingError):
        connection.execute("SELECT 1")


def test_connect_closes_connection_when_body_raises(db_path):
    kv = SqliteKeyValueStore(db_path)
    with pytest.raises(RuntimeError):
        with kv.connect() as connection:
            raise RuntimeError("boom")

    with pytest.raises(sqlite3.ProgrammingError):
        connection.execute("SELECT 1")
