"""Tests for the git record store: allocation, reads, writes, versioning"""

from __future__ import annotations

import json

import pytest

from core.config import StoreConfig
from core.errors import (
    BackendError,
    FileExistsAdapterError,
    FileMissingAdapterError,
    RecordDecodeError,
    RecordNotFoundError,
)
from core.git_backend import GitCliBackend
from core.models import IdPolicy, RecordPayload
from core.record_store import GitRecordStore
from core.versioning import GitVersioner


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeBackend:
    """Serves a canned listing; records the scopes it was asked for."""

    def __init__(self, listing: str = "") -> None:
        self.listing = listing
        self.scopes: list[str] = []

    def run_tree_listing(self, scope: str = "", recursive: bool = False) -> str:
        self.scopes.append(scope)
        return self.listing

    def show_blob(self, branch: str, path: str) -> bytes:
        raise AssertionError("not expected")

    def run(self, *args: str) -> str:
        raise AssertionError("not expected")


class RecordingVersioner:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def save_version(self, message: str) -> str | None:
        self.messages.append(message)
        return None


class FailingOnceVersioner:
    """Commits through git, except for the call numbered `fail_on`."""

    def __init__(self, repo: GitCliBackend, fail_on: int) -> None:
        self._inner = GitVersioner(repo)
        self._fail_on = fail_on
        self.calls = 0

    def save_version(self, message: str) -> str | None:
        self.calls += 1
        if self.calls == self._fail_on:
            raise BackendError(["git", "commit"], 128, "fatal: unable to write new index file")
        return self._inner.save_version(message)


def _store_with_listing(tmp_path, listing: str, id_policy: IdPolicy = IdPolicy.count) -> GitRecordStore:
    config = StoreConfig(database_address=tmp_path, database="notes", id_policy=id_policy)
    return GitRecordStore(config, backend=FakeBackend(listing), versioner=RecordingVersioner())


def _commit_count(repo: GitCliBackend) -> int:
    return int(repo.run("rev-list", "--count", "HEAD").strip())


LISTING = (
    "100644 blob aaa\tnotes/2.json\n"
    "100644 blob bbb\tnotes/7.json\n"
    "100644 blob ccc\tnotes/9.json\n"
)


# ---------------------------------------------------------------------------
# Identifier allocation
# ---------------------------------------------------------------------------

class TestNextId:
    def test_count_policy_ignores_id_values(self, tmp_path):
        store = _store_with_listing(tmp_path, LISTING)
        assert store.next_id() == 4

    def test_lists_the_store_directory(self, tmp_path):
        store = _store_with_listing(tmp_path, LISTING)
        store.next_id()
        assert store._backend.scopes == ["notes/"]

    def test_max_policy_uses_highest_id(self, tmp_path):
        store = _store_with_listing(tmp_path, LISTING, id_policy=IdPolicy.max)
        assert store.next_id() == 10

    def test_empty_store_starts_at_one(self, tmp_path):
        assert _store_with_listing(tmp_path, "").next_id() == 1
        assert _store_with_listing(tmp_path, "", id_policy=IdPolicy.max).next_id() == 1


# ---------------------------------------------------------------------------
# Flat store against a real repository
# ---------------------------------------------------------------------------

class TestFlatStore:
    def test_insert_then_find(self, make_store):
        store = make_store()
        store.save({"id": None, "content": {"title": "first", "tags": ["a"]}})

        assert store.last_inserted_id == 1
        assert store.find(1).file_content == {"title": "first", "tags": ["a"]}

    def test_save_returns_written_json(self, make_store, repo):
        store = make_store()
        content = store.save(RecordPayload(content={"title": "x"}))

        assert json.loads(content) == {"title": "x"}
        assert (repo.repo_path / "notes" / "1.json").read_text(encoding="utf-8") == content

    def test_find_is_repeatable(self, make_store):
        store = make_store()
        store.save({"id": None, "content": {"n": 1}})
        assert store.find(1) == store.find(1)

    def test_ids_increase_with_each_insert(self, make_store):
        store = make_store()
        for n in range(3):
            store.save({"id": None, "content": {"n": n}})
        assert store.last_inserted_id == 3
        assert store.find(3).file_content == {"n": 2}

    def test_update_overwrites(self, make_store):
        store = make_store()
        store.save({"id": None, "content": {"title": "old"}})
        store.save({"id": 1, "content": {"title": "new"}})
        assert store.find(1).file_content == {"title": "new"}

    def test_update_missing_record_raises(self, make_store):
        store = make_store()
        with pytest.raises(FileMissingAdapterError):
            store.save({"id": 5, "content": {}})

    def test_every_mutation_creates_a_version(self, make_store, repo):
        store = make_store()
        store.save({"id": None, "content": {"a": 1}})
        store.save({"id": None, "content": {"a": 2}})
        store.save({"id": 1, "content": {"a": 3}})
        store.delete(2)
        assert _commit_count(repo) == 4
        assert "delete record 2" in repo.run("log", "-1", "--format=%s")

    def test_unchanged_update_creates_no_version(self, make_store, repo):
        store = make_store()
        store.save({"id": None, "content": {"a": 1}})
        store.save({"id": 1, "content": {"a": 1}})
        assert _commit_count(repo) == 1

    def test_find_missing_raises_not_found(self, make_store):
        with pytest.raises(RecordNotFoundError):
            make_store().find(1)

    def test_delete_then_find_raises_not_found(self, make_store):
        store = make_store()
        store.save({"id": None, "content": {"a": 1}})
        store.delete(1)
        with pytest.raises(RecordNotFoundError):
            store.find(1)

    def test_delete_missing_raises(self, make_store):
        with pytest.raises(FileMissingAdapterError):
            make_store().delete(3)

    def test_uncommitted_file_is_not_visible(self, make_store, write_file):
        store = make_store()
        store.save({"id": None, "content": {"a": 1}})
        write_file("notes/2.json", '{"a": 2}')
        with pytest.raises(RecordNotFoundError):
            store.find(2)

    def test_count_policy_collides_after_deletion(self, make_store):
        store = make_store()
        for n in range(3):
            store.save({"id": None, "content": {"n": n}})
        store.delete(1)
        # Two records remain, so the next id is 3 which is still taken
        with pytest.raises(FileExistsAdapterError):
            store.save({"id": None, "content": {"n": 3}})

    def test_max_policy_survives_deletion(self, make_store):
        store = make_store(id_policy=IdPolicy.max)
        for n in range(3):
            store.save({"id": None, "content": {"n": n}})
        store.delete(1)
        store.save({"id": None, "content": {"n": 3}})
        assert store.last_inserted_id == 4

    def test_stores_do_not_see_each_other(self, make_store):
        notes = make_store("notes")
        users = make_store("users")
        notes.save({"id": None, "content": {"kind": "note"}})
        users.save({"id": None, "content": {"kind": "user"}})

        assert notes.find(1).file_content == {"kind": "note"}
        assert users.find(1).file_content == {"kind": "user"}
        assert len(notes.find_all()) == 1


# ---------------------------------------------------------------------------
# find_all / listings
# ---------------------------------------------------------------------------

class TestFindAll:
    def test_empty_store(self, make_store):
        assert make_store().find_all() == []

    def test_returns_every_record_with_content(self, make_store):
        store = make_store()
        for n in range(3):
            store.save({"id": None, "content": {"n": n}})

        entries = store.find_all()
        assert [e.id for e in entries] == ["1", "2", "3"]
        assert [e.file_content for e in entries] == [{"n": 0}, {"n": 1}, {"n": 2}]
        assert all(e.type == "blob" for e in entries)

    def test_one_malformed_entry_fails_the_call(self, make_store, write_file, commit):
        store = make_store()
        store.save({"id": None, "content": {"n": 1}})
        write_file("notes/2.json", "{not json")
        commit()

        with pytest.raises(RecordDecodeError):
            store.find_all()

    def test_find_malformed_raises_decode_error(self, make_store, write_file, commit):
        write_file("notes/1.json", "[1, 2")
        commit()
        with pytest.raises(RecordDecodeError):
            make_store().find(1)

    def test_ls_tree_head_root_has_no_ids(self, make_store):
        store = make_store()
        store.save({"id": None, "content": {}})
        entries = store.ls_tree_head()
        assert [(e.address, e.type, e.id) for e in entries] == [("notes", "tree", None)]

    def test_non_utf8_record_raises_decode_error(self, make_store, repo, commit):
        (repo.repo_path / "notes").mkdir()
        (repo.repo_path / "notes" / "1.json").write_bytes(b"\xff\xfe{}")
        commit()
        with pytest.raises(RecordDecodeError):
            make_store().find(1)


# ---------------------------------------------------------------------------
# Failed inserts
# ---------------------------------------------------------------------------

class TestFailedInsert:
    def test_failed_version_removes_written_file(self, make_store, repo):
        versioner = FailingOnceVersioner(repo, fail_on=2)
        store = make_store(versioner=versioner)
        store.save({"id": None, "content": {"n": 1}})

        with pytest.raises(BackendError):
            store.save({"id": None, "content": {"n": 2}})

        assert not (repo.repo_path / "notes" / "2.json").exists()
        assert store.last_inserted_id == 1

    def test_next_insert_reuses_the_id(self, make_store, repo):
        store = make_store(versioner=FailingOnceVersioner(repo, fail_on=2))
        store.save({"id": None, "content": {"n": 1}})
        with pytest.raises(BackendError):
            store.save({"id": None, "content": {"n": 2}})

        store.save({"id": None, "content": {"n": 3}})
        assert store.last_inserted_id == 2
        assert store.find(2).file_content == {"n": 3}
        assert _commit_count(repo) == 2


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def test_store_config_resolves_relative_address(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = StoreConfig(database_address="data", database="notes")

    assert config.database_address.is_absolute()
    assert config.database_address == tmp_path.resolve() / "data"
    assert config.store_root == tmp_path.resolve() / "data" / "notes"


# ---------------------------------------------------------------------------
# show_file
# ---------------------------------------------------------------------------

class TestShowFile:
    def test_reads_committed_content(self, make_store):
        store = make_store()
        written = store.save({"id": None, "content": {"a": 1}})
        assert store.show_file("notes/1.json") == written.encode("utf-8")

    def test_unknown_branch_raises_backend_error(self, make_store):
        store = make_store()
        store.save({"id": None, "content": {"a": 1}})
        with pytest.raises(BackendError):
            store.show_file("notes/1.json", branch="no-such-branch")
