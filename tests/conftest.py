"""Shared fixtures: throwaway git repositories and stores rooted in tmp_path"""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from core.config import StoreConfig
from core.git_backend import GitCliBackend
from core.models import IdPolicy, RecordLayout
from core.record_store import GitRecordStore
from core.versioning import GitVersioner


@pytest.fixture()
def repo(tmp_path) -> GitCliBackend:
    # Empty repository on branch "master", no commits yet
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    return GitCliBackend.init(tmp_path / "repo")


@pytest.fixture()
def commit(repo: GitCliBackend):
    versioner = GitVersioner(repo)

    def _commit(message: str = "seed") -> str | None:
        return versioner.save_version(message)

    return _commit


@pytest.fixture()
def write_file(repo: GitCliBackend):
    # Write straight into the working tree, bypassing the store
    def _write(relative: str, content: str) -> Path:
        path = repo.repo_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def make_store(repo: GitCliBackend):
    def _make(
        database: str = "notes",
        layout: RecordLayout = RecordLayout.flat,
        id_policy: IdPolicy = IdPolicy.count,
        **kwargs,
    ) -> GitRecordStore:
        config = StoreConfig(
            database_address=repo.repo_path,
            database=database,
            layout=layout,
            id_policy=id_policy,
        )
        return GitRecordStore(config, **kwargs)

    return _make
