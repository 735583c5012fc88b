"""Versioned JSON record store on top of a git repository.

Records of one store live under ``{database_address}/{database}`` either as
flat ``{id}.json`` files or as BagIt bags ``{id}/data/{id}.json``. Listings
and reads resolve against HEAD; every write or delete is followed by a
commit, so HEAD always reflects the last successful mutation.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from core.bagging import BagItPackager, BagPackager
from core.browser import RepositoryBrowser
from core.config import StoreConfig
from core.errors import RecordDecodeError, RecordNotFoundError
from core.filesystem import Filesystem, LocalFilesystem
from core.git_backend import GitBackend, GitCliBackend
from core.models import IdPolicy, LoadedRecord, RecordLayout, RecordPayload, TreeEntry
from core.paths import content_path, entry_content_path, record_file
from core.versioning import GitVersioner, Versioner

logger = logging.getLogger(__name__)

HEAD = "HEAD"


class GitRecordStore:
    def __init__(
        self,
        config: StoreConfig,
        backend: GitBackend | None = None,
        versioner: Versioner | None = None,
        packager: BagPackager | None = None,
    ) -> None:
        self.config = config
        self.layout = config.layout
        self.database = config.database.strip("/")
        self.last_inserted_id: int | None = None

        cli_backend = GitCliBackend(config.database_address, git_binary=config.git_binary)
        self._backend = backend or cli_backend
        self._versioner = versioner or GitVersioner(
            cli_backend, config.author_name, config.author_email
        )
        self._packager = packager
        if self.layout is RecordLayout.bagged and self._packager is None:
            self._packager = BagItPackager()

        self._browser = RepositoryBrowser(
            config.database_address,
            backend=self._backend,
            default_branch=config.default_branch,
        )

    @property
    def is_bag(self) -> bool:
        return self.layout is RecordLayout.bagged

    @property
    def scope(self) -> str:
        return f"{self.database}/"

    # Adapter scoped to the store directory, opened per operation
    def _filesystem(self) -> Filesystem:
        return LocalFilesystem(self.config.store_root)

    def _decode(self, raw: bytes, path: str) -> Any:
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise RecordDecodeError(path, str(exc)) from exc

    @staticmethod
    def encode(content: Any) -> str:
        return json.dumps(content, indent=4, ensure_ascii=False)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def ls_tree_head(self, scope: str = "") -> list[TreeEntry]:
        return self._browser.ls_tree_head(scope)

    def ls_tree(self) -> list[TreeEntry]:
        """Every blob under the store directory, recursively."""
        return self._browser.ls_tree(self.database)

    def show_file(self, path: str, branch: str | None = None) -> bytes:
        return self._browser.show_file(path, branch)

    def next_id(self) -> int:
        """Next identifier for an insert.

        With the count policy this is the number of listed records plus one,
        regardless of the ids they carry; after a deletion it can hand out an
        id that is still in use. The max policy uses the highest listed id.
        """
        entries = self.ls_tree_head(self.scope)
        if self.config.id_policy is IdPolicy.max:
            ids = [int(e.id) for e in entries if e.id]
            return max(ids, default=0) + 1
        return len(entries) + 1

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def exists(self, record_id: int) -> bool:
        path = content_path(self.database, record_id, self.layout)
        return bool(self._backend.run_tree_listing(path).strip())

    def find(self, record_id: int) -> LoadedRecord:
        path = content_path(self.database, record_id, self.layout)
        logger.debug("Resolving %s/%s to %s", self.database, record_id, path)

        if not self.exists(record_id):
            raise RecordNotFoundError(self.database, record_id)

        raw = self._backend.show_blob(HEAD, path)
        return LoadedRecord(
            id=int(record_id),
            database=self.database,
            file_content=self._decode(raw, path),
        )

    def find_all(self) -> list[TreeEntry]:
        # One unreadable entry fails the whole listing
        entries = self.ls_tree_head(self.scope)
        for entry in entries:
            path = entry_content_path(entry, self.layout)
            entry.file_content = self._decode(self._backend.show_blob(HEAD, path), path)
        return entries

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self, payload: RecordPayload | dict) -> str:
        """Insert (no id) or update (id given) a record and commit.

        Returns the JSON text that was written.
        """
        if isinstance(payload, dict):
            payload = RecordPayload.model_validate(payload)

        content = self.encode(payload.content)
        if payload.id is None:
            self._insert(content)
        else:
            self._update(payload.id, content)
        return content

    def _insert(self, content: str) -> int:
        filesystem = self._filesystem()
        record_id = self.next_id()
        filesystem.write(record_file(record_id, RecordLayout.flat), content)

        message = f"{self.database}: insert record {record_id}"
        try:
            if self.is_bag:
                self._packager.create_package(self.config.store_root, record_id)
            logger.info(message)
            self._versioner.save_version(message)
        except Exception:
            # An uncommitted leftover would block this id for every later insert
            logger.warning("Insert of %s/%s failed, removing written files", self.database, record_id)
            self._discard(filesystem, record_id)
            raise

        self.last_inserted_id = record_id
        return record_id

    def _update(self, record_id: int, content: str) -> None:
        filesystem = self._filesystem()
        filesystem.update(record_file(record_id, self.layout), content)
        if self.is_bag:
            self._packager.refresh_package(self.config.store_root, record_id)

        message = f"{self.database}: update record {record_id}"
        logger.info(message)
        self._versioner.save_version(message)

    def _discard(self, filesystem: Filesystem, record_id: int) -> None:
        flat_file = record_file(record_id, RecordLayout.flat)
        if filesystem.has(flat_file):
            filesystem.delete(flat_file)
        if filesystem.has(str(record_id)):
            filesystem.delete_dir(str(record_id))

    def delete(self, record_id: int) -> str | None:
        filesystem = self._filesystem()
        if self.is_bag:
            filesystem.delete_dir(str(record_id))
        else:
            filesystem.delete(record_file(record_id, self.layout))

        message = f"{self.database}: delete record {record_id}"
        logger.info(message)
        return self._versioner.save_version(message)
