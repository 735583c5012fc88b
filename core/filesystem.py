"""Local filesystem adapter scoped to a single root directory"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Protocol

from core.errors import AdapterError, FileExistsAdapterError, FileMissingAdapterError

logger = logging.getLogger(__name__)


class Filesystem(Protocol):
    """Write/update/delete relative to the adapter's root."""

    def write(self, path: str, content: str) -> None:
        """Create a new file. Fails if it already exists."""
        ...

    def update(self, path: str, content: str) -> None:
        """Overwrite an existing file. Fails if it is missing."""
        ...

    def delete(self, path: str) -> None:
        """Remove a file. Fails if it is missing."""
        ...

    def delete_dir(self, path: str) -> None:
        """Remove a directory and everything below it."""
        ...

    def has(self, path: str) -> bool:
        ...


class LocalFilesystem:
    """Filesystem adapter rooted at a local directory.

    The root is created on construction. Paths are relative to the root and
    may not escape it.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise AdapterError("create root", str(self._root), str(exc)) from exc

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, path: str) -> Path:
        target = (self._root / path.lstrip("/")).resolve()
        root = self._root.resolve()
        if target != root and root not in target.parents:
            raise AdapterError("resolve", path, "path is outside of the root")
        return target

    def has(self, path: str) -> bool:
        return self._resolve(path).exists()

    def write(self, path: str, content: str) -> None:
        target = self._resolve(path)
        if target.exists():
            raise FileExistsAdapterError("write", path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise AdapterError("write", path, str(exc)) from exc
        logger.debug("Wrote %s", target)

    def update(self, path: str, content: str) -> None:
        target = self._resolve(path)
        if not target.is_file():
            raise FileMissingAdapterError("update", path)
        try:
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise AdapterError("update", path, str(exc)) from exc
        logger.debug("Updated %s", target)

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        if not target.is_file():
            raise FileMissingAdapterError("delete", path)
        try:
            target.unlink()
        except OSError as exc:
            raise AdapterError("delete", path, str(exc)) from exc
        logger.debug("Deleted %s", target)

    def delete_dir(self, path: str) -> None:
        target = self._resolve(path)
        if target == self._root.resolve():
            raise AdapterError("delete", path, "refusing to delete the root")
        if not target.is_dir():
            raise FileMissingAdapterError("delete", path)
        try:
            shutil.rmtree(target)
        except OSError as exc:
            raise AdapterError("delete", path, str(exc)) from exc
        logger.debug("Deleted directory %s", target)
