"""Git backend interface and `git` CLI implementation."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from core.errors import BackendError

logger = logging.getLogger(__name__)


class GitBackend(Protocol):
    """The two read primitives the store consumes, plus a raw escape hatch."""

    def run_tree_listing(self, scope: str = "", recursive: bool = False) -> str:
        """Return raw `ls-tree HEAD` output, optionally scoped to a path."""
        ...

    def show_blob(self, branch: str, path: str) -> bytes:
        """Return the raw content of `path` as committed on `branch`."""
        ...

    def run(self, *args: str) -> str:
        """Run an arbitrary git subcommand and return its stdout."""
        ...


class GitCliBackend:
    """Runs the git executable against a repository working tree.

    Every call is synchronous: the process is spawned, awaited and its
    output returned. A non-zero exit raises BackendError.
    """

    def __init__(self, repo_path: str | Path, git_binary: str = "git") -> None:
        self._repo_path = Path(repo_path).expanduser().resolve()
        self._git = git_binary

    @property
    def repo_path(self) -> Path:
        return self._repo_path

    @classmethod
    def init(
        cls,
        repo_path: str | Path,
        initial_branch: str = "master",
        git_binary: str = "git",
    ) -> GitCliBackend:
        """Create a repository at `repo_path` (if needed) and open it."""
        path = Path(repo_path)
        path.mkdir(parents=True, exist_ok=True)
        backend = cls(path, git_binary=git_binary)
        backend.run("init", "--quiet")
        # Portable across git versions that predate --initial-branch
        backend.run("symbolic-ref", "HEAD", f"refs/heads/{initial_branch}")
        logger.info("Initialized git repository at %s", path)
        return backend

    def run_bytes(self, *args: str) -> bytes:
        command = [self._git, *args]
        logger.debug("git %s (cwd=%s)", " ".join(args), self._repo_path)
        try:
            result = subprocess.run(
                command,
                cwd=self._repo_path,
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            raise BackendError(command, None, str(exc)) from exc

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace")
            raise BackendError(command, result.returncode, stderr)
        return result.stdout

    def run(self, *args: str) -> str:
        return self.run_bytes(*args).decode("utf-8", errors="surrogateescape")

    def has_head(self) -> bool:
        try:
            self.run("rev-parse", "--verify", "--quiet", "HEAD")
        except BackendError as exc:
            if exc.returncode is None:
                raise
            return False
        return True

    def run_tree_listing(self, scope: str = "", recursive: bool = False) -> str:
        # A repository without commits has nothing to list
        if not self.has_head():
            logger.debug("No HEAD in %s, empty listing", self._repo_path)
            return ""

        # Unquoted paths, so non-ASCII names can be passed back to show
        args = ["-c", "core.quotePath=false", "ls-tree"]
        if recursive:
            args.append("-r")
        args.append("HEAD")
        if scope:
            args.append(scope)
        return self.run(*args)

    def show_blob(self, branch: str, path: str) -> bytes:
        # Raw blob content, no decoding or newline translation
        return self.run_bytes("show", f"{branch}:{path.lstrip('/')}")

    def status(self) -> str:
        return self.run("status", "--porcelain")
