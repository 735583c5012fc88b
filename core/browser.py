"""Read-only browsing of an arbitrary git repository"""

from __future__ import annotations

from pathlib import Path

from core.git_backend import GitBackend, GitCliBackend
from core.models import TreeEntry
from core.tree_parser import parse_ls_tree


class RepositoryBrowser:
    """Tree listing and blob reads at HEAD of any repository path."""

    def __init__(
        self,
        repo_path: str | Path,
        backend: GitBackend | None = None,
        default_branch: str = "master",
        git_binary: str = "git",
    ) -> None:
        self._repo_path = Path(repo_path)
        self._backend = backend or GitCliBackend(self._repo_path, git_binary=git_binary)
        self._default_branch = default_branch

    @property
    def backend(self) -> GitBackend:
        return self._backend

    # scope is expected as "{directory}/"; a scoped listing carries record ids
    def ls_tree_head(self, scope: str = "") -> list[TreeEntry]:
        raw = self._backend.run_tree_listing(scope)
        return parse_ls_tree(raw, is_db=scope != "")

    def ls_tree(self, scope: str) -> list[TreeEntry]:
        raw = self._backend.run_tree_listing(scope, recursive=True)
        return parse_ls_tree(raw, is_db=True)

    def show_file(self, path: str, branch: str | None = None) -> bytes:
        return self._backend.show_blob(branch or self._default_branch, path)
