"""Commit the current working tree as a new version."""

from __future__ import annotations

import logging
from typing import Protocol

from core.git_backend import GitCliBackend

logger = logging.getLogger(__name__)


class Versioner(Protocol):
    def save_version(self, message: str) -> str | None:
        """Persist the current state as a new version; return its id."""
        ...


class GitVersioner:
    """Stages everything under the repository root and commits it."""

    def __init__(
        self,
        backend: GitCliBackend,
        author_name: str = "record-store",
        author_email: str = "record-store@localhost",
    ) -> None:
        self._backend = backend
        self._author_name = author_name
        self._author_email = author_email

    def save_version(self, message: str) -> str | None:
        self._backend.run("add", "--all")

        # Rewriting a record with identical content leaves nothing to commit
        if not self._backend.status().strip():
            logger.info("Nothing changed, no version created (%s)", message)
            return None

        self._backend.run(
            "-c", f"user.name={self._author_name}",
            "-c", f"user.email={self._author_email}",
            "commit", "--quiet", "-m", message,
        )
        revision = self._backend.run("rev-parse", "HEAD").strip()
        logger.info("Created version %s: %s", revision[:12], message)
        return revision
