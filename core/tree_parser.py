"""Parse `git ls-tree` output into TreeEntry objects."""

from __future__ import annotations

import re

from core.models import TreeEntry

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_NON_DIGIT = re.compile(r"\D")


def split_by_line(text: str) -> list[str]:
    """Split on any platform line terminator."""
    return _LINE_BREAK.split(text)


def extract_id(address: str) -> str:
    # Digits of the last path segment: "notes/5.json" -> "5", "clients/12" -> "12"
    last_segment = address.rstrip("/").rsplit("/", 1)[-1]
    return _NON_DIGIT.sub("", last_segment)


def parse_ls_tree(raw: str, is_db: bool = False) -> list[TreeEntry]:
    """Turn raw ls-tree output into entries, preserving the listing order.

    Each line reads ``<mode> <type> <hash>\\t<path>``. When ``is_db`` is set
    the listing was scoped to a store directory and every entry also gets
    the numeric ``id`` carried by its path.
    """
    entries: list[TreeEntry] = []
    for line in split_by_line(raw):
        if not line.strip():
            continue

        fields = line.split(None, 3)
        if len(fields) < 4:
            raise ValueError(f"Malformed ls-tree line: {line!r}")
        permissions, object_type, revision_hash, address = fields

        entry = TreeEntry(
            permissions=permissions,
            type=object_type,
            revision_hash=revision_hash,
            address=address,
        )
        if is_db:
            entry.id = extract_id(address)
        entries.append(entry)

    return entries
