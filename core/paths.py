"""Record path resolution for flat and bagged stores"""

from __future__ import annotations

from core.models import RecordLayout, TreeEntry
from core.tree_parser import extract_id

RECORD_SUFFIX = ".json"
BAG_PAYLOAD_DIR = "data"


# Location of a record relative to its store directory, without suffix
def locate(record_id: int | str, layout: RecordLayout) -> str:
    if layout is RecordLayout.bagged:
        return f"/{record_id}/{BAG_PAYLOAD_DIR}/{record_id}"
    return f"/{record_id}"


# Content file of a record, relative to the store directory
def record_file(record_id: int | str, layout: RecordLayout) -> str:
    return locate(record_id, layout).lstrip("/") + RECORD_SUFFIX


# Content file of a record, relative to the repository root
def content_path(database: str, record_id: int | str, layout: RecordLayout) -> str:
    return f"{database.strip('/')}{locate(record_id, layout)}{RECORD_SUFFIX}"


# Content file behind a depth-one listing entry, relative to the repository root
def entry_content_path(entry: TreeEntry, layout: RecordLayout) -> str:
    if layout is RecordLayout.bagged:
        record_id = entry.id or extract_id(entry.address)
        return f"{entry.address}/{BAG_PAYLOAD_DIR}/{record_id}{RECORD_SUFFIX}"
    return entry.address
