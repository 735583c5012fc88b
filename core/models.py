"""Pydantic models for records, tree entries and store payloads"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class RecordLayout(str, Enum):
    flat = "flat"      # {database}/{id}.json
    bagged = "bagged"  # {database}/{id}/data/{id}.json


class IdPolicy(str, Enum):
    count = "count"  # listing size + 1
    max = "max"      # highest listed id + 1


# ---------------------------------------------------------------------------
# Tree listing
# ---------------------------------------------------------------------------

class TreeEntry(BaseModel):
    permissions: str
    type: str
    revision_hash: str
    address: str
    id: str | None = None
    file_content: Any = None


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class LoadedRecord(BaseModel):
    id: int
    database: str
    file_content: Any = None


class RecordPayload(BaseModel):
    id: int | None = None
    content: Any = Field(default_factory=dict)


class RecordBody(BaseModel):
    content: Any


class RepositoryRecord(BaseModel):
    # Content of a record in the "repositories" store
    address: str
    name: str | None = None

    model_config = {"extra": "allow"}
