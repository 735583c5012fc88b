"""FastAPI dependencies: settings and per-request stores"""

from __future__ import annotations

from fastapi import Depends, HTTPException

from core.config import Settings, settings
from core.record_store import GitRecordStore

REPOSITORIES_DATABASE = "repositories"


def get_settings() -> Settings:
    return settings


def _build_store(database: str, app_settings: Settings) -> GitRecordStore:
    try:
        config = app_settings.store_config(database)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown database '{database}'")
    return GitRecordStore(config)


# A fresh store per request; nothing is pooled between calls
def get_store(database: str, app_settings: Settings = Depends(get_settings)) -> GitRecordStore:
    return _build_store(database, app_settings)


def get_repositories_store(app_settings: Settings = Depends(get_settings)) -> GitRecordStore:
    return _build_store(REPOSITORIES_DATABASE, app_settings)
