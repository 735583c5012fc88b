"""Browse the git repositories registered in the "repositories" store"""

from __future__ import annotations

import mimetypes

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import ValidationError

from api.deps import get_repositories_store, get_settings
from core.browser import RepositoryBrowser
from core.config import Settings
from core.models import RepositoryRecord, TreeEntry
from core.record_store import GitRecordStore

router = APIRouter(prefix="/repositories", tags=["repositories"])


def _browser_for(record_id: int, store: GitRecordStore, app_settings: Settings) -> RepositoryBrowser:
    record = store.find(record_id)
    try:
        repository = RepositoryRecord.model_validate(record.file_content)
    except ValidationError:
        raise HTTPException(status_code=422, detail=f"Repository {record_id} has no address")
    return RepositoryBrowser(
        repository.address,
        default_branch=app_settings.DEFAULT_BRANCH,
        git_binary=app_settings.GIT_BINARY,
    )


@router.get("/{record_id}/tree", response_model=list[TreeEntry], response_model_exclude_none=True)
def get_repository_tree(
    record_id: int,
    store: GitRecordStore = Depends(get_repositories_store),
    app_settings: Settings = Depends(get_settings),
) -> list[TreeEntry]:
    return _browser_for(record_id, store, app_settings).ls_tree_head()


@router.get("/{record_id}/assets/{asset}")
def get_asset(
    record_id: int,
    asset: int,
    branch: str | None = None,
    store: GitRecordStore = Depends(get_repositories_store),
    app_settings: Settings = Depends(get_settings),
) -> Response:
    browser = _browser_for(record_id, store, app_settings)
    assets = browser.ls_tree_head()
    if not 0 <= asset < len(assets):
        raise HTTPException(status_code=404, detail=f"Asset {asset} not found")
    address = assets[asset].address
    media_type, _ = mimetypes.guess_type(address)
    return Response(
        content=browser.show_file(address, branch),
        media_type=media_type or "application/octet-stream",
    )
