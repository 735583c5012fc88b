"""Record endpoints: list, get, insert, update, delete"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from api.deps import get_store
from core.models import LoadedRecord, RecordBody, RecordPayload, TreeEntry
from core.record_store import GitRecordStore

router = APIRouter(prefix="/records/{database}", tags=["records"])

JSON_MEDIA_TYPE = "application/json"


@router.get("", response_model=list[TreeEntry], response_model_exclude_none=True)
def list_records(store: GitRecordStore = Depends(get_store)) -> list[TreeEntry]:
    return store.find_all()


@router.get("/{record_id}", response_model=LoadedRecord)
def get_record(record_id: int, store: GitRecordStore = Depends(get_store)) -> LoadedRecord:
    return store.find(record_id)


@router.post("", status_code=201)
def create_record(body: RecordBody, store: GitRecordStore = Depends(get_store)) -> Response:
    content = store.save(RecordPayload(id=None, content=body.content))
    return Response(
        content=content,
        status_code=201,
        media_type=JSON_MEDIA_TYPE,
        headers={"Location": f"/records/{store.database}/{store.last_inserted_id}"},
    )


@router.put("/{record_id}")
def update_record(
    record_id: int,
    body: RecordBody,
    store: GitRecordStore = Depends(get_store),
) -> Response:
    content = store.save(RecordPayload(id=record_id, content=body.content))
    return Response(content=content, media_type=JSON_MEDIA_TYPE)


@router.delete("/{record_id}", status_code=204)
def delete_record(record_id: int, store: GitRecordStore = Depends(get_store)) -> Response:
    store.delete(record_id)
    return Response(status_code=204)
