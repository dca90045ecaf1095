# ============================================================================
# api/routes/datasets.py  →  /datasets/{dataset_id}/... endpoints
# ============================================================================
import logging
import sqlite3
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from datapoint_engine.api import deps
from datapoint_engine.api.models import (
    DeleteDatapointsRequest,
    DeleteDatapointsResponse,
    IndexRequest,
    IndexResponse,
    PaginatedDatapoints,
)
from datapoint_engine.errors import DecodeError, ProjectionError, UnsupportedFormatError
from datapoint_engine.ingestion.ingest_datapoints import insert_datapoints_from_file
from datapoint_engine.ingestion.normalizer import from_stored_row
from datapoint_engine.models import Datapoint
from datapoint_engine.storage import sqlite_store
from datapoint_engine.vector_store.pinecone_index import index_datapoints

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/datasets/{dataset_id}", tags=["datasets"])

# page size used when walking a whole dataset for indexing
_SCAN_PAGE_SIZE = 500


@router.post("/datapoints/upload", response_model=list[Datapoint])
async def upload_datapoints(
    dataset_id: UUID,
    file: UploadFile = File(...),
    db_path: str = Depends(deps.get_db_path),
):
    file_bytes = await file.read()
    try:
        return await insert_datapoints_from_file(file_bytes, file.filename or "", dataset_id, db_path)
    except (DecodeError, UnsupportedFormatError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except sqlite3.Error as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to persist datapoints"
        ) from e


@router.post("/datapoints", response_model=list[Datapoint])
async def create_datapoints(
    dataset_id: UUID,
    values: list[Any] = Body(...),
    db_path: str = Depends(deps.get_db_path),
):
    try:
        rows = await sqlite_store.insert_raw(db_path, dataset_id, values)
    except sqlite3.Error as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to persist datapoints"
        ) from e
    return [from_stored_row(row) for row in rows]


@router.get("/datapoints", response_model=PaginatedDatapoints)
async def list_datapoints(
    dataset_id: UUID,
    page_number: int = Query(0, ge=0),
    page_size: int = Query(50, ge=1, le=500),
    db_path: str = Depends(deps.get_db_path),
):
    rows, total = await sqlite_store.list_datapoints(db_path, dataset_id, page_number, page_size)
    return PaginatedDatapoints(items=[from_stored_row(r) for r in rows], total_count=total)


@router.get("/datapoints/{datapoint_id}", response_model=Datapoint)
async def get_datapoint(
    dataset_id: UUID,
    datapoint_id: UUID,
    db_path: str = Depends(deps.get_db_path),
):
    row = await sqlite_store.get_datapoint(db_path, dataset_id, datapoint_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Datapoint not found")
    return from_stored_row(row)


@router.delete("/datapoints", response_model=DeleteDatapointsResponse)
async def delete_datapoints(
    dataset_id: UUID,
    req: DeleteDatapointsRequest,
    db_path: str = Depends(deps.get_db_path),
):
    deleted = await sqlite_store.delete_datapoints(db_path, dataset_id, req.ids)
    return DeleteDatapointsResponse(deleted=deleted)


@router.post("/index", response_model=IndexResponse)
async def index_dataset(
    dataset_id: UUID,
    req: IndexRequest,
    db_path: str = Depends(deps.get_db_path),
    index=Depends(deps.get_pinecone_index),
    batch_size: int = Depends(deps.get_index_batch_size),
):
    datapoints: list[Datapoint] = []
    page_number = 0
    while True:
        rows, total = await sqlite_store.list_datapoints(
            db_path, dataset_id, page_number, _SCAN_PAGE_SIZE
        )
        datapoints.extend(from_stored_row(r) for r in rows)
        page_number += 1
        if not rows or len(datapoints) >= total:
            break

    try:
        indexed = await run_in_threadpool(
            index_datapoints, index, datapoints, req.index_column, batch_size
        )
    except ProjectionError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    logger.info("indexed %d datapoints of dataset %s on '%s'", indexed, dataset_id, req.index_column)
    return IndexResponse(indexed=indexed)
