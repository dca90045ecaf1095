import asyncio
import json
import os
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from datapoint_engine.ingestion.normalizer import from_raw_values
from datapoint_engine.models import StoredRow

SCHEMA_VERSION = 1

_COLUMNS = ("id", "created_at", "dataset_id", "data", "target", "metadata", "index_in_batch")


def _conn(db_path: str):
    dirname = os.path.dirname(db_path)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    return sqlite3.connect(db_path, check_same_thread=False)


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _row_to_stored(row: tuple) -> StoredRow:
    rec = dict(zip(_COLUMNS, row))
    return StoredRow(
        id=rec["id"],
        created_at=rec["created_at"],
        dataset_id=rec["dataset_id"],
        data=json.loads(rec["data"]),
        target=json.loads(rec["target"]) if rec["target"] is not None else None,
        metadata=json.loads(rec["metadata"]),
    )


def init_db(db_path: str):
    with _conn(db_path) as cx:
        cx.execute("CREATE TABLE IF NOT EXISTS schema_meta(version INTEGER NOT NULL)")
        version = cx.execute("SELECT version FROM schema_meta LIMIT 1").fetchone()
        cx.execute("""CREATE TABLE IF NOT EXISTS datapoints(
            id TEXT PRIMARY KEY,
            created_at TEXT NOT NULL,
            dataset_id TEXT NOT NULL,
            data TEXT NOT NULL,
            target TEXT,
            metadata TEXT NOT NULL,
            index_in_batch INTEGER NOT NULL
        )""")
        cx.execute(
            "CREATE INDEX IF NOT EXISTS datapoints_dataset_idx "
            "ON datapoints(dataset_id, created_at)"
        )
        if not version:
            cx.execute("INSERT INTO schema_meta(version) VALUES (?)", (SCHEMA_VERSION,))
        cx.commit()


def _insert_raw(db_path: str, dataset_id: uuid.UUID, values: Iterable[Any]) -> list[StoredRow]:
    datapoints = from_raw_values(dataset_id, values)
    if not datapoints:
        return []

    created_at = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    rows = [
        (
            str(dp.id),
            created_at,
            str(dataset_id),
            _dumps(dp.data),
            _dumps(dp.target) if dp.target is not None else None,
            _dumps(dp.metadata),
            i,
        )
        for i, dp in enumerate(datapoints)
    ]
    # one transaction for the whole batch: either every row lands or none does
    with _conn(db_path) as cx:
        cx.executemany(
            f"INSERT INTO datapoints({','.join(_COLUMNS)}) VALUES ({','.join(['?'] * len(_COLUMNS))})",
            rows,
        )
    return [_row_to_stored(r) for r in rows]


async def insert_raw(db_path: str, dataset_id: uuid.UUID, values: Iterable[Any]) -> list[StoredRow]:
    """
    Normalize `values` into datapoints of `dataset_id` and persist them as one batch.
    JSON nulls are dropped. Rows come back in input order.
    """
    return await asyncio.to_thread(_insert_raw, db_path, dataset_id, list(values))


def _list_datapoints(
    db_path: str, dataset_id: uuid.UUID, page_number: int, page_size: int
) -> tuple[list[StoredRow], int]:
    with _conn(db_path) as cx:
        rows = cx.execute(
            f"SELECT {','.join(_COLUMNS)} FROM datapoints WHERE dataset_id=? "
            "ORDER BY created_at DESC, index_in_batch ASC, rowid ASC LIMIT ? OFFSET ?",
            (str(dataset_id), page_size, page_number * page_size),
        ).fetchall()
        (total,) = cx.execute(
            "SELECT COUNT(*) FROM datapoints WHERE dataset_id=?", (str(dataset_id),)
        ).fetchone()
    return [_row_to_stored(r) for r in rows], total


async def list_datapoints(
    db_path: str, dataset_id: uuid.UUID, page_number: int = 0, page_size: int = 50
) -> tuple[list[StoredRow], int]:
    """One page of a dataset's datapoints (newest batch first) plus the dataset's total count."""
    return await asyncio.to_thread(_list_datapoints, db_path, dataset_id, page_number, page_size)


def _get_datapoint(
    db_path: str, dataset_id: uuid.UUID, datapoint_id: uuid.UUID
) -> Optional[StoredRow]:
    with _conn(db_path) as cx:
        row = cx.execute(
            f"SELECT {','.join(_COLUMNS)} FROM datapoints WHERE dataset_id=? AND id=?",
            (str(dataset_id), str(datapoint_id)),
        ).fetchone()
    return _row_to_stored(row) if row else None


async def get_datapoint(
    db_path: str, dataset_id: uuid.UUID, datapoint_id: uuid.UUID
) -> Optional[StoredRow]:
    return await asyncio.to_thread(_get_datapoint, db_path, dataset_id, datapoint_id)


def _delete_datapoints(db_path: str, dataset_id: uuid.UUID, ids: list[uuid.UUID]) -> int:
    if not ids:
        return 0
    with _conn(db_path) as cx:
        cur = cx.execute(
            f"DELETE FROM datapoints WHERE dataset_id=? AND id IN ({','.join(['?'] * len(ids))})",
            (str(dataset_id), *(str(i) for i in ids)),
        )
        return cur.rowcount


async def delete_datapoints(db_path: str, dataset_id: uuid.UUID, ids: Iterable[uuid.UUID]) -> int:
    return await asyncio.to_thread(_delete_datapoints, db_path, dataset_id, list(ids))
