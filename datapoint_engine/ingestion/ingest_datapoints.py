# ingestion/ingest_datapoints.py
import logging
import uuid
from typing import Callable

from datapoint_engine.errors import UnsupportedFormatError
from datapoint_engine.ingestion.decoders import (
    DecodeResult,
    read_bytes_csv,
    read_bytes_json,
    read_bytes_jsonl,
)
from datapoint_engine.ingestion.normalizer import from_stored_row
from datapoint_engine.models import Datapoint
from datapoint_engine.storage import sqlite_store

logger = logging.getLogger(__name__)

# extension (case-sensitive, without the dot) → reader
READERS: dict[str, Callable[[bytes], DecodeResult]] = {
    "jsonl": read_bytes_jsonl,
    "json": read_bytes_json,
    "csv": read_bytes_csv,
}


def file_extension(filename: str) -> str:
    return filename.split(".")[-1]


def decode_file(file_bytes: bytes, filename: str) -> DecodeResult:
    """Pick the reader by extension and decode. Unknown extensions fail before any parsing."""
    reader = READERS.get(file_extension(filename))
    if reader is None:
        raise UnsupportedFormatError(filename)
    return reader(file_bytes)


async def insert_datapoints_from_file(
    file_bytes: bytes,
    filename: str,
    dataset_id: uuid.UUID,
    db_path: str,
) -> list[Datapoint]:
    """
    Decode an uploaded file, store every record as a datapoint of
    `dataset_id` in one batch and return the stored datapoints.

    Decode and store errors propagate unchanged; skipped CSV rows are
    logged and otherwise ignored.
    """
    decoded = decode_file(file_bytes, filename)
    for warning in decoded.warnings:
        logger.warning("[%s] %s", filename, warning)
    if decoded.warnings:
        logger.warning("[%s] skipped %d malformed rows", filename, len(decoded.warnings))

    rows = await sqlite_store.insert_raw(db_path, dataset_id, decoded.values)
    logger.info("[%s] stored %d datapoints in dataset %s", filename, len(rows), dataset_id)
    return [from_stored_row(row) for row in rows]
