# ingestion/__init__.py

from .decoders import DecodeResult, read_bytes_csv, read_bytes_json, read_bytes_jsonl
from .ingest_datapoints import insert_datapoints_from_file
from .normalizer import from_raw_value, from_raw_values, from_stored_row, parse_metadata_or_empty

__all__ = [
    "DecodeResult",
    "read_bytes_jsonl",
    "read_bytes_json",
    "read_bytes_csv",
    "insert_datapoints_from_file",
    "from_raw_value",
    "from_raw_values",
    "from_stored_row",
    "parse_metadata_or_empty",
]
