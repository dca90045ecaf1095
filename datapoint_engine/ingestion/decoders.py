# ingestion/decoders.py
"""
Byte-level decoders for uploaded dataset files.

Each reader turns the raw bytes of one file into an ordered list of JSON
values, one per record. Readers never log: row-level problems (CSV only)
are collected on `DecodeResult.warnings` and the caller decides how to
surface them.
"""

import csv
import io
import json
import sys
from dataclasses import dataclass, field
from typing import Any

from datapoint_engine.errors import DecodeError

# cells hold whole chat transcripts or JSON documents; lift the 128 KiB default
try:
    csv.field_size_limit(sys.maxsize)
except OverflowError:
    csv.field_size_limit(2**31 - 1)


@dataclass
class DecodeResult:
    values: list[Any] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _decode_text(data: bytes, encoding: str = "utf-8") -> str:
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as e:
        raise DecodeError(f"file is not valid UTF-8: {e}") from e


def read_bytes_jsonl(data: bytes) -> DecodeResult:
    """One JSON value per non-blank line. A single bad line fails the whole file."""
    values = []
    # only \n separates records: U+2028, U+0085 and friends are legal inside JSON strings
    for line_no, line in enumerate(_decode_text(data).split("\n"), start=1):
        line = line.removesuffix("\r")
        if not line.strip():
            continue
        try:
            values.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise DecodeError(f"error parsing jsonlines at line {line_no}: {e}") from e
    return DecodeResult(values=values)


def read_bytes_json(data: bytes) -> DecodeResult:
    """The whole file must be a single JSON array; its elements are the records."""
    try:
        content = json.loads(_decode_text(data))
    except json.JSONDecodeError as e:
        raise DecodeError(f"error parsing json: {e}") from e

    if not isinstance(content, list):
        raise DecodeError("the file must contain an array of json objects")
    return DecodeResult(values=content)


def read_bytes_csv(data: bytes) -> DecodeResult:
    """
    First row is the header. Every other row becomes {column: cell} with
    cells kept as strings.

    Malformed rows (bad quoting, or a field count that differs from the
    header) are skipped with a warning. A header that cannot be read fails
    the whole file.
    """
    # utf-8-sig drops a leading BOM so it doesn't end up in the first column name
    text = _decode_text(data, encoding="utf-8-sig")
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)

    try:
        headers = next((row for row in reader if row), None)
    except csv.Error as e:
        raise DecodeError(f"can't read CSV header: {e}") from e

    result = DecodeResult()
    if not headers:
        return result

    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            result.warnings.append(f"couldn't read line {reader.line_num} in CSV, {e}")
            continue

        if not row:
            continue
        if len(row) != len(headers):
            result.warnings.append(
                f"couldn't read line {reader.line_num} in CSV, "
                f"found record with {len(row)} fields, but the header has {len(headers)} fields"
            )
            continue

        result.values.append(dict(zip(headers, row)))

    return result
