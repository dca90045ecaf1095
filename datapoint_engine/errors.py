# datapoint_engine/errors.py
"""
Error taxonomy for ingestion and projection.

- DecodeError            → file content could not be decoded (fatal for the whole upload)
- UnsupportedFormatError → file extension is not one of jsonl / json / csv
- ProjectionError        → datapoint cannot be projected onto the requested index column

Row-level CSV problems are not exceptions: they are reported as warnings
on the DecodeResult. Store failures are left as the driver raised them.
"""


class DatapointEngineError(Exception):
    """Base class for errors raised by datapoint_engine."""


class DecodeError(DatapointEngineError, ValueError):
    pass


class UnsupportedFormatError(DatapointEngineError, ValueError):
    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(
            f"unsupported file format for '{filename}': expected a .jsonl, .json or .csv file"
        )


class ProjectionError(DatapointEngineError, ValueError):
    pass
