# ingestion/normalizer.py
"""
Maps untyped JSON values onto the canonical Datapoint shape.

A JSON object whose keys all come from CANONICAL_KEYS and which carries a
non-null `data` is taken field by field, so exported datasets round-trip
unchanged. Any other object is wrapped whole into `data`: an unknown key
means the record is not ours to pick apart. Scalars and arrays become
`data` as they are.
"""

import uuid
from typing import Any, Iterable, Optional

from datapoint_engine.models import Datapoint, StoredRow

CANONICAL_KEYS = frozenset({"data", "target", "metadata", "id"})


def parse_id_or_new(value: Any) -> uuid.UUID:
    """Use `value` when it is a UUID string, otherwise mint a fresh uuid4."""
    if isinstance(value, str):
        try:
            return uuid.UUID(value)
        except ValueError:
            pass
    return uuid.uuid4()


def parse_metadata_or_empty(value: Any) -> dict[str, Any]:
    """Metadata must be a JSON object; anything else degrades to {}."""
    if isinstance(value, dict):
        return dict(value)
    return {}


def is_canonical_record(raw: dict[str, Any]) -> bool:
    return raw.get("data") is not None and CANONICAL_KEYS.issuperset(raw.keys())


def from_raw_value(dataset_id: uuid.UUID, raw: Any) -> Optional[Datapoint]:
    """
    Normalize one decoded record. Returns None for JSON null and a
    Datapoint for everything else; never raises for non-null input.
    """
    if raw is None:
        return None

    if isinstance(raw, dict):
        datapoint_id = parse_id_or_new(raw.get("id"))
        if is_canonical_record(raw):
            return Datapoint(
                id=datapoint_id,
                dataset_id=dataset_id,
                data=raw["data"],
                target=raw.get("target"),
                metadata=parse_metadata_or_empty(raw.get("metadata")),
            )
        return Datapoint(id=datapoint_id, dataset_id=dataset_id, data=raw)

    return Datapoint(id=uuid.uuid4(), dataset_id=dataset_id, data=raw)


def from_raw_values(dataset_id: uuid.UUID, values: Iterable[Any]) -> list[Datapoint]:
    """Normalize a batch, dropping nulls and keeping input order."""
    datapoints = []
    for raw in values:
        datapoint = from_raw_value(dataset_id, raw)
        if datapoint is not None:
            datapoints.append(datapoint)
    return datapoints


def from_stored_row(row: StoredRow) -> Datapoint:
    return Datapoint(
        id=row.id,
        dataset_id=row.dataset_id,
        data=row.data,
        target=row.target,
        metadata=parse_metadata_or_empty(row.metadata),
    )
