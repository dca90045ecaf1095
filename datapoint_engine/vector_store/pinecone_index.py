# vector_store/pinecone_index.py
import logging
from typing import Any, Iterable

from pinecone import Pinecone

from datapoint_engine.models import Datapoint, IndexRecord
from datapoint_engine.processing.projector import into_index_record

logger = logging.getLogger(__name__)

# Pinecone caps integrated-embedding upserts at 96 records per call
MAX_UPSERT_BATCH = 96


def init_pinecone_index(
    api_key: str,
    index_name: str,
    cloud: str = "aws",
    region: str = "us-east-1",
    embed_model: str = "llama-text-embed-v2",
):
    """
    Ensure a Pinecone index with integrated embeddings exists under `index_name`.
    The index embeds the `content` field of every record. Returns a live Index client.
    """
    # 1) instantiate Pinecone client
    pc = Pinecone(api_key=api_key)

    # 2) create if missing
    existing = pc.list_indexes().names()
    if index_name not in existing:
        logger.info("Creating index '%s' (model=%s, %s/%s)", index_name, embed_model, cloud, region)
        pc.create_index_for_model(
            name=index_name,
            cloud=cloud,
            region=region,
            embed={"model": embed_model, "field_map": {"text": "content"}},
        )

    # 3) return the Index client
    return pc.Index(index_name)


def to_pinecone_record(record: IndexRecord) -> dict[str, Any]:
    """
    Flatten an IndexRecord into a Pinecone record. Metadata keys sit next to
    the reserved fields; `_id`, `content` and `datasource_id` win on collision.
    """
    return {
        **record.data,
        "_id": record.id,
        "content": record.content,
        "datasource_id": record.datasource_id,
    }


def upsert_records(index, records: list[IndexRecord], batch_size: int = MAX_UPSERT_BATCH) -> int:
    """Upsert records in batches, one namespace per dataset."""
    batch_size = max(1, min(batch_size, MAX_UPSERT_BATCH))
    by_namespace: dict[str, list[dict[str, Any]]] = {}
    for record in records:
        by_namespace.setdefault(record.datasource_id, []).append(to_pinecone_record(record))

    for namespace, batch in by_namespace.items():
        for i in range(0, len(batch), batch_size):
            index.upsert_records(namespace, batch[i : i + batch_size])
    return len(records)


def index_datapoints(
    index,
    datapoints: Iterable[Datapoint],
    index_column: str,
    batch_size: int = MAX_UPSERT_BATCH,
) -> int:
    """
    Project every datapoint on `index_column` and upsert the result.
    Projection errors propagate before anything is sent.
    """
    records = [into_index_record(dp, index_column) for dp in datapoints]
    count = upsert_records(index, records, batch_size=batch_size)
    logger.info("upserted %d records on column '%s'", count, index_column)
    return count
