# ============================================================================
# api/deps.py (shared singletons, resolved lazily per process)
# ============================================================================
import logging
from functools import lru_cache

from fastapi import HTTPException, status

from datapoint_engine.config import get_settings
from datapoint_engine.storage.sqlite_store import init_db
from datapoint_engine.vector_store.pinecone_index import init_pinecone_index

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_db_path() -> str:
    settings = get_settings()
    init_db(settings.db_path)
    logger.info("datapoint store ready at %s", settings.db_path)
    return settings.db_path


@lru_cache(maxsize=1)
def _pinecone_index(api_key: str, index_name: str, cloud: str, region: str, embed_model: str):
    return init_pinecone_index(
        api_key=api_key,
        index_name=index_name,
        cloud=cloud,
        region=region,
        embed_model=embed_model,
    )


def get_pinecone_index():
    settings = get_settings()
    if not settings.pinecone_api_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Indexing is disabled: set PINECONE_API_KEY",
        )
    return _pinecone_index(
        settings.pinecone_api_key,
        settings.pinecone_index,
        settings.pinecone_cloud,
        settings.pinecone_region,
        settings.pinecone_embed_model,
    )


def get_index_batch_size() -> int:
    return get_settings().index_batch_size
