# datapoint_engine/config.py
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, read from the environment / .env file."""
    db_path: str = "./data/datapoints.db"
    pinecone_api_key: Optional[str] = None
    pinecone_index: str = "datapoints"
    pinecone_cloud: str = "aws"
    pinecone_region: str = "us-east-1"
    pinecone_embed_model: str = "llama-text-embed-v2"
    index_batch_size: int = 96
    log_level: str = "INFO"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Load settings once per process. `reset_settings()` drops the cached copy
    so tests can change the environment between cases.
    """
    global _settings
    if _settings is not None:
        return _settings

    load_dotenv()
    _settings = Settings(
        db_path=os.getenv("DPE_DB_PATH", "./data/datapoints.db"),
        pinecone_api_key=os.getenv("PINECONE_API_KEY") or None,
        pinecone_index=os.getenv("PINECONE_INDEX", "datapoints"),
        pinecone_cloud=os.getenv("PINECONE_CLOUD", "aws"),
        pinecone_region=os.getenv("PINECONE_ENVIRONMENT", "us-east-1"),
        pinecone_embed_model=os.getenv("PINECONE_EMBED_MODEL", "llama-text-embed-v2"),
        index_batch_size=int(os.getenv("INDEX_BATCH_SIZE", "96")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
