# api/routes/health.py
import os
import sqlite3

from fastapi import APIRouter

from datapoint_engine.config import get_settings
from datapoint_engine.storage.sqlite_store import init_db

router = APIRouter()

OPTIONAL_ENVS = ["PINECONE_API_KEY"]


@router.get("/health")
def health():
    settings = get_settings()

    # 1) env presence (indexing only)
    envs = {k: bool(os.getenv(k)) for k in OPTIONAL_ENVS}

    # 2) datapoint store reachable
    db_ok = False
    try:
        init_db(settings.db_path)
        db_ok = True
    except (sqlite3.Error, OSError):
        db_ok = False

    # overall: the store is required, indexing is not
    return {
        "status": "ok" if db_ok else "degraded",
        "checks": {"env": envs, "db": db_ok},
    }
