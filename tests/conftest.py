# tests/conftest.py
import os
import sys
import uuid
from pathlib import Path

import pytest
from dotenv import load_dotenv

# ---------- Load .env and set CI/Test env defaults ----------
load_dotenv()

os.environ.setdefault("LOG_LEVEL", "WARNING")
# Indexing stays offline: routes get a fake index through dependency overrides
os.environ.setdefault("PINECONE_INDEX", "test-index")

# ---------- Ensure project root on sys.path ----------
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from datapoint_engine.config import reset_settings  # noqa: E402
from datapoint_engine.storage.sqlite_store import init_db  # noqa: E402


class FakeIndex:
    """Records upsert_records calls instead of talking to Pinecone."""

    def __init__(self):
        self.calls = []

    def upsert_records(self, namespace, records):
        self.calls.append((namespace, list(records)))

    @property
    def records(self):
        return [r for _, batch in self.calls for r in batch]


@pytest.fixture
def dataset_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    path = str(tmp_path / "datapoints.db")
    init_db(path)
    return path


@pytest.fixture
def fake_index() -> FakeIndex:
    return FakeIndex()


@pytest.fixture
def client(db_path, fake_index, monkeypatch):
    from fastapi.testclient import TestClient

    from datapoint_engine.api import deps
    from datapoint_engine.api.main import app

    monkeypatch.setenv("DPE_DB_PATH", db_path)
    reset_settings()

    app.dependency_overrides[deps.get_db_path] = lambda: db_path
    app.dependency_overrides[deps.get_pinecone_index] = lambda: fake_index
    app.dependency_overrides[deps.get_index_batch_size] = lambda: 2
    yield TestClient(app)
    app.dependency_overrides.clear()
    reset_settings()
