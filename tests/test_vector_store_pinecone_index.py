# tests/test_vector_store_pinecone_index.py
import uuid

import pytest

from datapoint_engine.errors import ProjectionError
from datapoint_engine.models import Datapoint, IndexRecord
from datapoint_engine.vector_store import pinecone_index as mod


class FakeIndexList:
    def __init__(self, names):
        self._names = names

    def names(self):
        return list(self._names)


class FakePinecone:
    instances = []

    def __init__(self, api_key, existing=()):
        self.api_key = api_key
        self.existing = list(existing)
        self.created = []
        FakePinecone.instances.append(self)

    def list_indexes(self):
        return FakeIndexList(self.existing)

    def create_index_for_model(self, **kwargs):
        self.created.append(kwargs)

    def Index(self, name):
        return ("index", name)


def test_init_creates_missing_index(monkeypatch):
    FakePinecone.instances.clear()
    monkeypatch.setattr(mod, "Pinecone", FakePinecone)

    idx = mod.init_pinecone_index(api_key="k", index_name="datapoints", embed_model="m")

    pc = FakePinecone.instances[-1]
    assert idx == ("index", "datapoints")
    assert pc.created[0]["name"] == "datapoints"
    assert pc.created[0]["embed"] == {"model": "m", "field_map": {"text": "content"}}


def test_init_reuses_existing_index(monkeypatch):
    FakePinecone.instances.clear()
    monkeypatch.setattr(mod, "Pinecone", lambda api_key: FakePinecone(api_key, existing=["datapoints"]))

    mod.init_pinecone_index(api_key="k", index_name="datapoints")
    assert FakePinecone.instances[-1].created == []


def test_to_pinecone_record_reserved_fields_win():
    rec = IndexRecord(content="hello", datasource_id="ds", data={"content": "meta", "split": "train"}, id="1")
    assert mod.to_pinecone_record(rec) == {
        "_id": "1",
        "content": "hello",
        "datasource_id": "ds",
        "split": "train",
    }


def test_upsert_records_batches_per_namespace(fake_index):
    records = [IndexRecord(content=str(i), datasource_id="a", data={}, id=str(i)) for i in range(5)]
    records.append(IndexRecord(content="x", datasource_id="b", data={}, id="x"))

    assert mod.upsert_records(fake_index, records, batch_size=2) == 6
    assert [(ns, len(batch)) for ns, batch in fake_index.calls] == [("a", 2), ("a", 2), ("a", 1), ("b", 1)]


def test_index_datapoints_projects_then_upserts(fake_index):
    dataset_id = uuid.uuid4()
    dps = [
        Datapoint(id=uuid.uuid4(), dataset_id=dataset_id, data={"q": "first"}),
        Datapoint(id=uuid.uuid4(), dataset_id=dataset_id, data={"q": "second"}, metadata={"n": 1}),
    ]
    assert mod.index_datapoints(fake_index, dps, "q") == 2
    assert [r["content"] for r in fake_index.records] == ["first", "second"]
    assert fake_index.records[1]["n"] == "1"
    assert fake_index.calls[0][0] == str(dataset_id)


def test_index_datapoints_sends_nothing_on_projection_error(fake_index):
    dataset_id = uuid.uuid4()
    dps = [
        Datapoint(id=uuid.uuid4(), dataset_id=dataset_id, data={"q": "ok"}),
        Datapoint(id=uuid.uuid4(), dataset_id=dataset_id, data={"other": "x"}),
    ]
    with pytest.raises(ProjectionError):
        mod.index_datapoints(fake_index, dps, "q")
    assert fake_index.calls == []
