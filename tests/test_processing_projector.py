# tests/test_processing_projector.py
import uuid

import pytest

from datapoint_engine.errors import ProjectionError
from datapoint_engine.models import ChatMessage, Datapoint
from datapoint_engine.processing.projector import (
    into_index_record,
    json_value_to_string,
    merge_chat_messages,
)


def make_dp(data, metadata=None):
    return Datapoint(id=uuid.uuid4(), dataset_id=uuid.uuid4(), data=data, metadata=metadata or {})


def test_plain_text_field_is_content():
    dp = make_dp({"text": "hello", "other": "x"})
    rec = into_index_record(dp, "text")
    assert rec.content == "hello"
    assert rec.id == str(dp.id)
    assert rec.datasource_id == str(dp.dataset_id)
    assert rec.data == {}


@pytest.mark.parametrize(
    "value, expected",
    [(3, "3"), (1.5, "1.5"), (True, "true"), (["a", "b"], '["a","b"]'), ([], "[]")],
)
def test_non_text_values_are_serialized(value, expected):
    assert into_index_record(make_dp({"f": value}), "f").content == expected


def test_chat_message_list_is_merged_not_serialized():
    messages = [
        {"role": "system", "content": "be brief"},
        {"role": "user", "content": [{"type": "text", "text": "what is this?"},
                                     {"type": "image_url", "url": "https://x/img.png"}]},
    ]
    rec = into_index_record(make_dp({"messages": messages}), "messages")
    assert rec.content == "system: be brief\nuser: what is this?"
    assert not rec.content.startswith("[")


def test_merge_chat_messages_joins_text_parts():
    messages = [
        ChatMessage(role="user", content=[{"type": "text", "text": "a"}, {"type": "text", "text": "b"}]),
        ChatMessage(role="assistant", content="c"),
    ]
    assert merge_chat_messages(messages) == "user: a\nb\nassistant: c"


def test_metadata_values_are_stringified():
    dp = make_dp({"text": "t"}, metadata={"split": "train", "n": 2, "tags": ["a"], "extra": {"k": None}})
    rec = into_index_record(dp, "text")
    assert rec.data == {"split": "train", "n": "2", "tags": '["a"]', "extra": '{"k":null}'}


def test_missing_column_is_projection_error():
    with pytest.raises(ProjectionError, match="no 'question' field"):
        into_index_record(make_dp({"text": "t"}), "question")


@pytest.mark.parametrize("data", ["scalar", [1, 2], {"nested": {"a": 1}}, {"n": None}])
def test_unindexable_data_is_projection_error(data):
    with pytest.raises(ProjectionError):
        into_index_record(make_dp(data), "nested")


def test_json_value_to_string():
    assert json_value_to_string("é") == "é"
    assert json_value_to_string({"a": [1, "é"]}) == '{"a":[1,"é"]}'
