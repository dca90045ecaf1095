# processing/projector.py
"""
Turns a Datapoint into the record the text index stores.

The indexed text comes from one column of `data`; chat-message columns
are flattened to plain text first. Metadata rides along with every value
stringified, since the index only accepts string fields.
"""

import json
from typing import Any

from pydantic import ValidationError

from datapoint_engine.errors import ProjectionError
from datapoint_engine.models import ChatMessage, ChatMessageText, Datapoint, IndexRecord, NodeInputMap


def json_value_to_string(value: Any) -> str:
    """Strings as-is, everything else as compact JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _message_text(message: ChatMessage) -> str:
    if isinstance(message.content, str):
        return message.content
    # image parts carry no text
    return "\n".join(part.text for part in message.content if isinstance(part, ChatMessageText))


def merge_chat_messages(messages: list[ChatMessage]) -> str:
    return "\n".join(f"{m.role}: {_message_text(m)}" for m in messages)


def _is_chat_message_list(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and isinstance(value[0], ChatMessage)


def into_index_record(datapoint: Datapoint, index_column: str) -> IndexRecord:
    """
    Project `datapoint` for indexing on `index_column`.

    Raises ProjectionError when `data` is not a map of node inputs or does
    not contain `index_column`.
    """
    try:
        data_map = NodeInputMap.validate_python(datapoint.data)
    except ValidationError as e:
        raise ProjectionError(
            f"datapoint {datapoint.id} data is not a map of indexable values: {e}"
        ) from e

    if index_column not in data_map:
        raise ProjectionError(f"datapoint {datapoint.id} has no '{index_column}' field")

    value = data_map[index_column]
    if _is_chat_message_list(value):
        content = merge_chat_messages(value)
    else:
        content = json_value_to_string(value)

    return IndexRecord(
        content=content,
        datasource_id=str(datapoint.dataset_id),
        data={k: json_value_to_string(v) for k, v in datapoint.metadata.items()},
        id=str(datapoint.id),
    )
