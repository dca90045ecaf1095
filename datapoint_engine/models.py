# ============================================================================
# datapoint_engine/models.py (core models)
# ============================================================================
from datetime import datetime
from typing import Annotated, Literal, Optional, Union
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel


class Datapoint(BaseModel):
    """
    Canonical dataset entry.

    `data` is the free-form payload, `target` the optional expected output,
    `metadata` a flat string-keyed map. Instances are immutable; build a new
    one to change anything.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: UUID
    dataset_id: UUID
    data: JsonValue
    target: JsonValue = None
    metadata: dict[str, JsonValue] = Field(default_factory=dict)

    @field_validator("data")
    @classmethod
    def _data_not_null(cls, value: JsonValue) -> JsonValue:
        if value is None:
            raise ValueError("datapoint data must not be null")
        return value


class StoredRow(BaseModel):
    """A datapoint row as the store returns it. `metadata` is whatever JSON was stored."""

    id: UUID
    created_at: datetime
    dataset_id: UUID
    data: JsonValue
    target: JsonValue = None
    metadata: JsonValue = None


class IndexRecord(BaseModel):
    """Record shape accepted by the text-indexing service. All `data` values are strings."""

    content: str
    datasource_id: str
    data: dict[str, str]
    id: str


# ----------------------------------------------------------------------------
# Node inputs: the values a datapoint's `data` map may hold when indexed
# ----------------------------------------------------------------------------
class ChatMessageText(BaseModel):
    type: Literal["text"]
    text: str


class ChatMessageImageUrl(BaseModel):
    type: Literal["image_url"]
    url: str
    detail: Optional[str] = None


class ChatMessageImage(BaseModel):
    type: Literal["image"]
    media_type: str
    data: str


ChatMessageContentPart = Annotated[
    Union[ChatMessageText, ChatMessageImageUrl, ChatMessageImage],
    Field(discriminator="type"),
]


class ChatMessage(BaseModel):
    role: str
    content: Union[str, list[ChatMessageContentPart]]


# list[StrictStr] comes before list[ChatMessage] so an empty list stays a string list
NodeInput = Union[
    StrictStr,
    StrictBool,
    StrictInt,
    StrictFloat,
    list[StrictStr],
    list[ChatMessage],
]

NodeInputMap = TypeAdapter(dict[str, NodeInput])
