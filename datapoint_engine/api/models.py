# ============================================================================
# api/models.py (request / response bodies)
# ============================================================================
from uuid import UUID

from pydantic import BaseModel, Field

from datapoint_engine.models import Datapoint


class PaginatedDatapoints(BaseModel):
    items: list[Datapoint]
    total_count: int


class DeleteDatapointsRequest(BaseModel):
    ids: list[UUID] = Field(min_length=1)


class DeleteDatapointsResponse(BaseModel):
    deleted: int


class IndexRequest(BaseModel):
    index_column: str = Field(min_length=1)


class IndexResponse(BaseModel):
    indexed: int
