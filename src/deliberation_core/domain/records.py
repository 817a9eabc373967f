"""Input rows consumed by the engine.

Rows arrive from the persistence layer with camelCase keys; every model here
accepts either spelling and is immutable once validated.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class FrozenModel(BaseModel):
    model_config = {"frozen": True, "extra": "ignore"}


class RecordModel(BaseModel):
    model_config = {
        "frozen": True,
        "extra": "ignore",
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class StageRecord(RecordModel):
    message_id: str
    stage_type: str
    stage_order: int = 0
    model: str | None = None
    role: str | None = None
    parsed_data: Any = None
    response_time_ms: int | None = None
    mode: str | None = None


class RankingRow(RecordModel):
    message_id: str
    ranker_model: str | None = None
    parsed_ranking: Any = None


class LabelMapRow(RecordModel):
    message_id: str
    label: str
    model: str


class ResponseTimeRow(RecordModel):
    model: str
    response_time_ms: int | None = None


class CrossModeRow(RecordModel):
    model: str | None = None
    response_time_ms: int | None = None
    mode: str


class MessageDateRow(RecordModel):
    created_at: datetime


class ModeCount(RecordModel):
    mode: str
    count: int
