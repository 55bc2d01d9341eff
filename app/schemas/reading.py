import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _has_non_finite(value: Any) -> bool:
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, dict):
        return any(_has_non_finite(v) for v in value.values())
    if isinstance(value, list):
        return any(_has_non_finite(v) for v in value)
    return False


class ReadingIn(BaseModel):
    tank_id: int
    liquid_level: float = Field(..., ge=0, allow_inf_nan=False)
    reading_timestamp: datetime | None = None
    temperature: float | None = Field(default=None, allow_inf_nan=False)
    raw_data: dict[str, Any] | None = None

    @field_validator("raw_data")
    @classmethod
    def validate_raw_data(cls, v: dict[str, Any] | None) -> dict[str, Any] | None:
        """Stored as JSON, which has no spelling for infinity or NaN."""
        if v is not None and _has_non_finite(v):
            raise ValueError("raw_data must not contain infinite or NaN numbers")
        return v


class ReadingBatchIn(BaseModel):
    readings: list[ReadingIn] = Field(..., min_length=1)


class ReadingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tank_id: int
    liquid_level: float
    volume: float
    percentage: float
    temperature: float | None = None
    raw_data: dict[str, Any] | None = None
    reading_timestamp: datetime
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReadingError(BaseModel):
    index: int
    detail: str


class ReadingBatchOut(BaseModel):
    registered: list[ReadingOut]
    errors: list[ReadingError]


class PruneOut(BaseModel):
    tank_id: int
    older_than: datetime
    deleted: int
