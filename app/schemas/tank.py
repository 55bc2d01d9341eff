from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TankCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    serial_number: str = Field(..., min_length=1, max_length=255)
    capacity: float = Field(..., gt=0, allow_inf_nan=False)
    height: float = Field(..., gt=0, allow_inf_nan=False)
    diameter: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    location: str | None = Field(default=None, max_length=255)


class TankUpdate(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    capacity: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    height: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    diameter: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    location: str | None = Field(default=None, max_length=255)
    active: bool | None = None


class TankOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    serial_number: str
    capacity: float
    height: float
    diameter: float | None = None
    location: str | None = None
    active: bool
    created_at: datetime
    updated_at: datetime
