"""Inputs accepted by the tank and reading workflows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class NewTank:
    name: str
    serial_number: str
    capacity: float
    height: float
    diameter: float | None = None
    location: str | None = None


@dataclass
class NewReading:
    tank_id: int
    liquid_level: float
    reading_timestamp: datetime | None = None  # defaults to the workflow clock
    temperature: float | None = None
    raw_data: dict[str, Any] | None = None
