"""Plain tank and reading entities.

Entities carry no storage knowledge. A storage-assigned ``id`` equal to
``UNSAVED_ID`` marks an instance that has not been persisted yet.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.core.clock import utcnow

UNSAVED_ID = 0


@dataclass
class Tank:
    id: int
    name: str
    serial_number: str
    capacity: float  # liters
    height: float  # centimeters, level that reads as "full"
    diameter: float | None = None  # centimeters, selects the cylindrical formula
    location: str | None = None
    active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_persisted(self) -> bool:
        return self.id != UNSAVED_ID

    def rename(self, name: str) -> None:
        self.name = name
        self._touch()

    def set_location(self, location: str | None) -> None:
        self.location = location
        self._touch()

    def set_capacity(self, capacity: float) -> None:
        self.capacity = capacity
        self._touch()

    def set_height(self, height: float) -> None:
        self.height = height
        self._touch()

    def set_diameter(self, diameter: float | None) -> None:
        self.diameter = diameter
        self._touch()

    def activate(self) -> None:
        self.active = True
        self._touch()

    def deactivate(self) -> None:
        self.active = False
        self._touch()

    def _touch(self) -> None:
        self.updated_at = utcnow()


@dataclass
class TankReading:
    id: int
    tank_id: int
    liquid_level: float  # centimeters, as submitted
    volume: float  # liters
    percentage: float  # 0..100
    reading_timestamp: datetime
    temperature: float | None = None
    raw_data: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_persisted(self) -> bool:
        return self.id != UNSAVED_ID
