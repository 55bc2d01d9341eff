"""Storage ports consumed by the workflows.

Implementations live outside the domain (see ``app.repositories``). Every
list returned by a reading query is ordered by ``reading_timestamp``,
most recent first.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.entities import Tank, TankReading


class TankRepository(ABC):
    @abstractmethod
    async def find_by_id(self, tank_id: int) -> Tank | None:
        pass

    @abstractmethod
    async def find_by_serial_number(self, serial_number: str) -> Tank | None:
        pass

    @abstractmethod
    async def find_all(self) -> list[Tank]:
        pass

    @abstractmethod
    async def save(self, tank: Tank) -> Tank:
        """Insert when ``tank.id`` is ``UNSAVED_ID``, otherwise update-or-create.

        Raises ``DuplicateSerialNumber`` when storage rejects the serial.
        """
        pass

    @abstractmethod
    async def delete(self, tank_id: int) -> bool:
        """Return False when no tank has ``tank_id``."""
        pass


class TankReadingRepository(ABC):
    @abstractmethod
    async def find_by_id(self, reading_id: int) -> TankReading | None:
        pass

    @abstractmethod
    async def save(self, reading: TankReading) -> TankReading:
        pass

    @abstractmethod
    async def find_by_tank_id(self, tank_id: int) -> list[TankReading]:
        pass

    @abstractmethod
    async def find_by_tank_id_and_date_range(
        self, tank_id: int, start: datetime, end: datetime
    ) -> list[TankReading]:
        """Readings with ``start <= reading_timestamp <= end``."""
        pass

    @abstractmethod
    async def find_latest_by_tank_id(self, tank_id: int) -> TankReading | None:
        pass

    @abstractmethod
    async def delete_old_readings(self, tank_id: int, older_than: datetime) -> int:
        """Delete readings strictly older than ``older_than``; return the count."""
        pass
