from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )


class TankModel(TimestampMixin, Base):
    __tablename__ = "tanks"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    serial_number: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    capacity: Mapped[float] = mapped_column(Float)  # liters
    height: Mapped[float] = mapped_column(Float)  # centimeters
    diameter: Mapped[float | None] = mapped_column(Float)  # centimeters
    location: Mapped[str | None] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)


class TankReadingModel(TimestampMixin, Base):
    __tablename__ = "tank_readings"
    __table_args__ = (Index("ix_tank_readings_tank_id_timestamp", "tank_id", "reading_timestamp"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tank_id: Mapped[int] = mapped_column(ForeignKey("tanks.id", ondelete="CASCADE"))
    liquid_level: Mapped[float] = mapped_column(Float)  # centimeters
    volume: Mapped[float] = mapped_column(Float)  # liters
    percentage: Mapped[float] = mapped_column(Float)
    temperature: Mapped[float | None] = mapped_column(Float)  # celsius
    reading_timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    raw_data: Mapped[dict | None] = mapped_column(JSON)
