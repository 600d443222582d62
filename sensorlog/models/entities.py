from __future__ import annotations

from typing import List

from sqlalchemy import BigInteger, CheckConstraint, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sensorlog.db.base import Base

# Exactly one typed value column is populated per reading.
SINGLE_VALUE_CHECK = (
    "(CASE WHEN value_str IS NULL THEN 0 ELSE 1 END)"
    " + (CASE WHEN value_int IS NULL THEN 0 ELSE 1 END)"
    " + (CASE WHEN value_real IS NULL THEN 0 ELSE 1 END) = 1"
)


class Controller(Base):
    __tablename__ = "controller"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    sensors: Mapped[List["Sensor"]] = relationship(back_populates="controller")


class Sensor(Base):
    __tablename__ = "sensor"
    __table_args__ = (UniqueConstraint("controller_id", "name", name="uq_sensor_controller_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    controller_id: Mapped[int] = mapped_column(ForeignKey("controller.id"), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)

    controller: Mapped[Controller] = relationship(back_populates="sensors")
    readings: Mapped[List["SensorReading"]] = relationship(back_populates="sensor")


class SensorReading(Base):
    __tablename__ = "sensor_reading"
    __table_args__ = (
        CheckConstraint(SINGLE_VALUE_CHECK, name="ck_sensor_reading_single_value"),
        Index("ix_sensor_reading_sensor_time", "sensor_id", "time_unix"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sensor_id: Mapped[int] = mapped_column(ForeignKey("sensor.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    time_unix: Mapped[int] = mapped_column(BigInteger, nullable=False)
    value_str: Mapped[str | None] = mapped_column(String(255))
    value_int: Mapped[int | None] = mapped_column(BigInteger)
    value_real: Mapped[float | None] = mapped_column(Float)

    sensor: Mapped[Sensor] = relationship(back_populates="readings")
