from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from sensorlog.services.coercion import INT64_MAX, INT64_MIN

TYPE_HINT_KEY = "_type"


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float))


class SubmissionEntry(BaseModel):
    """One controller snapshot; every extra key is a sensor name."""

    model_config = ConfigDict(extra="allow")

    controller: str = Field(..., min_length=1)
    timestamp: int = Field(..., ge=INT64_MIN, le=INT64_MAX)

    @model_validator(mode="after")
    def _check_sensor_payloads(self) -> "SubmissionEntry":
        for sensor, readings in (self.model_extra or {}).items():
            if not isinstance(readings, dict):
                raise ValueError(f"Sensor {sensor!r} must map channel names to values")
            for channel, value in readings.items():
                if channel == TYPE_HINT_KEY:
                    continue
                if not _is_scalar(value):
                    raise ValueError(f"Reading {sensor}.{channel} must be a string or number")
        return self

    def sensor_readings(self) -> dict[str, dict[str, str | int | float]]:
        return {
            sensor: {channel: value for channel, value in readings.items() if channel != TYPE_HINT_KEY}
            for sensor, readings in (self.model_extra or {}).items()
        }


class SubmissionRequest(BaseModel):
    entries: list[SubmissionEntry] = Field(default_factory=list)


class SubmissionResponse(BaseModel):
    success: bool
    message: str
    accepted: int = Field(..., ge=0)
