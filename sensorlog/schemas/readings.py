from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ControllerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class SensorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    controller_id: int


class ReadingOut(BaseModel):
    id: int
    sensor_id: int
    reading_name: str
    value_str: str | None = None
    value_int: int | None = None
    value_real: float | None = None
    time_unix: int
    sensor_name: str
    controller_name: str
    value: int | float | str | None = None
    timestamp: datetime | None = None


class Pagination(BaseModel):
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    has_next: bool
    has_prev: bool


class GroupedReadingsPage(BaseModel):
    """One page of readings grouped by channel name.

    Grouping happens after the page window is applied, so a channel's series
    can continue on the next page.
    """

    data: dict[str, list[ReadingOut]] = Field(default_factory=dict)
    pagination: Pagination


class SensorReadingsOut(BaseModel):
    name: str
    readings: dict[str, list[ReadingOut]] = Field(default_factory=dict)


class ControllerOverview(BaseModel):
    controller: str
    first_reading: int | None = None
    last_reading: int | None = None
    sensors: list[SensorReadingsOut] = Field(default_factory=list)
