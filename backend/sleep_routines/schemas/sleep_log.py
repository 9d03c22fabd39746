"""Pydantic schemas for sleep log API."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from sleep_routines.schemas.common import as_utc


def _normalise_utc(v: datetime | None) -> datetime | None:
    try:
        return as_utc(v)
    except OverflowError as e:
        raise ValueError("Datetime is out of range once converted to UTC") from e


class SleepLogCreate(BaseModel):
    """Body for logging one night. Every field is optional; sleep_date defaults to now."""

    routine_id: str | None = Field(None, min_length=1)
    sleep_date: datetime | None = None
    bed_time: datetime | None = None
    wake_time: datetime | None = None
    sleep_quality_score: int | None = Field(None, ge=1, le=10, strict=True)
    notes: str | None = None

    @field_validator("sleep_date", "bed_time", "wake_time")
    @classmethod
    def to_utc(cls, v: datetime | None) -> datetime | None:
        return _normalise_utc(v)


class SleepLogUpdate(BaseModel):
    """Body for updating a sleep log (partial)."""

    routine_id: str | None = Field(None, min_length=1)
    sleep_date: datetime | None = None
    bed_time: datetime | None = None
    wake_time: datetime | None = None
    sleep_quality_score: int | None = Field(None, ge=1, le=10, strict=True)
    notes: str | None = None

    @field_validator("sleep_date", "bed_time", "wake_time")
    @classmethod
    def to_utc(cls, v: datetime | None) -> datetime | None:
        return _normalise_utc(v)
