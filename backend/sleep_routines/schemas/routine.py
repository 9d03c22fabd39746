"""Pydantic schemas for sleep routine API."""

from pydantic import BaseModel, Field

# Integer columns are 32-bit on Postgres
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class RoutineStepInput(BaseModel):
    """One step of a routine. order_index defaults to the step's 1-based position in the list."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    minutes_before_bed: int | None = Field(
        None, ge=INT32_MIN, le=INT32_MAX, strict=True, description="Minutes before target bedtime; may be negative"
    )
    order_index: int | None = Field(None, ge=1, le=INT32_MAX, strict=True)


class RoutineCreate(BaseModel):
    """Body for creating a routine. Only name is required."""

    name: str = Field(..., min_length=1, max_length=255)
    goal_description: str | None = None
    target_bed_time_local: str | None = Field(None, max_length=32, description='Local time, e.g. "23:00"')
    target_wake_time_local: str | None = Field(None, max_length=32, description='Local time, e.g. "06:00"')
    time_zone: str | None = Field(None, max_length=64, description='IANA time zone, e.g. "Asia/Dubai"')
    notes: str | None = None
    steps: list[RoutineStepInput] | None = None


class RoutineUpdate(BaseModel):
    """Body for updating a routine (partial). steps, when present, replaces the whole step list."""

    name: str | None = Field(None, min_length=1, max_length=255)
    goal_description: str | None = None
    target_bed_time_local: str | None = Field(None, max_length=32)
    target_wake_time_local: str | None = Field(None, max_length=32)
    time_zone: str | None = Field(None, max_length=64)
    notes: str | None = None
    steps: list[RoutineStepInput] | None = None
