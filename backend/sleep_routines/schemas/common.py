"""Response envelope shared by all routine and sleep-log endpoints."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class ActionResponse(BaseModel):
    """Successful action: {"success": true, "data": {...}}. Failures use the error envelope from core.errors."""

    success: bool = True
    data: dict = Field(default_factory=dict)


def as_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def iso_utc(value: datetime | None) -> str | None:
    value = as_utc(value)
    return value.isoformat() if value else None
