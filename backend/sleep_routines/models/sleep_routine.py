"""Bedtime routine and its ordered pre-sleep steps."""

from __future__ import annotations

import uuid
from datetime import datetime
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sleep_routines.db.base import Base, utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


class SleepRoutine(Base):
    __tablename__ = "sleep_routines"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)  # "Weekday routine", "Travel routine"
    goal_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_bed_time_local: Mapped[str | None] = mapped_column(String(32), nullable=True)  # "23:00"
    target_wake_time_local: Mapped[str | None] = mapped_column(String(32), nullable=True)  # "06:00"
    time_zone: Mapped[str | None] = mapped_column(String(64), nullable=True)  # IANA, e.g. "Asia/Dubai"
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user: Mapped["User"] = relationship("User", back_populates="sleep_routines")
    steps: Mapped[list["SleepRoutineStep"]] = relationship(
        "SleepRoutineStep", back_populates="routine", order_by="SleepRoutineStep.order_index"
    )
    sleep_logs: Mapped[list["SleepLog"]] = relationship("SleepLog", back_populates="routine")


class SleepRoutineStep(Base):
    __tablename__ = "sleep_routine_steps"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    routine_id: Mapped[str] = mapped_column(
        ForeignKey("sleep_routines.id", ondelete="CASCADE"), nullable=False, index=True
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)  # advisory: not unique, gaps allowed
    title: Mapped[str] = mapped_column(String(255), nullable=False)  # "Turn off screens"
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Minutes before target bedtime; negative numbers are okay
    minutes_before_bed: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    routine: Mapped["SleepRoutine"] = relationship("SleepRoutine", back_populates="steps")
