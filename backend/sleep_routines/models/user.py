from __future__ import annotations

from datetime import datetime
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sleep_routines.db.base import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    sleep_routines: Mapped[list["SleepRoutine"]] = relationship(
        "SleepRoutine", back_populates="user", cascade="all, delete-orphan"
    )
    sleep_logs: Mapped[list["SleepLog"]] = relationship(
        "SleepLog", back_populates="user", cascade="all, delete-orphan"
    )
