"""Sleep logs: create, sparse update, paginated list. Scoped to the acting user."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_routines.core.errors import ForbiddenError, NotFoundError
from sleep_routines.db.base import utcnow
from sleep_routines.models.sleep_log import SleepLog
from sleep_routines.models.sleep_routine import SleepRoutine
from sleep_routines.schemas.sleep_log import SleepLogCreate, SleepLogUpdate
from sleep_routines.services.audit import log_action

logger = logging.getLogger(__name__)

SLEEP_LOG_NOT_FOUND = "Sleep log not found."
ROUTINE_FORBIDDEN = "You cannot log sleep for this routine."
RESOURCE = "sleep_log"


async def ensure_routine_owned(session: AsyncSession, user_id: int, routine_id: str) -> None:
    """Raise ForbiddenError unless routine_id is a routine of user_id (active or archived)."""
    r = await session.execute(
        select(SleepRoutine.id).where(SleepRoutine.id == routine_id, SleepRoutine.user_id == user_id)
    )
    if r.scalar_one_or_none() is None:
        logger.info("User %s referenced routine %s they do not own", user_id, routine_id)
        raise ForbiddenError(ROUTINE_FORBIDDEN)


async def create_sleep_log(session: AsyncSession, user_id: int, body: SleepLogCreate) -> str:
    if body.routine_id is not None:
        await ensure_routine_owned(session, user_id, body.routine_id)
    now = utcnow()
    log = SleepLog(
        user_id=user_id,
        routine_id=body.routine_id,
        sleep_date=body.sleep_date or now,
        bed_time=body.bed_time,
        wake_time=body.wake_time,
        sleep_quality_score=body.sleep_quality_score,
        notes=body.notes,
        created_at=now,
    )
    session.add(log)
    await session.flush()
    await log_action(
        session,
        user_id=user_id,
        action="create",
        resource=RESOURCE,
        resource_id=log.id,
        details={"routine_id": body.routine_id},
    )
    logger.info("Created sleep log %s for user %s", log.id, user_id)
    return log.id


async def update_sleep_log(session: AsyncSession, user_id: int, log_id: str, body: SleepLogUpdate) -> None:
    """Apply only the fields present in body. Unlike routines, there is no updated_at to refresh."""
    r = await session.execute(select(SleepLog).where(SleepLog.id == log_id, SleepLog.user_id == user_id))
    log = r.scalar_one_or_none()
    if not log:
        raise NotFoundError(SLEEP_LOG_NOT_FOUND)
    changed: list[str] = []
    if body.routine_id is not None:
        await ensure_routine_owned(session, user_id, body.routine_id)
        log.routine_id = body.routine_id
        changed.append("routine_id")
    if body.sleep_date is not None:
        log.sleep_date = body.sleep_date
        changed.append("sleep_date")
    if body.bed_time is not None:
        log.bed_time = body.bed_time
        changed.append("bed_time")
    if body.wake_time is not None:
        log.wake_time = body.wake_time
        changed.append("wake_time")
    if body.sleep_quality_score is not None:
        log.sleep_quality_score = body.sleep_quality_score
        changed.append("sleep_quality_score")
    if body.notes is not None:
        log.notes = body.notes
        changed.append("notes")
    await session.flush()
    await log_action(
        session,
        user_id=user_id,
        action="update",
        resource=RESOURCE,
        resource_id=log.id,
        details={"fields": changed},
    )
    logger.info("Updated sleep log %s for user %s: %s", log.id, user_id, changed)


async def list_sleep_logs(
    session: AsyncSession,
    user_id: int,
    page: int = 1,
    page_size: int = 20,
    routine_id: str | None = None,
) -> list[SleepLog]:
    """One page of the caller's logs, newest night first; ties broken by newest created_at."""
    stmt = select(SleepLog).where(SleepLog.user_id == user_id)
    if routine_id:
        stmt = stmt.where(SleepLog.routine_id == routine_id)
    stmt = (
        stmt.order_by(SleepLog.sleep_date.desc(), SleepLog.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    r = await session.execute(stmt)
    return list(r.scalars().all())
