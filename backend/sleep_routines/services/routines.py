"""
Sleep routines: create, sparse update, archive, fetch with steps, list.

Every function takes the acting user's id explicitly and only touches rows owned by
that user. A routine that does not exist and one owned by someone else both raise
NotFoundError. Callers run inside the request transaction from get_db, so a routine
write and its step replacement commit or roll back together.
"""

import logging
from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_routines.core.errors import NotFoundError
from sleep_routines.db.base import utcnow
from sleep_routines.models.sleep_routine import SleepRoutine, SleepRoutineStep
from sleep_routines.schemas.routine import RoutineCreate, RoutineStepInput, RoutineUpdate
from sleep_routines.services.audit import log_action

logger = logging.getLogger(__name__)

ROUTINE_NOT_FOUND = "Sleep routine not found."
RESOURCE = "sleep_routine"


def build_steps(routine_id: str, steps: list[RoutineStepInput], now: datetime) -> list[SleepRoutineStep]:
    """Caller-supplied order_index wins; otherwise the 1-based position in the list."""
    return [
        SleepRoutineStep(
            routine_id=routine_id,
            order_index=step.order_index if step.order_index is not None else position,
            title=step.title,
            description=step.description,
            minutes_before_bed=step.minutes_before_bed,
            created_at=now,
        )
        for position, step in enumerate(steps, start=1)
    ]


async def get_owned_routine(session: AsyncSession, user_id: int, routine_id: str) -> SleepRoutine:
    r = await session.execute(
        select(SleepRoutine).where(SleepRoutine.id == routine_id, SleepRoutine.user_id == user_id)
    )
    routine = r.scalar_one_or_none()
    if not routine:
        raise NotFoundError(ROUTINE_NOT_FOUND)
    return routine


async def create_routine(session: AsyncSession, user_id: int, body: RoutineCreate) -> str:
    """Persist a new active routine and its steps (if any). Returns the routine id."""
    now = utcnow()
    routine = SleepRoutine(
        user_id=user_id,
        name=body.name,
        goal_description=body.goal_description,
        target_bed_time_local=body.target_bed_time_local,
        target_wake_time_local=body.target_wake_time_local,
        time_zone=body.time_zone,
        notes=body.notes,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    session.add(routine)
    await session.flush()

    step_count = 0
    if body.steps:
        steps = build_steps(routine.id, body.steps, now)
        session.add_all(steps)
        await session.flush()
        step_count = len(steps)

    await log_action(
        session,
        user_id=user_id,
        action="create",
        resource=RESOURCE,
        resource_id=routine.id,
        details={"steps": step_count},
    )
    logger.info("Created sleep routine %s for user %s (%d steps)", routine.id, user_id, step_count)
    return routine.id


async def update_routine(session: AsyncSession, user_id: int, routine_id: str, body: RoutineUpdate) -> None:
    """
    Apply only the fields present in body; always refresh updated_at.
    steps=None leaves existing steps alone; a list (even empty) replaces all of them.
    """
    routine = await get_owned_routine(session, user_id, routine_id)
    now = utcnow()
    changed: list[str] = []
    if body.name is not None:
        routine.name = body.name
        changed.append("name")
    if body.goal_description is not None:
        routine.goal_description = body.goal_description
        changed.append("goal_description")
    if body.target_bed_time_local is not None:
        routine.target_bed_time_local = body.target_bed_time_local
        changed.append("target_bed_time_local")
    if body.target_wake_time_local is not None:
        routine.target_wake_time_local = body.target_wake_time_local
        changed.append("target_wake_time_local")
    if body.time_zone is not None:
        routine.time_zone = body.time_zone
        changed.append("time_zone")
    if body.notes is not None:
        routine.notes = body.notes
        changed.append("notes")
    routine.updated_at = now
    await session.flush()

    details: dict = {"fields": changed}
    if body.steps is not None:
        await session.execute(
            delete(SleepRoutineStep).where(SleepRoutineStep.routine_id == routine.id)
        )
        if body.steps:
            session.add_all(build_steps(routine.id, body.steps, now))
        await session.flush()
        details["steps"] = len(body.steps)

    await log_action(
        session,
        user_id=user_id,
        action="update",
        resource=RESOURCE,
        resource_id=routine.id,
        details=details,
    )
    logger.info("Updated sleep routine %s for user %s: %s", routine.id, user_id, details)


async def archive_routine(session: AsyncSession, user_id: int, routine_id: str) -> None:
    """Clear is_active. Idempotent for the owner; steps are kept."""
    result = await session.execute(
        update(SleepRoutine)
        .where(SleepRoutine.id == routine_id, SleepRoutine.user_id == user_id)
        .values(is_active=False, updated_at=utcnow())
    )
    if result.rowcount == 0:
        logger.info("Archive of sleep routine %s by user %s matched no rows", routine_id, user_id)
        raise NotFoundError(ROUTINE_NOT_FOUND)
    await log_action(
        session,
        user_id=user_id,
        action="archive",
        resource=RESOURCE,
        resource_id=routine_id,
    )
    logger.info("Archived sleep routine %s for user %s", routine_id, user_id)


async def get_routine_with_steps(
    session: AsyncSession, user_id: int, routine_id: str
) -> tuple[SleepRoutine, list[SleepRoutineStep]]:
    routine = await get_owned_routine(session, user_id, routine_id)
    r = await session.execute(
        select(SleepRoutineStep)
        .where(SleepRoutineStep.routine_id == routine.id)
        .order_by(SleepRoutineStep.order_index.asc())
    )
    return routine, list(r.scalars().all())


async def list_routines(session: AsyncSession, user_id: int, include_inactive: bool = False) -> list[SleepRoutine]:
    """Caller's routines, most recently updated first. Archived ones only when include_inactive."""
    stmt = select(SleepRoutine).where(SleepRoutine.user_id == user_id)
    if not include_inactive:
        stmt = stmt.where(SleepRoutine.is_active.is_(True))
    r = await session.execute(stmt.order_by(SleepRoutine.updated_at.desc()))
    return list(r.scalars().all())
