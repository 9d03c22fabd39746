"""Sleep routines API: bedtime routines with ordered pre-sleep steps."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_routines.api.deps import get_current_user
from sleep_routines.db.session import get_db
from sleep_routines.models.sleep_routine import SleepRoutine, SleepRoutineStep
from sleep_routines.models.user import User
from sleep_routines.schemas.common import ActionResponse, iso_utc
from sleep_routines.schemas.routine import RoutineCreate, RoutineUpdate
from sleep_routines.services import routines as routine_service

router = APIRouter(prefix="/routines", tags=["routines"])

_ERRORS = {
    401: {"description": "Not authenticated"},
    422: {"description": "Invalid input"},
}
_NOT_FOUND = {404: {"description": "Sleep routine not found"}}


def _routine_to_response(row: SleepRoutine) -> dict:
    return {
        "id": row.id,
        "user_id": row.user_id,
        "name": row.name,
        "goal_description": row.goal_description,
        "target_bed_time_local": row.target_bed_time_local,
        "target_wake_time_local": row.target_wake_time_local,
        "time_zone": row.time_zone,
        "notes": row.notes,
        "is_active": row.is_active,
        "created_at": iso_utc(row.created_at),
        "updated_at": iso_utc(row.updated_at),
    }


def _step_to_response(row: SleepRoutineStep) -> dict:
    return {
        "id": row.id,
        "routine_id": row.routine_id,
        "order_index": row.order_index,
        "title": row.title,
        "description": row.description,
        "minutes_before_bed": row.minutes_before_bed,
        "created_at": iso_utc(row.created_at),
    }


@router.post(
    "",
    response_model=ActionResponse,
    status_code=201,
    summary="Create sleep routine",
    responses=_ERRORS,
)
async def create_routine(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    body: RoutineCreate,
) -> ActionResponse:
    """Create an active routine, optionally with steps. Returns the new id."""
    routine_id = await routine_service.create_routine(session, user.id, body)
    return ActionResponse(data={"id": routine_id})


@router.get(
    "",
    response_model=ActionResponse,
    summary="List my sleep routines",
    responses=_ERRORS,
)
async def list_my_routines(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    include_inactive: bool = Query(default=False, description="Include archived routines"),
) -> ActionResponse:
    """Routines ordered by last update (newest first); total is the number of items returned."""
    rows = await routine_service.list_routines(session, user.id, include_inactive=include_inactive)
    return ActionResponse(data={"items": [_routine_to_response(r) for r in rows], "total": len(rows)})


@router.get(
    "/{routine_id}",
    response_model=ActionResponse,
    summary="Get sleep routine with steps",
    responses={**_ERRORS, **_NOT_FOUND},
)
async def get_routine_with_steps(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    routine_id: Annotated[str, Path(description="Sleep routine ID")],
) -> ActionResponse:
    routine, steps = await routine_service.get_routine_with_steps(session, user.id, routine_id)
    return ActionResponse(
        data={
            "routine": _routine_to_response(routine),
            "steps": [_step_to_response(s) for s in steps],
        }
    )


@router.patch(
    "/{routine_id}",
    response_model=ActionResponse,
    summary="Update sleep routine",
    responses={**_ERRORS, **_NOT_FOUND},
)
async def update_routine(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    routine_id: Annotated[str, Path(description="Sleep routine ID")],
    body: RoutineUpdate,
) -> ActionResponse:
    """Update only the provided fields. A steps list (even empty) replaces all existing steps."""
    await routine_service.update_routine(session, user.id, routine_id, body)
    return ActionResponse()


@router.post(
    "/{routine_id}/archive",
    response_model=ActionResponse,
    summary="Archive sleep routine",
    responses={**_ERRORS, **_NOT_FOUND},
)
async def archive_routine(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    routine_id: Annotated[str, Path(description="Sleep routine ID")],
) -> ActionResponse:
    """Mark the routine inactive. Archiving an already archived routine succeeds."""
    await routine_service.archive_routine(session, user.id, routine_id)
    return ActionResponse()
