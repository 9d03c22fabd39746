"""Sleep logs API: actual bed/wake times and quality, optionally tied to a routine."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_routines.api.deps import get_current_user
from sleep_routines.config import settings
from sleep_routines.db.session import get_db
from sleep_routines.models.sleep_log import SleepLog
from sleep_routines.models.user import User
from sleep_routines.schemas.common import ActionResponse, iso_utc
from sleep_routines.schemas.sleep_log import SleepLogCreate, SleepLogUpdate
from sleep_routines.services import sleep_logs as sleep_log_service

router = APIRouter(prefix="/sleep-logs", tags=["sleep-logs"])


def _log_to_response(row: SleepLog) -> dict:
    return {
        "id": row.id,
        "user_id": row.user_id,
        "routine_id": row.routine_id,
        "sleep_date": iso_utc(row.sleep_date),
        "bed_time": iso_utc(row.bed_time),
        "wake_time": iso_utc(row.wake_time),
        "sleep_quality_score": row.sleep_quality_score,
        "notes": row.notes,
        "created_at": iso_utc(row.created_at),
    }


@router.post(
    "",
    response_model=ActionResponse,
    status_code=201,
    summary="Create sleep log",
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Routine belongs to another user"},
        422: {"description": "Invalid input"},
    },
)
async def create_sleep_log(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    body: SleepLogCreate,
) -> ActionResponse:
    """Log one night. sleep_date defaults to now; routine_id must be one of your routines."""
    log_id = await sleep_log_service.create_sleep_log(session, user.id, body)
    return ActionResponse(data={"id": log_id})


@router.patch(
    "/{log_id}",
    response_model=ActionResponse,
    summary="Update sleep log",
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Routine belongs to another user"},
        404: {"description": "Sleep log not found"},
        422: {"description": "Invalid input"},
    },
)
async def update_sleep_log(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    log_id: Annotated[str, Path(description="Sleep log ID")],
    body: SleepLogUpdate,
) -> ActionResponse:
    await sleep_log_service.update_sleep_log(session, user.id, log_id, body)
    return ActionResponse()


@router.get(
    "",
    response_model=ActionResponse,
    summary="List sleep logs",
    responses={401: {"description": "Not authenticated"}, 422: {"description": "Invalid input"}},
)
async def list_sleep_logs(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    page: int = Query(default=1, ge=1, le=settings.sleep_logs_max_page),
    page_size: int = Query(
        default=settings.sleep_logs_default_page_size, ge=1, le=settings.sleep_logs_max_page_size
    ),
    routine_id: str | None = None,
) -> ActionResponse:
    """
    Page of logs ordered by sleep_date then created_at (newest first).
    total counts the items in this page only; a short page means there are no more.
    """
    rows = await sleep_log_service.list_sleep_logs(
        session, user.id, page=page, page_size=page_size, routine_id=routine_id
    )
    return ActionResponse(
        data={
            "items": [_log_to_response(r) for r in rows],
            "page": page,
            "page_size": page_size,
            "total": len(rows),
        }
    )
