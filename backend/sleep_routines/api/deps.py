"""FastAPI dependencies: current user from JWT."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_routines.core.auth import decode_token
from sleep_routines.core.errors import UnauthorizedError
from sleep_routines.db.session import get_db
from sleep_routines.models.user import User

logger = logging.getLogger(__name__)


async def get_current_user(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Resolve the acting user from the bearer token. Fails closed before any routine/log access."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise UnauthorizedError()
    token = auth_header[7:].strip()
    if not token:
        raise UnauthorizedError()
    try:
        payload = decode_token(token)
    except JWTError as e:
        logger.debug("Rejected bearer token: %s", e)
        raise UnauthorizedError("Invalid or expired token.") from e
    user_id_str = payload.get("sub")
    if not user_id_str:
        raise UnauthorizedError("Invalid token.")
    try:
        user_id = int(user_id_str)
    except ValueError:
        raise UnauthorizedError("Invalid token.")
    r = await session.execute(select(User).where(User.id == user_id))
    user = r.scalar_one_or_none()
    if not user:
        logger.warning("Token for unknown user id=%s", user_id)
        raise UnauthorizedError()
    return user
