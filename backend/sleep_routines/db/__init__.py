from sleep_routines.db.session import async_session_maker, get_db, init_db
from sleep_routines.db.base import Base

__all__ = ["Base", "async_session_maker", "get_db", "init_db"]
