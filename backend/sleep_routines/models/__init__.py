from sleep_routines.models.user import User
from sleep_routines.models.sleep_routine import SleepRoutine, SleepRoutineStep
from sleep_routines.models.sleep_log import SleepLog
from sleep_routines.models.audit_log import AuditLog

__all__ = [
    "User",
    "SleepRoutine",
    "SleepRoutineStep",
    "SleepLog",
    "AuditLog",
]
