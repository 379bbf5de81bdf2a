from santa.db.models import Base, DeliveryAttempt, DeliveryRun, RunStatus
from santa.db.session import SessionLocal, get_session, init_engine, is_initialized

__all__ = [
    "Base",
    "DeliveryAttempt",
    "DeliveryRun",
    "RunStatus",
    "SessionLocal",
    "get_session",
    "init_engine",
    "is_initialized",
]
