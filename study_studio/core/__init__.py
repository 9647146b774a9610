"""Core application components."""

from .config import Settings, settings
from .database import build_engine, create_session_factory, drop_db, init_db
from .state import AppState

__all__ = [
    "settings",
    "Settings",
    "build_engine",
    "create_session_factory",
    "init_db",
    "drop_db",
    "AppState",
]
