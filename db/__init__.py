"""Database layer for the Umrah registration form."""

from .base import Base, TimestampMixin
from .models_sqlalchemy import Booking, UmrahPackage
from .session import (
    engine,
    SessionLocal,
    create_engine,
    get_session,
    get_session_context,
    init_db,
    drop_db,
    close_db,
    DatabaseConfig,
)

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Models
    "Booking",
    "UmrahPackage",
    # Session
    "engine",
    "SessionLocal",
    "create_engine",
    "get_session",
    "get_session_context",
    "init_db",
    "drop_db",
    "close_db",
    "DatabaseConfig",
]
