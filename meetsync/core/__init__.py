"""Core app configuration, database, security and errors."""

from meetsync.core.config import Settings, get_settings
from meetsync.core.database import build_engine, build_session_factory

__all__ = ["Settings", "get_settings", "build_engine", "build_session_factory"]
