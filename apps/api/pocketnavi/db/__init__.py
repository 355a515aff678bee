from .session import Base, create_engine, create_session_factory, normalize_database_url
from . import models  # noqa: F401

__all__ = ["Base", "create_engine", "create_session_factory", "normalize_database_url", "models"]
