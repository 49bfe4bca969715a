from .session import engine, Base, async_session
from . import models  # noqa: F401

__all__ = ["engine", "Base", "async_session", "models"]
