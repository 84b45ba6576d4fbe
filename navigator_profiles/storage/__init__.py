"""Persisted credential token stores."""
from .abstract import AbstractTokenStore, validate_token
from .memory import MemoryTokenStore
from .file import FileTokenStore
from .cookie import CookieTokenStore

__all__ = [
    "AbstractTokenStore",
    "validate_token",
    "MemoryTokenStore",
    "FileTokenStore",
    "CookieTokenStore",
]
