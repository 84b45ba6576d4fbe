"""In-process token store."""
import time
from typing import Optional

from .abstract import AbstractTokenStore


class MemoryTokenStore(AbstractTokenStore):
    """Keeps tokens in a dict; survives vault instances, not the process."""

    def __init__(self) -> None:
        self._tokens: dict[str, tuple[str, float]] = {}  # name -> (value, expires)

    async def _read(self, name: str) -> Optional[str]:
        entry = self._tokens.get(name)
        if entry is None:
            return None
        value, expires = entry
        if expires <= time.time():
            del self._tokens[name]
            return None
        return value

    async def _write(self, name: str, value: str, max_age: int) -> None:
        self._tokens[name] = (value, time.time() + max_age)

    async def _remove(self, name: str) -> None:
        self._tokens.pop(name, None)

    def __len__(self) -> int:
        return len(self._tokens)
