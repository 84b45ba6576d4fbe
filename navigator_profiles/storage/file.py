"""
File Token Store — cookie-jar style persistence on local disk.

One record per line::

    BENCRYPTIONTOKEN=<value>; expires=<unix timestamp>

The file is rewritten through a temporary sibling and ``os.replace`` so a
crash never leaves a half-written jar behind.
"""
import os
import time
import asyncio
import logging
from pathlib import Path
from typing import Union, Optional

from .abstract import AbstractTokenStore

logger = logging.getLogger("navigator.profiles")


class FileTokenStore(AbstractTokenStore):
    """Token store backed by a cookie-jar text file."""

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # File helpers (run in worker threads)
    # ------------------------------------------------------------------

    def _load(self) -> dict[str, tuple[str, float]]:
        records: dict[str, tuple[str, float]] = {}
        try:
            content = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return records
        for lineno, line in enumerate(content.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue
            try:
                pair, attr = line.split(";", 1)
                name, value = pair.split("=", 1)
                attr_name, expires = attr.strip().split("=", 1)
                if attr_name != "expires":
                    raise ValueError(f"unknown attribute {attr_name!r}")
                records[name] = (value, float(expires))
            except ValueError as err:
                logger.warning(
                    "Skipping corrupt token record at %s:%d: %s",
                    self._path, lineno, err,
                )
        return records

    def _dump(self, records: dict[str, tuple[str, float]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        lines = [
            f"{name}={value}; expires={int(expires)}\n"
            for name, (value, expires) in records.items()
        ]
        tmp.write_text("".join(lines), encoding="utf-8")
        os.replace(tmp, self._path)

    def _read_sync(self, name: str) -> Optional[str]:
        entry = self._load().get(name)
        if entry is None:
            return None
        value, expires = entry
        if expires <= time.time():
            return None
        return value

    def _write_sync(self, name: str, value: str, max_age: int) -> None:
        records = self._load()
        records[name] = (value, time.time() + max_age)
        self._dump(records)

    def _remove_sync(self, name: str) -> None:
        records = self._load()
        if records.pop(name, None) is not None:
            self._dump(records)

    # ------------------------------------------------------------------
    # AbstractTokenStore
    # ------------------------------------------------------------------

    async def _read(self, name: str) -> Optional[str]:
        async with self._lock:
            return await asyncio.to_thread(self._read_sync, name)

    async def _write(self, name: str, value: str, max_age: int) -> None:
        async with self._lock:
            await asyncio.to_thread(self._write_sync, name, value, max_age)

    async def _remove(self, name: str) -> None:
        async with self._lock:
            await asyncio.to_thread(self._remove_sync, name)
