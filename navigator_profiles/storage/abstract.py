"""
Token Store interface.

A token store keeps one opaque string per token name, with an expiration.
Stores are cookie-shaped: a record is ``name=value; expires=...``, so names
and values must never carry the record/attribute delimiters.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..conf import TOKEN_RESERVED_CHARS
from ..exceptions import StorageFormatViolation

logger = logging.getLogger("navigator.profiles")

SECONDS_PER_DAY = 24 * 60 * 60


def validate_token(name: str, value: str) -> None:
    """Validate a token name and value before persisting them.

    Raises:
        StorageFormatViolation: If either is empty or contains one of the
            reserved characters (``;``, ``=``, ``,``) or whitespace.
    """
    for label, item in (("name", name), ("value", value)):
        if not isinstance(item, str) or not item:
            raise StorageFormatViolation(f"Token {label} must be a non-empty string")
        if any(c in TOKEN_RESERVED_CHARS or c.isspace() for c in item):
            raise StorageFormatViolation(
                f"Token {label} cannot contain semicolons, equals signs, "
                f"commas or whitespace"
            )


class AbstractTokenStore(ABC):
    """Abstract key/value store for the persisted credential token."""

    async def read(self, name: str) -> Optional[str]:
        """Return the token value, or None if absent or expired."""
        return await self._read(name)

    async def write(self, name: str, value: str, ttl_days: int) -> None:
        """Persist ``value`` under ``name`` for ``ttl_days`` days.

        Raises:
            StorageFormatViolation: If name or value would break the format;
                nothing is written in that case.
            ValueError: If ttl_days is not positive.
        """
        validate_token(name, value)
        if ttl_days <= 0:
            raise ValueError(f"ttl_days must be positive, got {ttl_days}")
        await self._write(name, value, ttl_days * SECONDS_PER_DAY)
        logger.debug("Token %s written (ttl=%dd)", name, ttl_days)

    async def remove(self, name: str) -> None:
        """Delete the token. No-op if it does not exist."""
        await self._remove(name)
        logger.debug("Token %s removed", name)

    @abstractmethod
    async def _read(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    async def _write(self, name: str, value: str, max_age: int) -> None:
        pass

    @abstractmethod
    async def _remove(self, name: str) -> None:
        pass
