"""
Credential Store — In-memory session plus the persisted credential token.

The token holds the authentication secret (hash of the raw password),
never the raw password nor any field value. The session lives only in
this object; one CredentialStore belongs to exactly one ProfileVault,
which is its single writer.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Optional
from collections.abc import Callable

from ..profile import Profile
from ..storage.abstract import AbstractTokenStore

logger = logging.getLogger("navigator.profiles")


@dataclass(frozen=True)
class Session:
    """Authenticated session: secret (key material) plus matched profile."""

    secret: str = field(repr=False)
    profile: Profile
    established_at: float = field(default_factory=time.time)

    @property
    def fingerprint(self) -> str:
        return self.profile.fingerprint


class CredentialStore:
    """Owns the session lifecycle: establish, restore, destroy.

    Args:
        token_store: Persistence for the credential token.
        lookup: Callable returning the encrypted profile matching a secret,
            or None.
        token_name: Name the token is stored under.
        ttl_days: Token lifetime, refreshed on every establish/restore.
    """

    def __init__(
        self,
        token_store: AbstractTokenStore,
        lookup: Callable[[str], Optional[Profile]],
        token_name: str = "BENCRYPTIONTOKEN",
        ttl_days: int = 1000,
    ) -> None:
        self._store = token_store
        self._lookup = lookup
        self._token_name = token_name
        self._ttl_days = ttl_days
        self._session: Optional[Session] = None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def authenticated(self) -> bool:
        return self._session is not None

    @property
    def token_name(self) -> str:
        return self._token_name

    async def restore(self) -> Optional[Session]:
        """Rebuild the session from the persisted token.

        Returns:
            The new Session, or None when there is no token or it matches
            no profile.
        """
        secret = await self._store.read(self._token_name)
        if secret is None:
            logger.debug("No persisted token %s", self._token_name)
            return None
        profile = self._lookup(secret)
        if profile is None:
            logger.info("Persisted token matches no profile")
            return None
        session = await self.establish(secret, profile)
        logger.info("Session restored for profile %s...", profile.fingerprint[:8])
        return session

    async def establish(self, secret: str, profile: Profile) -> Session:
        """Persist the token and create the in-memory session.

        Raises:
            StorageFormatViolation: If the secret cannot be stored; no
                session is created.
        """
        await self._store.write(self._token_name, secret, self._ttl_days)
        self._session = Session(secret=secret, profile=profile)
        return self._session

    async def destroy(self) -> None:
        """Remove the token and clear the session. Safe without a session."""
        self._session = None
        await self._store.remove(self._token_name)
