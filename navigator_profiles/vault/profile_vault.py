"""
ProfileVault — Password-gated access to a collection of encrypted profiles.

Public API:
- ``start()`` — restore a previous session from the persisted token
- ``submit_password(raw)`` — authenticate, returns True/False
- ``get_decrypted_profile()`` — decrypted fields of the logged-in profile
- ``logout()`` — drop the session and the persisted token

States::

    UNINITIALIZED -> RESTORING -> AUTHENTICATED | UNAUTHENTICATED
    AUTHENTICATED -> UNAUTHENTICATED          (logout)
    UNAUTHENTICATED -> AUTHENTICATED          (submit_password)

Only one authentication (restore or password submission) may run at a time
on a vault; a concurrent submission raises ``AuthenticationInProgress``.
A running attempt is not interrupted when its caller is cancelled.

Security Note:
    Never log passwords, secrets or field values; fingerprints are logged
    as an 8-character prefix only.
"""
import asyncio
import logging
from enum import Enum
from typing import Any, Optional
from collections.abc import Awaitable, Callable

from ..exceptions import (
    AuthenticationInProgress,
    DecryptionError,
    SessionMissing,
)
from ..profile import Profile, load_profiles
from ..storage.abstract import AbstractTokenStore
from .codec import decrypt_profile
from .config import VaultConfig
from .credentials import CredentialStore, Session
from .crypto import derive_secret, derive_fingerprint

logger = logging.getLogger("navigator.profiles")


def _retrieve_exception(task: asyncio.Task) -> None:
    # a cancelled caller never awaits the outcome, retrieve it here
    if not task.cancelled():
        task.exception()


class VaultState(Enum):
    UNINITIALIZED = "uninitialized"
    RESTORING = "restoring"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class ProfileVault:
    """Unlocks one profile of a fixed, encrypted collection.

    Args:
        profiles: Encrypted profiles, anything ``load_profiles`` accepts.
        token_store: Store for the persisted credential token.
        config: Vault configuration (defaults to ``VaultConfig.from_env()``).
    """

    def __init__(
        self,
        profiles: Any,
        token_store: AbstractTokenStore,
        config: Optional[VaultConfig] = None,
    ):
        self._config = config or VaultConfig.from_env()
        self._profiles = load_profiles(profiles)
        self._credentials = CredentialStore(
            token_store,
            self.find_profile,
            token_name=self._config.token_name,
            ttl_days=self._config.token_ttl_days,
        )
        self._state = VaultState.UNINITIALIZED
        self._decrypted: Optional[Profile] = None
        self._auth_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> VaultState:
        return self._state

    @property
    def authenticated(self) -> bool:
        return self._state is VaultState.AUTHENTICATED

    @property
    def profiles(self) -> tuple[Profile, ...]:
        return self._profiles

    @property
    def session(self) -> Optional[Session]:
        return self._credentials.session

    @property
    def config(self) -> VaultConfig:
        return self._config

    @property
    def login_handler(self) -> Callable[[str], Awaitable[bool]]:
        """The callback handed to a login screen."""
        return self.submit_password

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_profile(self, secret: str) -> Optional[Profile]:
        """Return the first encrypted profile whose fingerprint matches."""
        fingerprint = derive_fingerprint(secret)
        for profile in self._profiles:
            if profile.fingerprint == fingerprint:
                return profile
        return None

    # ------------------------------------------------------------------
    # Single authentication in flight
    # ------------------------------------------------------------------

    async def _release_after(self, coro: Awaitable[Any]) -> Any:
        try:
            return await coro
        finally:
            self._auth_lock.release()

    async def _run_exclusive(self, coro: Awaitable[Any]) -> Any:
        if self._auth_lock.locked():
            coro.close()
            raise AuthenticationInProgress(
                "Another authentication is already running on this vault"
            )
        try:
            await self._auth_lock.acquire()
        except BaseException:
            coro.close()
            raise
        # the task owns the gate and keeps running if our caller is cancelled
        task = asyncio.ensure_future(self._release_after(coro))
        task.add_done_callback(_retrieve_exception)
        return await asyncio.shield(task)

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    async def _restore(self) -> None:
        self._state = VaultState.RESTORING
        try:
            session = await self._credentials.restore()
            if session is not None:
                try:
                    decrypted = await decrypt_profile(
                        session.secret, session.profile, self._config,
                    )
                except DecryptionError as err:
                    logger.warning(
                        "Restored profile %s... failed to decrypt: %s",
                        session.fingerprint[:8], err,
                    )
                    await self._credentials.destroy()
                else:
                    self._decrypted = decrypted
                    self._state = VaultState.AUTHENTICATED
                    return
        except Exception:
            self._state = VaultState.UNAUTHENTICATED
            raise
        self._state = VaultState.UNAUTHENTICATED
        logger.debug("Vault started unauthenticated")

    async def _authenticate(self, raw_password: str) -> bool:
        secret = derive_secret(raw_password)
        profile = self.find_profile(secret)
        if profile is None:
            logger.info("Password rejected: no matching profile")
            return False
        try:
            decrypted = await decrypt_profile(secret, profile, self._config)
        except DecryptionError as err:
            logger.warning(
                "Profile %s... matched but failed to decrypt: %s",
                profile.fingerprint[:8], err,
            )
            return False
        await self._credentials.establish(secret, profile)
        self._decrypted = decrypted
        self._state = VaultState.AUTHENTICATED
        logger.info("Authenticated profile %s...", profile.fingerprint[:8])
        return True

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def start(self) -> VaultState:
        """Try to restore a session from the persisted token.

        Returns:
            The resulting state; a no-op once the vault has started.
        """
        if self._state is VaultState.UNINITIALIZED:
            await self._run_exclusive(self._restore())
        return self._state

    async def submit_password(self, raw_password: str) -> bool:
        """Authenticate with a raw password.

        Args:
            raw_password: Password typed by the user.

        Returns:
            True if a profile matched and decrypted, False otherwise (the
            vault state is unchanged on False).

        Raises:
            AuthenticationInProgress: If another attempt is running.
        """
        if self._state is VaultState.UNINITIALIZED:
            await self.start()
        return await self._run_exclusive(self._authenticate(raw_password))

    def get_decrypted_profile(self) -> Profile:
        """Return the decrypted profile of the authenticated user.

        Raises:
            SessionMissing: If no user is authenticated.
        """
        if self._state is not VaultState.AUTHENTICATED or self._decrypted is None:
            raise SessionMissing(
                "No authenticated session: call submit_password() first"
            )
        return self._decrypted

    async def logout(self) -> None:
        """Destroy the session and persisted token; safe when logged out."""
        async with self._auth_lock:
            try:
                await self._credentials.destroy()
            finally:
                self._decrypted = None
                self._state = VaultState.UNAUTHENTICATED
        logger.info("Logged out")

    async def __aenter__(self) -> "ProfileVault":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None
