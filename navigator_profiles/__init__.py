"""Navigator Profiles.

Password-gated store of encrypted profiles with a persisted session token.
"""
from .version import __version__
from .exceptions import (
    ProfileVaultError,
    DecryptionError,
    SessionMissing,
    StorageFormatViolation,
    AuthenticationInProgress,
    DigestUnavailable,
    ProfileFormatError,
)
from .profile import Profile, load_profiles
from .storage import (
    AbstractTokenStore,
    MemoryTokenStore,
    FileTokenStore,
    CookieTokenStore,
)
from .vault import (
    ProfileVault,
    VaultState,
    VaultConfig,
    enroll_profile,
    enroll_profiles,
)

__all__ = (
    "__version__",
    "ProfileVaultError",
    "DecryptionError",
    "SessionMissing",
    "StorageFormatViolation",
    "AuthenticationInProgress",
    "DigestUnavailable",
    "ProfileFormatError",
    "Profile",
    "load_profiles",
    "AbstractTokenStore",
    "MemoryTokenStore",
    "FileTokenStore",
    "CookieTokenStore",
    "ProfileVault",
    "VaultState",
    "VaultConfig",
    "enroll_profile",
    "enroll_profiles",
)
