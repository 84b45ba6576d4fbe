"""Navigator Profiles exceptions."""


class ProfileVaultError(Exception):
    """Base class for every error raised by navigator_profiles."""


class DecryptionError(ProfileVaultError):
    """Ciphertext failed its integrity or format check."""


class SessionMissing(ProfileVaultError, RuntimeError):
    """The decrypted profile was requested while no user is authenticated."""


class StorageFormatViolation(ProfileVaultError, ValueError):
    """A token name or value contains characters reserved by the store format."""


class AuthenticationInProgress(ProfileVaultError, RuntimeError):
    """Another password submission is still running on this vault."""


class DigestUnavailable(ProfileVaultError, RuntimeError):
    """The digest primitive required for fingerprints is not available."""


class ProfileFormatError(ProfileVaultError, ValueError):
    """A profile record is malformed (missing or invalid fingerprint)."""
