"""
Vault Configuration — Validated settings for key derivation and sessions.

Defaults come from ``navigator_profiles.conf``, which reads:
    PROFILE_TOKEN_NAME, PROFILE_TOKEN_TTL_DAYS, PROFILE_KDF_ITERATIONS,
    PROFILE_KDF_SALT, PROFILE_CIPHER_BACKEND

Security Note:
    Never log the salt together with fingerprints, and never log secrets.
    Only log iteration counts, backends and token names.
"""
import os
import logging

from pydantic import BaseModel, Field, field_validator

from ..conf import (
    PROFILE_TOKEN_NAME,
    PROFILE_TOKEN_TTL_DAYS,
    PROFILE_KDF_ITERATIONS,
    PROFILE_KDF_SALT,
    PROFILE_CIPHER_BACKEND,
    TOKEN_RESERVED_CHARS,
)

logger = logging.getLogger("navigator.profiles")


class VaultConfig(BaseModel):
    """Validated vault configuration."""

    token_name: str = Field(default=PROFILE_TOKEN_NAME, min_length=1)
    token_ttl_days: int = Field(default=PROFILE_TOKEN_TTL_DAYS, ge=1)
    kdf_iterations: int = Field(default=PROFILE_KDF_ITERATIONS, ge=1000)
    kdf_salt: str = Field(default=PROFILE_KDF_SALT, min_length=1)
    cipher_backend: str = Field(default=PROFILE_CIPHER_BACKEND)

    model_config = {"frozen": True}

    @field_validator("cipher_backend")
    @classmethod
    def validate_cipher(cls, v: str) -> str:
        """Validate cipher backend is supported."""
        v = v.lower()
        if v not in ("aesgcm", "chacha20"):
            raise ValueError(f"Unsupported cipher backend: {v}")
        return v

    @field_validator("token_name")
    @classmethod
    def validate_token_name(cls, v: str) -> str:
        """The token name ends up in a cookie-style record."""
        if any(c in TOKEN_RESERVED_CHARS or c.isspace() for c in v):
            raise ValueError(
                f"Token name {v!r} contains reserved characters"
            )
        return v

    @property
    def salt_bytes(self) -> bytes:
        return self.kdf_salt.encode("utf-8")

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Create VaultConfig by reading the environment at call time.

        Returns:
            Populated VaultConfig instance.
        """
        env = os.environ
        config = cls(
            token_name=env.get("PROFILE_TOKEN_NAME", PROFILE_TOKEN_NAME),
            token_ttl_days=env.get("PROFILE_TOKEN_TTL_DAYS", PROFILE_TOKEN_TTL_DAYS),
            kdf_iterations=env.get("PROFILE_KDF_ITERATIONS", PROFILE_KDF_ITERATIONS),
            kdf_salt=env.get("PROFILE_KDF_SALT", PROFILE_KDF_SALT),
            cipher_backend=env.get("PROFILE_CIPHER_BACKEND", PROFILE_CIPHER_BACKEND),
        )
        logger.debug(
            "Vault config: backend=%s iterations=%d token=%s ttl=%dd",
            config.cipher_backend, config.kdf_iterations,
            config.token_name, config.token_ttl_days,
        )
        return config
