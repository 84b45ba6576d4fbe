"""
Profile Enrollment — Build the encrypted profile collection from passwords.

Operator utility: turns ``(raw_password, plaintext_fields)`` entries into
the encrypted records a ProfileVault is set up with, and serializes them
for distribution.

Security Note:
    Plaintext exists in memory only while each profile is encrypted.
    Never log passwords, field values or ciphertext; only counts and
    fingerprint prefixes.
"""
import logging
from typing import Any, Optional
from collections.abc import Iterable, Mapping

import orjson

from ..profile import Profile
from .codec import encrypt_profile
from .config import VaultConfig
from .crypto import derive_secret

logger = logging.getLogger("navigator.profiles")


async def enroll_profile(
    raw_password: str,
    fields: Mapping[str, Any],
    config: Optional[VaultConfig] = None,
) -> Profile:
    """Encrypt one plaintext profile for the given password.

    Args:
        raw_password: Password that will unlock the profile.
        fields: Plaintext field values.
        config: Vault configuration (defaults to ``VaultConfig()``).

    Returns:
        Encrypted Profile, fingerprint included.
    """
    if not raw_password:
        raise ValueError("Enrollment password cannot be empty")
    return await encrypt_profile(derive_secret(raw_password), fields, config)


async def enroll_profiles(
    entries: Iterable[tuple[str, Mapping[str, Any]]],
    config: Optional[VaultConfig] = None,
) -> tuple[Profile, ...]:
    """Encrypt a batch of profiles, one password per profile.

    Args:
        entries: ``(raw_password, fields)`` pairs, in collection order.
        config: Vault configuration (defaults to ``VaultConfig()``).

    Returns:
        Tuple of encrypted Profiles, same order as ``entries``.

    Raises:
        ValueError: If two entries share a password (their fingerprints
            would collide).
    """
    config = config or VaultConfig()
    profiles: list[Profile] = []
    seen: set[str] = set()
    for raw_password, fields in entries:
        profile = await enroll_profile(raw_password, fields, config)
        if profile.fingerprint in seen:
            raise ValueError(
                f"Duplicate profile fingerprint {profile.fingerprint[:8]}...: "
                "every profile needs its own password"
            )
        seen.add(profile.fingerprint)
        profiles.append(profile)
    logger.info("Enrolled %d profile(s)", len(profiles))
    return tuple(profiles)


def dump_profiles(profiles: Iterable[Profile]) -> bytes:
    """Serialize encrypted profiles as a JSON list readable by ``load_profiles``."""
    return orjson.dumps(
        [profile.to_record() for profile in profiles],
        option=orjson.OPT_INDENT_2,
    )
