"""
Profile Codec — Field-by-field encryption of profile records.

Every field except the fingerprint is encrypted independently. The key is
derived once per call, then fields are processed concurrently in worker
threads and gathered back; the aggregate call either resolves every field
or fails as a whole.

Security Note:
    ``decrypt_profile`` does not check the fingerprint; the vault matches
    the fingerprint before decrypting.
"""
import asyncio
import logging
from typing import Any, Optional
from collections.abc import Mapping

from ..conf import FINGERPRINT_FIELD
from ..exceptions import DecryptionError
from ..profile import Profile
from .config import VaultConfig
from .crypto import derive_key, derive_fingerprint, encrypt_field, decrypt_field

logger = logging.getLogger("navigator.profiles")


async def derive_field_key(secret: str, config: VaultConfig) -> bytes:
    """Run the (slow) KDF for ``secret`` off the event loop."""
    return await asyncio.to_thread(
        derive_key, secret, config.salt_bytes, config.kdf_iterations,
    )


async def _decrypt_one(key: bytes, name: str, ciphertext: Any, backend: str) -> Any:
    try:
        return await asyncio.to_thread(decrypt_field, key, ciphertext, backend)
    except DecryptionError as err:
        raise DecryptionError(f"Field '{name}' could not be decrypted: {err}") from err


async def encrypt_profile(
    secret: str,
    fields: Mapping[str, Any],
    config: Optional[VaultConfig] = None,
) -> Profile:
    """Encrypt every field of a plaintext record.

    Args:
        secret: Authentication secret (``derive_secret(raw_password)``).
        fields: Plaintext fields; a Profile or a record carrying a
            fingerprint entry is accepted, the fingerprint is recomputed.
        config: Vault configuration (defaults to ``VaultConfig()``).

    Returns:
        Encrypted Profile whose fingerprint is ``derive_fingerprint(secret)``.
    """
    config = config or VaultConfig()
    if isinstance(fields, Profile):
        fields = fields.fields
    fields = {k: v for k, v in fields.items() if k != FINGERPRINT_FIELD}
    key = await derive_field_key(secret, config)
    names = list(fields)
    ciphertexts = await asyncio.gather(*[
        asyncio.to_thread(encrypt_field, key, fields[name], config.cipher_backend)
        for name in names
    ])
    fingerprint = derive_fingerprint(secret)
    logger.debug(
        "Encrypted %d field(s) for profile %s...", len(names), fingerprint[:8]
    )
    return Profile(fingerprint, dict(zip(names, ciphertexts)))


async def decrypt_profile(
    secret: str,
    profile: Profile,
    config: Optional[VaultConfig] = None,
) -> Profile:
    """Decrypt every field of an encrypted Profile.

    Args:
        secret: Authentication secret the profile was enrolled with.
        profile: Encrypted Profile.
        config: Vault configuration (defaults to ``VaultConfig()``).

    Returns:
        New Profile with plaintext field values and the same fingerprint.

    Raises:
        DecryptionError: If any field fails to decrypt; no partial result.
    """
    config = config or VaultConfig()
    key = await derive_field_key(secret, config)
    names = list(profile)
    # gather() waits for the remaining fields even when one fails
    results = await asyncio.gather(
        *[
            _decrypt_one(key, name, profile[name], config.cipher_backend)
            for name in names
        ],
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return profile.replace(dict(zip(names, results)))
