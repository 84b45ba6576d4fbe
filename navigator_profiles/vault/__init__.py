"""Profile Vault — Password-gated, field-encrypted profiles.

Security Note (Threat Model):
    Decrypted profiles and the authentication secret live in process
    memory while a user is authenticated. A compromised runtime can read
    them; this is an accepted limitation. The persisted token is the hashed
    password, never the raw password nor any field value.
"""

from .config import VaultConfig
from .crypto import (
    hash_value,
    derive_secret,
    derive_fingerprint,
    password_fingerprint,
    derive_key,
    encrypt_field,
    decrypt_field,
)
from .codec import encrypt_profile, decrypt_profile
from .credentials import CredentialStore, Session
from .profile_vault import ProfileVault, VaultState
from .enrollment import enroll_profile, enroll_profiles, dump_profiles

__all__ = [
    "VaultConfig",
    "hash_value",
    "derive_secret",
    "derive_fingerprint",
    "password_fingerprint",
    "derive_key",
    "encrypt_field",
    "decrypt_field",
    "encrypt_profile",
    "decrypt_profile",
    "CredentialStore",
    "Session",
    "ProfileVault",
    "VaultState",
    "enroll_profile",
    "enroll_profiles",
    "dump_profiles",
]
