"""
Vault Crypto Core — Hashing, key derivation, field encryption and serialization.

Password chain used by the profile vault:
- secret      = SHA256(canonical(raw_password))   (persisted as session token)
- fingerprint = SHA256(canonical(secret))         (stored with each profile)
- field key   = PBKDF2-HMAC-SHA256(secret, fixed salt, N iterations)
- ciphertext  = urlsafe_b64([nonce 12B][encrypted_payload + tag 16B])

Security Note:
    Never log plaintext, ciphertext, secrets or derived keys.
    Nonces are random 96-bit, drawn fresh for every encryption.
"""
import os
import base64
import binascii
import logging
from typing import Any

import orjson
from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives.ciphers.aead import AESGCM, ChaCha20Poly1305

from ..conf import PROFILE_KDF_ITERATIONS, PROFILE_KDF_SALT
from ..exceptions import DecryptionError, DigestUnavailable

logger = logging.getLogger("navigator.profiles")

NONCE_SIZE = 12  # 96-bit nonce
TAG_SIZE = 16  # GCM / Poly1305 tag
KEY_LENGTH = 32  # AES-256

_BYTES_WRAPPER_KEY = "__vault_bytes_b64__"
_ESCAPE_WRAPPER_KEY = "__vault_escaped__"

_CIPHERS = {
    "aesgcm": AESGCM,
    "chacha20": ChaCha20Poly1305,
}


def get_cipher_cls(backend: str = "aesgcm") -> type:
    """Return the AEAD cipher class for a backend name."""
    try:
        return _CIPHERS[backend.lower()]
    except KeyError:
        raise ValueError(f"Unsupported cipher backend: {backend}") from None


# ---------------------------------------------------------------------------
# Value serialization
# ---------------------------------------------------------------------------

def _wrap(value: Any) -> Any:
    if isinstance(value, bytes):
        return {_BYTES_WRAPPER_KEY: base64.b64encode(value).decode("ascii")}
    # dicts that already carry a wrapper key are escaped so they stay dicts
    if isinstance(value, dict) and (
        _BYTES_WRAPPER_KEY in value or _ESCAPE_WRAPPER_KEY in value
    ):
        return {_ESCAPE_WRAPPER_KEY: value}
    return value


def serialize_value(value: Any) -> bytes:
    """Serialize a Python value to bytes for encryption.

    Supports: str, int, float, dict, list, bytes, bool, None.
    bytes values are wrapped as {"__vault_bytes_b64__": "<base64>"} for a
    safe JSON round-trip; a dict using one of the wrapper keys itself is
    wrapped as {"__vault_escaped__": <dict>}.
    """
    return orjson.dumps(_wrap(value))


def deserialize_value(data: bytes) -> Any:
    """Deserialize bytes back to a Python value."""
    parsed = orjson.loads(data)
    if isinstance(parsed, dict) and len(parsed) == 1:
        if _BYTES_WRAPPER_KEY in parsed:
            return base64.b64decode(parsed[_BYTES_WRAPPER_KEY])
        if _ESCAPE_WRAPPER_KEY in parsed:
            return parsed[_ESCAPE_WRAPPER_KEY]
    return parsed


def canonical_serialize(value: Any) -> bytes:
    """Stable serialization used as hash input (object keys sorted).

    Raises:
        TypeError: For values JSON cannot represent without ambiguity,
            such as dicts with non-string keys.
    """
    return orjson.dumps(_wrap(value), option=orjson.OPT_SORT_KEYS)


# ---------------------------------------------------------------------------
# Hashing and the password chain
# ---------------------------------------------------------------------------

def hash_value(value: Any) -> str:
    """Hash any serializable value to a lowercase hex SHA-256 digest.

    Raises:
        DigestUnavailable: If SHA-256 is not supported by the backend.
    """
    try:
        digest = hashes.Hash(hashes.SHA256())
    except UnsupportedAlgorithm as err:
        raise DigestUnavailable(
            "SHA-256 digest is not available in the cryptography backend"
        ) from err
    digest.update(canonical_serialize(value))
    return digest.finalize().hex()


def derive_secret(raw_password: str) -> str:
    """Authentication secret: hash of the raw password.

    This is the value persisted as session token and used as key material;
    the raw password itself never leaves this function.
    """
    return hash_value(raw_password)


def derive_fingerprint(secret: str) -> str:
    """Profile fingerprint: hash of the authentication secret."""
    return hash_value(secret)


def password_fingerprint(raw_password: str) -> str:
    """Fingerprint expected for a raw password (both hash stages)."""
    return derive_fingerprint(derive_secret(raw_password))


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

def derive_key(
    secret: str,
    salt: bytes = PROFILE_KDF_SALT.encode("utf-8"),
    iterations: int = PROFILE_KDF_ITERATIONS,
) -> bytes:
    """Derive a 32-byte field key using PBKDF2-HMAC-SHA256.

    Deliberately slow: callers running inside an event loop should offload
    it to a worker thread.

    Args:
        secret: Authentication secret (see ``derive_secret``).
        salt: Fixed salt shared by every profile.
        iterations: PBKDF2 iteration count.

    Returns:
        32-byte derived key.
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(secret.encode("utf-8"))


# ---------------------------------------------------------------------------
# Field encryption
# ---------------------------------------------------------------------------

def encrypt_field(key: bytes, value: Any, backend: str = "aesgcm") -> str:
    """Encrypt one serializable value.

    Format: urlsafe_b64([nonce 12B][encrypted_payload + tag 16B])

    Args:
        key: 32-byte key from ``derive_key``.
        value: Value to encrypt.
        backend: AEAD backend name ("aesgcm" or "chacha20").

    Returns:
        ASCII ciphertext string.
    """
    cipher = get_cipher_cls(backend)(key)
    nonce = os.urandom(NONCE_SIZE)
    ct = cipher.encrypt(nonce, serialize_value(value), None)
    return base64.urlsafe_b64encode(nonce + ct).decode("ascii")


def decrypt_field(key: bytes, ciphertext: str, backend: str = "aesgcm") -> Any:
    """Decrypt one field produced by ``encrypt_field``.

    Raises:
        DecryptionError: If the ciphertext is malformed, was tampered
            with, or was encrypted under another key.
    """
    if not isinstance(ciphertext, (str, bytes)):
        raise DecryptionError(
            f"ciphertext must be str, got {type(ciphertext).__name__}"
        )
    try:
        raw = base64.urlsafe_b64decode(ciphertext)
    except (binascii.Error, ValueError) as err:
        raise DecryptionError("ciphertext is not valid base64") from err
    _min = NONCE_SIZE + TAG_SIZE
    if len(raw) < _min:
        raise DecryptionError(
            f"ciphertext too short: {len(raw)} bytes (minimum {_min})"
        )
    cipher = get_cipher_cls(backend)(key)
    try:
        plaintext = cipher.decrypt(raw[:NONCE_SIZE], raw[NONCE_SIZE:], None)
    except InvalidTag as err:
        raise DecryptionError("ciphertext failed authentication") from err
    try:
        return deserialize_value(plaintext)
    except orjson.JSONDecodeError as err:
        raise DecryptionError("decrypted payload is not a valid value") from err
