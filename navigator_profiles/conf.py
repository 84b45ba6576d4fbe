"""
Navigator Profiles defaults.

Every value can be overridden through the environment:
    PROFILE_TOKEN_NAME       = name of the persisted credential token
    PROFILE_TOKEN_TTL_DAYS   = lifetime of the persisted token, in days
    PROFILE_KDF_ITERATIONS   = PBKDF2 iteration count
    PROFILE_KDF_SALT         = fixed PBKDF2 salt shared by all profiles
    PROFILE_CIPHER_BACKEND   = "aesgcm" or "chacha20"
"""
import os

FINGERPRINT_FIELD = 'fingerprint'

PROFILE_TOKEN_NAME = os.environ.get('PROFILE_TOKEN_NAME', 'BENCRYPTIONTOKEN')
PROFILE_TOKEN_TTL_DAYS = int(os.environ.get('PROFILE_TOKEN_TTL_DAYS', 1000))
PROFILE_KDF_ITERATIONS = int(os.environ.get('PROFILE_KDF_ITERATIONS', 10000))
PROFILE_KDF_SALT = os.environ.get('PROFILE_KDF_SALT', '1*b99a-84ffhysim294&w22')
PROFILE_CIPHER_BACKEND = os.environ.get('PROFILE_CIPHER_BACKEND', 'aesgcm').lower()

# characters that would break a cookie-style "name=value; attr" record
TOKEN_RESERVED_CHARS = frozenset(';=,')
