import logging
from pathlib import Path
from types import MappingProxyType
from typing import Union, Any
from collections.abc import Iterable, Iterator, Mapping
import orjson
from .conf import FINGERPRINT_FIELD
from .exceptions import ProfileFormatError

logger = logging.getLogger("navigator.profiles")


class Profile(Mapping[str, Any]):
    """Profile dict-like object.

    Holds a ``fingerprint`` (hash of the hashed password) and an open set
    of named fields. Depending on where the instance comes from, the field
    values are ciphertext strings (enrolled profiles) or plaintext values
    (decrypted profiles).

    Profiles are immutable: use ``replace()`` to build a new instance with
    other field values.
    """

    __slots__ = ('_fingerprint', '_fields')

    def __init__(
        self,
        fingerprint: str,
        fields: Mapping[str, Any] = None,
        **kwargs
    ) -> None:
        if not isinstance(fingerprint, str) or not fingerprint:
            raise ProfileFormatError(
                "Profile fingerprint must be a non-empty string"
            )
        data = dict(fields or {})
        data.update(kwargs)
        if FINGERPRINT_FIELD in data:
            raise ProfileFormatError(
                f"'{FINGERPRINT_FIELD}' is reserved and cannot be a profile field"
            )
        object.__setattr__(self, '_fingerprint', fingerprint)
        object.__setattr__(self, '_fields', MappingProxyType(data))

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Profile":
        """Build a Profile from a flat record.

        The ``fingerprint`` key holds the fingerprint, any other key is a field.

        Raises:
            ProfileFormatError: If the record has no valid fingerprint.
        """
        if isinstance(record, Profile):
            return record
        if not isinstance(record, Mapping):
            raise ProfileFormatError(
                f"Profile record must be a mapping, got {type(record).__name__}"
            )
        try:
            fingerprint = record[FINGERPRINT_FIELD]
        except KeyError:
            raise ProfileFormatError(
                f"Profile record has no '{FINGERPRINT_FIELD}' field"
            ) from None
        fields = {k: v for k, v in record.items() if k != FINGERPRINT_FIELD}
        return cls(fingerprint, fields)

    def to_record(self) -> dict:
        """Return the flat record form (fingerprint + fields)."""
        record = {FINGERPRINT_FIELD: self._fingerprint}
        record.update(self._fields)
        return record

    def replace(self, fields: Mapping[str, Any]) -> "Profile":
        """Return a new Profile with the same fingerprint and other fields."""
        return type(self)(self._fingerprint, fields)

    # --- Properties ---

    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    @property
    def fields(self) -> Mapping[str, Any]:
        return self._fields

    # --- Magic Methods ---

    def __repr__(self) -> str:
        return (
            f'<Profile [fingerprint:{self._fingerprint[:8]}] '
            f'fields={sorted(self._fields.keys())}>'
        )

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __getattr__(self, key: str) -> Any:
        # Avoid infinite recursion for internal attributes
        if key.startswith('_'):
            raise AttributeError(key)
        try:
            return self._fields[key]
        except KeyError:
            raise AttributeError(key) from None

    def __setattr__(self, key: str, value: Any) -> None:
        raise AttributeError(f"Profile is immutable, cannot set '{key}'")

    def __delattr__(self, key: str) -> None:
        raise AttributeError(f"Profile is immutable, cannot delete '{key}'")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Profile):
            return NotImplemented
        return (
            self._fingerprint == other._fingerprint
            and dict(self._fields) == dict(other._fields)
        )

    __hash__ = None

    def __reduce__(self):
        return (type(self), (self._fingerprint, dict(self._fields)))


def load_profiles(
    source: Union[Iterable[Mapping[str, Any]], str, bytes, Path]
) -> tuple[Profile, ...]:
    """Load an ordered collection of profiles.

    Args:
        source: an iterable of records (or Profile instances), a JSON
            document (str or bytes) holding a list of records, or a Path
            to a JSON file.

    Returns:
        Tuple of Profile instances, in the given order.

    Raises:
        ProfileFormatError: If the JSON document is invalid or a record
            is malformed.
    """
    if isinstance(source, Path):
        source = source.read_bytes()
    if isinstance(source, (str, bytes)):
        try:
            source = orjson.loads(source)
        except orjson.JSONDecodeError as err:
            raise ProfileFormatError(
                f"Invalid profile collection document: {err}"
            ) from err
        if not isinstance(source, list):
            raise ProfileFormatError(
                "Profile collection document must be a JSON list"
            )
    profiles = tuple(Profile.from_record(record) for record in source)
    seen: set[str] = set()
    for profile in profiles:
        if profile.fingerprint in seen:
            logger.warning(
                "Duplicate profile fingerprint %s..., first match wins",
                profile.fingerprint[:8]
            )
        seen.add(profile.fingerprint)
    logger.debug("Loaded %d profile(s)", len(profiles))
    return profiles
