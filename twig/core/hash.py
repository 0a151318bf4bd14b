"""Hash utilities for Twig."""

import hashlib
import string

from .errors import MalformedInputError

DEFAULT_ALGORITHM = 'sha1'

# Object formats understood by the store, mapped to hex address length.
ALGORITHMS = {
    'sha1': 40,
    'sha256': 64,
}

_HEX_DIGITS = frozenset(string.hexdigits.lower())


def _hasher(algorithm: str):
    if algorithm not in ALGORITHMS:
        raise MalformedInputError(f"unsupported hash algorithm '{algorithm}'")
    return hashlib.new(algorithm)


def hash_object(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Compute the hex digest of data.

    Args:
        data: Bytes to hash
        algorithm: 'sha1' (default) or 'sha256'

    Returns:
        Lowercase hex string (40 characters for sha1, 64 for sha256)
    """
    hasher = _hasher(algorithm)
    hasher.update(data)
    return hasher.hexdigest()


def address_length(algorithm: str = DEFAULT_ALGORITHM) -> int:
    """Number of hex characters in an address for the given algorithm."""
    if algorithm not in ALGORITHMS:
        raise MalformedInputError(f"unsupported hash algorithm '{algorithm}'")
    return ALGORITHMS[algorithm]


def validate_address(address: str, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Check that address is a full-length hex digest.

    Args:
        address: Candidate address
        algorithm: Hash algorithm the repository uses

    Returns:
        The address, lowercased

    Raises:
        MalformedInputError: If the address has the wrong length or
            contains non-hex characters
    """
    if not isinstance(address, str):
        raise MalformedInputError(f"address must be a string, got {type(address).__name__}")

    normalized = address.strip().lower()
    expected = address_length(algorithm)
    if len(normalized) != expected:
        raise MalformedInputError(
            f"address '{address}' must be {expected} hex characters"
        )
    if not set(normalized) <= _HEX_DIGITS:
        raise MalformedInputError(f"address '{address}' is not hexadecimal")
    return normalized


def is_hex(value: str) -> bool:
    """Return True if value is a non-empty lowercase-able hex string."""
    return bool(value) and set(value.lower()) <= _HEX_DIGITS
