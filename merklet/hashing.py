"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merklet, a product of Garudex Labs

Hash primitives for Merkle tree construction.

This module provides the opaque digest(bytes) -> bytes primitive that leaf
items and branch nodes hash with:
- Named hash functions with a fixed output width
- Two interchangeable backends: Python's hashlib and OpenSSL via cryptography
- Hex encoding/decoding of digests

Both backends produce identical digests for the same algorithm. Failures
raised by the underlying library are propagated unchanged.
"""

import hashlib
from typing import Callable, Dict, Tuple

from cryptography.hazmat.primitives import hashes

from merklet.exceptions import UnsupportedHashAlgorithmError


DEFAULT_ALGORITHM = "sha256"
DEFAULT_BACKEND = "hashlib"

SUPPORTED_BACKENDS = ("hashlib", "openssl")

# Algorithm name -> factory for the cryptography (OpenSSL) hash algorithm
_OPENSSL_ALGORITHMS: Dict[str, Callable[[], hashes.HashAlgorithm]] = {
    "sha256": hashes.SHA256,
    "sha512": hashes.SHA512,
    "sha3_256": hashes.SHA3_256,
    "blake2b": lambda: hashes.BLAKE2b(64),
    "blake2s": lambda: hashes.BLAKE2s(32),
}

SUPPORTED_ALGORITHMS = tuple(_OPENSSL_ALGORITHMS)

_HASH_FUNCTIONS: Dict[Tuple[str, str], "HashFunction"] = {}


class HashFunction:
    """
    A named, fixed-width cryptographic hash function.

    Instances are callable and map raw bytes to a digest of exactly
    ``digest_size`` bytes. The same algorithm yields the same digest on
    either backend.

    Example:
        >>> sha256 = HashFunction("sha256")
        >>> sha256(b"A").hex()
        '559aead08264d5795d3909718cdd05abd49572e84fe55590eef31a88a08fdffd'
    """

    def __init__(self, name: str = DEFAULT_ALGORITHM, backend: str = DEFAULT_BACKEND):
        """
        Resolve a hash algorithm on the given backend.

        Args:
            name: Algorithm name (sha256, sha512, sha3_256, blake2b, blake2s)
            backend: "hashlib" or "openssl"

        Raises:
            UnsupportedHashAlgorithmError: If the algorithm or backend is unknown
        """
        name = name.lower().replace("-", "_")
        backend = backend.lower()

        if name not in _OPENSSL_ALGORITHMS:
            raise UnsupportedHashAlgorithmError(
                f"Unsupported hash algorithm '{name}', "
                f"expected one of {list(SUPPORTED_ALGORITHMS)}"
            )
        if backend not in SUPPORTED_BACKENDS:
            raise UnsupportedHashAlgorithmError(
                f"Unsupported hash backend '{backend}', "
                f"expected one of {list(SUPPORTED_BACKENDS)}"
            )

        self.name = name
        self.backend = backend

        if backend == "openssl":
            self._digest = self._openssl_digest
            self.digest_size = _OPENSSL_ALGORITHMS[name]().digest_size
        else:
            self._digest = self._hashlib_digest
            self.digest_size = hashlib.new(name).digest_size

    def _hashlib_digest(self, data: bytes) -> bytes:
        return hashlib.new(self.name, data).digest()

    def _openssl_digest(self, data: bytes) -> bytes:
        hasher = hashes.Hash(_OPENSSL_ALGORITHMS[self.name]())
        hasher.update(data)
        return hasher.finalize()

    def __call__(self, data: bytes) -> bytes:
        """
        Hash raw bytes.

        Args:
            data: Bytes to hash

        Returns:
            Digest of ``digest_size`` bytes
        """
        return self._digest(bytes(data))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashFunction):
            return NotImplemented
        return self.name == other.name and self.backend == other.backend

    def __hash__(self) -> int:
        return hash((self.name, self.backend))

    def __repr__(self) -> str:
        return f"HashFunction(name={self.name!r}, backend={self.backend!r})"


def get_hash_function(name: str = DEFAULT_ALGORITHM, backend: str = DEFAULT_BACKEND) -> HashFunction:
    """
    Get a shared HashFunction instance for an algorithm/backend pair.

    Args:
        name: Algorithm name
        backend: Backend name

    Returns:
        Cached HashFunction

    Raises:
        UnsupportedHashAlgorithmError: If the algorithm or backend is unknown
    """
    key = (name.lower().replace("-", "_"), backend.lower())
    if key not in _HASH_FUNCTIONS:
        _HASH_FUNCTIONS[key] = HashFunction(*key)
    return _HASH_FUNCTIONS[key]


def default_hash_function() -> HashFunction:
    """Return the default SHA-256 hashlib hash function."""
    return get_hash_function(DEFAULT_ALGORITHM, DEFAULT_BACKEND)


def to_hex(digest: bytes) -> str:
    """
    Convert a digest to a lowercase hexadecimal string.

    Args:
        digest: Raw digest bytes

    Returns:
        Hex string without prefix
    """
    return digest.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert a hexadecimal string to bytes.

    An optional ``0x`` prefix is accepted.

    Args:
        hex_string: Hex string

    Returns:
        Decoded bytes

    Raises:
        ValueError: If the string has odd length or contains invalid characters
    """
    hex_content = hex_string.strip()
    if hex_content[:2].lower() == "0x":
        hex_content = hex_content[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length, got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e
