"""
nanocamo Cryptographic Primitives

Low-level helpers wrapping PyNaCl (libsodium) and the cryptography library.

SECURITY NOTES:
- All randomness from os.urandom (kernel CSPRNG)
- All secret comparisons use constant-time operations
- Secret buffers are zeroed when possible (best-effort in CPython)

Dependencies:
- PyNaCl (BLAKE2b, ed25519 group operations)
- cryptography (HKDF)
"""

import os
import hmac
from typing import Optional, Union

import nacl.bindings
import nacl.encoding
import nacl.hash
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF


# ed25519 encoding sizes
SCALAR_SIZE = nacl.bindings.crypto_core_ed25519_SCALARBYTES  # 32 bytes
WIDE_SCALAR_SIZE = nacl.bindings.crypto_core_ed25519_NONREDUCEDSCALARBYTES  # 64 bytes
POINT_SIZE = nacl.bindings.crypto_core_ed25519_BYTES  # 32 bytes
SEED_SIZE = 32  # bytes

# BLAKE2b limits as exposed by libsodium
BLAKE2B_MIN_DIGEST = nacl.bindings.crypto_generichash_BYTES_MIN  # 16 bytes
BLAKE2B_MAX_DIGEST = nacl.bindings.crypto_generichash_BYTES_MAX  # 64 bytes
BLAKE2B_MAX_KEY = nacl.bindings.crypto_generichash_KEYBYTES_MAX  # 64 bytes
BLAKE2B_PERSON_SIZE = nacl.bindings.crypto_generichash_PERSONALBYTES  # 16 bytes


BytesLike = Union[bytes, bytearray, memoryview]


def random_bytes(length: int) -> bytes:
    """
    Generate cryptographically secure random bytes.

    Uses os.urandom() which reads from the kernel's CSPRNG. A failure to
    obtain randomness propagates: continuing would silently weaken keys.

    Args:
        length: Number of random bytes to generate

    Returns:
        bytes: Cryptographically secure random bytes

    Raises:
        ValueError: If length is negative
    """
    if length < 0:
        raise ValueError("Length must be non-negative")
    return os.urandom(length)


def blake2b_hash(
    data: BytesLike,
    digest_size: int = 32,
    key: Optional[bytes] = None,
    person: Optional[bytes] = None,
) -> bytes:
    """
    Compute BLAKE2b hash of data.

    The personalisation string is the domain-separation tag used by the
    camo protocol versions; libsodium zero-pads it to 16 bytes.

    Args:
        data: Data to hash
        digest_size: Output hash size in bytes (16-64, default 32)
        key: Optional key for keyed hashing (MAC mode)
        person: Optional personalization string (up to 16 bytes)

    Returns:
        bytes: BLAKE2b hash digest

    Raises:
        ValueError: If parameters are invalid
    """
    if not BLAKE2B_MIN_DIGEST <= digest_size <= BLAKE2B_MAX_DIGEST:
        raise ValueError(
            f"Digest size must be {BLAKE2B_MIN_DIGEST}-{BLAKE2B_MAX_DIGEST} bytes"
        )

    if key is not None and len(key) > BLAKE2B_MAX_KEY:
        raise ValueError(f"Key must be at most {BLAKE2B_MAX_KEY} bytes")

    if person is not None and len(person) > BLAKE2B_PERSON_SIZE:
        raise ValueError(
            f"Personalization must be at most {BLAKE2B_PERSON_SIZE} bytes"
        )

    return nacl.hash.blake2b(
        bytes(data),
        digest_size=digest_size,
        key=key or b"",
        person=person or b"",
        encoder=nacl.encoding.RawEncoder,
    )


def blake2b512(data: BytesLike) -> bytes:
    """Unkeyed 64-byte BLAKE2b digest."""
    return blake2b_hash(data, digest_size=BLAKE2B_MAX_DIGEST)


def hkdf_derive(
    input_key_material: BytesLike,
    length: int,
    info: bytes,
    salt: Optional[bytes] = None,
) -> bytes:
    """
    Derive key material using HKDF (RFC 5869).

    Used for domain separation between the spend and view branches of a
    camo master seed.

    Args:
        input_key_material: Source key material (e.g., a master seed)
        length: Desired output length in bytes
        info: Context/application-specific info (for domain separation)
        salt: Optional salt (can be public)

    Returns:
        bytes: Derived key material

    Raises:
        ValueError: If parameters are invalid
    """
    if length < 1:
        raise ValueError("Length must be at least 1")

    if length > 255 * 32:
        raise ValueError("Length too large for HKDF")

    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=length,
        salt=salt,
        info=info,
    )

    return hkdf.derive(bytes(input_key_material))


def constant_time_compare(a: BytesLike, b: BytesLike) -> bool:
    """
    Compare two byte strings in constant time.

    Comparison time depends only on the lengths, never on where the
    contents differ. Accepts any buffer, so bytearrays holding secrets do
    not have to be copied into immutable bytes first.

    Args:
        a: First byte string
        b: Second byte string

    Returns:
        bool: True if equal, False otherwise
    """
    return hmac.compare_digest(a, b)


def secure_zero(data: bytearray) -> None:
    """
    Securely zero a bytearray to remove sensitive data from memory.

    Note: This is best-effort. Python's memory management may still
    leave copies of the data (immutable bytes handed to libsodium, for
    instance, cannot be wiped).

    Args:
        data: Bytearray to zero (modified in place)

    Warning:
        Only works with bytearray, not bytes (which are immutable).
    """
    for i in range(len(data)):
        data[i] = 0
