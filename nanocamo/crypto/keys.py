"""
nanocamo Key Management

Handles:
- Per-index account key derivation from a seed
- Ledger account key pairs (Key)
- Ephemeral key pairs for stealth payments (EphemeralKey)
- Domain-separated camo spend/view seeds
- Seed file storage

Key Types:
- Seed: 32 secret bytes, the root of every derived key
- Key: clamped BLAKE2b-expanded scalar + public point (long-term)
- Ephemeral Key: random scalar + public point (one payment only)

SECURITY NOTES:
- Private keys are never logged
- Keys are cleared from memory when objects are deleted
- File permissions enforced on seed storage
"""

import os
import stat
import logging
from pathlib import Path
from typing import Optional

from ..errors import InvalidLength
from .primitives import (
    SEED_SIZE,
    BytesLike,
    blake2b_hash,
    blake2b512,
    hkdf_derive,
    random_bytes,
    secure_zero,
)
from .point import Point
from .scalar import Scalar
from .secrets import SecretBytes


logger = logging.getLogger("nanocamo.keys")

# HKDF info labels separating the two camo branches of a master seed
CAMO_SPEND_SEED_INFO = b"nanocamo-spend-seed-v1"
CAMO_VIEW_SEED_INFO = b"nanocamo-view-seed-v1"

# Default seed storage location
DEFAULT_SEED_DIR = Path.home() / ".nanocamo"
SEED_FILE = "seed.bin"


def account_seed(seed: SecretBytes, index: int) -> SecretBytes:
    """
    Derive the private key seed of account number index.

    account_seed = BLAKE2b-256(seed || index as 4-byte big-endian)

    Args:
        seed: 32-byte wallet seed
        index: Account index (0 to 2^32 - 1)

    Returns:
        SecretBytes: 32-byte account private key
    """
    if not 0 <= index <= 0xFFFFFFFF:
        raise ValueError(f"Account index out of range: {index}")

    data = bytearray(seed.as_bytes())
    data += index.to_bytes(4, "big")
    try:
        return SecretBytes(blake2b_hash(data, digest_size=32), SEED_SIZE)
    finally:
        secure_zero(data)


def expand_private_key(private_key: SecretBytes) -> Scalar:
    """
    Turn a 32-byte account private key into its signing scalar.

    scalar = clamp(BLAKE2b-512(private_key)[0:32]) mod L
    """
    expanded = bytearray(blake2b512(private_key.as_bytes()))
    try:
        return Scalar.from_clamped_bytes(memoryview(expanded)[:32])
    finally:
        secure_zero(expanded)


def account_scalar(seed: SecretBytes, index: int) -> Scalar:
    """Signing scalar of account number index."""
    with account_seed(seed, index) as private_key:
        return expand_private_key(private_key)


def blake2b_scalar(data: BytesLike) -> Scalar:
    """Hash data with BLAKE2b-512 and reduce the digest modulo L."""
    digest = bytearray(blake2b512(data))
    try:
        return Scalar.from_bytes_reduced(digest)
    finally:
        secure_zero(digest)


def camo_spend_seed(master_seed: SecretBytes) -> SecretBytes:
    """Spend branch of a camo master seed."""
    return SecretBytes(
        hkdf_derive(master_seed.as_bytes(), SEED_SIZE, CAMO_SPEND_SEED_INFO),
        SEED_SIZE,
    )


def camo_view_seed(master_seed: SecretBytes) -> SecretBytes:
    """
    View branch of a camo master seed.

    The view seed, together with the master spend public point, is all a
    watch-only scanner needs (see CamoViewKeys.from_view_seed). It reveals
    nothing about the spend branch.
    """
    return SecretBytes(
        hkdf_derive(master_seed.as_bytes(), SEED_SIZE, CAMO_VIEW_SEED_INFO),
        SEED_SIZE,
    )


class Key:
    """
    Ledger account key pair.

    Owns its scalar; clear() (or leaving a ``with`` block) zeroes it.
    """

    def __init__(self, scalar: Scalar):
        """
        Initialize from a private scalar.

        Args:
            scalar: Private scalar; ownership is taken
        """
        self._scalar = scalar
        self._public = scalar.to_public()

    @classmethod
    def from_seed(cls, seed: SecretBytes, index: int) -> "Key":
        """Key of account number index under seed."""
        return cls(account_scalar(seed, index))

    @classmethod
    def from_private_key(cls, private_key: SecretBytes) -> "Key":
        """Key from a 32-byte account private key."""
        return cls(expand_private_key(private_key))

    @classmethod
    def generate(cls) -> "Key":
        """Fresh key from 32 random private key bytes."""
        with SecretBytes(random_bytes(SEED_SIZE)) as private_key:
            return cls.from_private_key(private_key)

    @property
    def public(self) -> Point:
        return self._public

    @property
    def scalar(self) -> Scalar:
        """
        Private scalar.

        Security:
            For signing and derivation only. Do not store or log.
        """
        return self._scalar

    def clear(self) -> None:
        self._scalar.clear()

    def __enter__(self) -> "Key":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.clear()

    def __repr__(self) -> str:
        return f"Key(public={self._public.hex()[:16]}...)"


class EphemeralKey:
    """
    Ephemeral key pair for a single stealth payment.

    Generated per payment and discarded (cleared) once the one-time
    address has been derived.
    """

    def __init__(self, scalar: Optional[Scalar] = None):
        """
        Generate a new ephemeral key pair.

        Args:
            scalar: Explicit private scalar (ownership is taken); random if omitted
        """
        self._private = scalar if scalar is not None else Scalar.random()
        self._public = self._private.to_public()

    def exchange(self, peer_public: Point) -> Point:
        """
        Diffie-Hellman with a peer's public point.

        Args:
            peer_public: Peer's public point (the recipient's view key)

        Returns:
            Point: shared point r * peer_public
        """
        return peer_public.mul(self._private)

    @property
    def public(self) -> Point:
        return self._public

    def clear(self) -> None:
        self._private.clear()

    def __enter__(self) -> "EphemeralKey":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.clear()

    def __repr__(self) -> str:
        return f"EphemeralKey(public={self._public.hex()[:16]}...)"


def generate_seed() -> SecretBytes:
    """
    Generate a new random wallet seed.

    Security:
        Uses os.urandom() for seed generation.
    """
    return SecretBytes(random_bytes(SEED_SIZE), SEED_SIZE)


def load_seed(
    seed_file: Optional[Path] = None,
    create_if_missing: bool = False,
) -> SecretBytes:
    """
    Load a wallet seed from disk, optionally creating it.

    Seed file format: 32 raw bytes

    Args:
        seed_file: Path to the seed file (default: ~/.nanocamo/seed.bin)
        create_if_missing: If True, generate a new seed if not found

    Returns:
        SecretBytes: Loaded or generated seed

    Raises:
        InvalidLength: If the seed file does not hold exactly 32 bytes
        FileNotFoundError: If seed file missing and create_if_missing=False

    Security:
        - Seed file permissions set to 0600 (owner read/write only)
        - A newly created directory gets 0700 (owner only)
    """
    if seed_file is None:
        seed_file = DEFAULT_SEED_DIR / SEED_FILE

    seed_file = Path(seed_file)

    if seed_file.exists():
        data = bytearray(seed_file.read_bytes())
        try:
            if len(data) != SEED_SIZE:
                raise InvalidLength(
                    f"Invalid seed file length: {len(data)} (expected {SEED_SIZE})"
                )
            return SecretBytes(data, SEED_SIZE)
        finally:
            secure_zero(data)

    if not create_if_missing:
        raise FileNotFoundError(f"Seed file not found: {seed_file}")

    seed = generate_seed()

    # A directory created here is owner-only; an existing one is left alone
    seed_dir = seed_file.parent
    if not seed_dir.exists():
        seed_dir.mkdir(parents=True)
        os.chmod(seed_dir, stat.S_IRWXU)  # 0700

    # Create the file owner-only before any secret is written to it
    fd = os.open(seed_file, os.O_WRONLY | os.O_CREAT | os.O_EXCL, stat.S_IRUSR | stat.S_IWUSR)
    with os.fdopen(fd, "wb") as f:
        f.write(seed.as_bytes())

    logger.info(f"Created new seed file: {seed_file}")
    return seed
