"""
nanocamo Cryptographic Module

Provides the key-layer primitives for nanocamo:
- Secret containers with zero-on-destruction (SecretBytes)
- ed25519 scalar field arithmetic (Scalar)
- ed25519 public points (Point)
- Key derivation from seeds (BLAKE2b, HKDF)
- Ledger and ephemeral key pairs

Group operations use PyNaCl (libsodium); HKDF uses python3-cryptography.
"""

from .primitives import (
    random_bytes,
    blake2b_hash,
    blake2b512,
    hkdf_derive,
    constant_time_compare,
    secure_zero,
    SCALAR_SIZE,
    POINT_SIZE,
    SEED_SIZE,
)

from .secrets import SecretBytes

from .scalar import (
    Scalar,
    GROUP_ORDER,
)

from .point import Point

from .keys import (
    Key,
    EphemeralKey,
    account_seed,
    account_scalar,
    expand_private_key,
    blake2b_scalar,
    camo_spend_seed,
    camo_view_seed,
    generate_seed,
    load_seed,
)

__all__ = [
    # Primitives
    'random_bytes',
    'blake2b_hash',
    'blake2b512',
    'hkdf_derive',
    'constant_time_compare',
    'secure_zero',
    'SCALAR_SIZE',
    'POINT_SIZE',
    'SEED_SIZE',
    # Secrets
    'SecretBytes',
    # Scalars and points
    'Scalar',
    'GROUP_ORDER',
    'Point',
    # Keys
    'Key',
    'EphemeralKey',
    'account_seed',
    'account_scalar',
    'expand_private_key',
    'blake2b_scalar',
    'camo_spend_seed',
    'camo_view_seed',
    'generate_seed',
    'load_seed',
]
