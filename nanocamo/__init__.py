"""
nanocamo - Camo (stealth) accounts for the Nano ledger

Secure key containers, ed25519 scalar arithmetic and the camo stealth
payment protocol: a sender pays a recipient at a one-time address that
only the recipient's view key can link back to its published account.

This package contains:
- crypto/    : Secrets, scalars, points and key derivation
- camo/      : Camo versions, accounts and the stealth protocol
- errors.py  : NanoError exception family
- config.py  : TOML configuration

Not included: ledger RPC, the base32 address text codec, block format.
"""

__version__ = "0.1.0"
__author__ = "nanocamo contributors"

from .errors import (
    NanoError,
    InvalidLength,
    InvalidScalar,
    InvalidPoint,
    IncompatibleCamoVersions,
    InvalidChecksum,
)

from .crypto import (
    SCALAR_SIZE,
    POINT_SIZE,
    SEED_SIZE,
    SecretBytes,
    Scalar,
    Point,
    Key,
    EphemeralKey,
    GROUP_ORDER,
)

from .camo import (
    ADDRESS_PAYLOAD_SIZE,
    CamoVersion,
    CamoVersions,
    CamoAccount,
    CamoViewKeys,
    CamoAddress,
    StealthPayment,
    Candidate,
    Detection,
    Notification,
    StealthScanner,
    create_payment,
)

from .config import Config

__all__ = [
    # Errors
    'NanoError',
    'InvalidLength',
    'InvalidScalar',
    'InvalidPoint',
    'IncompatibleCamoVersions',
    'InvalidChecksum',
    # Sizes
    'SCALAR_SIZE',
    'POINT_SIZE',
    'SEED_SIZE',
    'ADDRESS_PAYLOAD_SIZE',
    # Crypto
    'SecretBytes',
    'Scalar',
    'Point',
    'Key',
    'EphemeralKey',
    'GROUP_ORDER',
    # Camo
    'CamoVersion',
    'CamoVersions',
    'CamoAccount',
    'CamoViewKeys',
    'CamoAddress',
    'StealthPayment',
    'Candidate',
    'Detection',
    'Notification',
    'StealthScanner',
    'create_payment',
    # Config
    'Config',
]
