"""
nanocamo Camo (Stealth) Accounts

A sender pays a camo address at a freshly derived one-time address; the
recipient finds the payment with its view key and spends it with its
spend key.

This package contains:
- versions.py     : protocol versions and capability sets
- stealth.py      : sender/receiver derivation protocol
- account.py      : camo key bundles, watch-only keys, address payloads
- notification.py : notification block payloads
- scanner.py      : parallel scanning of candidate transactions
"""

from .versions import (
    CamoVersion,
    CamoVersions,
    negotiate,
    best_common,
    versions_from_numbers,
    VERSION_COUNT,
    VERSIONS_WIDTH,
)

from .stealth import (
    StealthPayment,
    Candidate,
    Detection,
    create_payment,
    detect,
    derive_tweak,
)

from .account import (
    CamoAccount,
    CamoViewKeys,
    CamoAddress,
    AddressCodec,
    ADDRESS_PAYLOAD_SIZE,
)

from .notification import Notification

from .scanner import StealthScanner

__all__ = [
    # Versions
    'CamoVersion',
    'CamoVersions',
    'negotiate',
    'best_common',
    'versions_from_numbers',
    'VERSION_COUNT',
    'VERSIONS_WIDTH',
    # Protocol
    'StealthPayment',
    'Candidate',
    'Detection',
    'create_payment',
    'detect',
    'derive_tweak',
    # Accounts
    'CamoAccount',
    'CamoViewKeys',
    'CamoAddress',
    'AddressCodec',
    'ADDRESS_PAYLOAD_SIZE',
    # Notifications
    'Notification',
    # Scanning
    'StealthScanner',
]
