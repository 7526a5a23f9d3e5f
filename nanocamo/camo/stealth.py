"""
nanocamo Stealth Derivation Protocol

Sender, paying a camo address (S = spend public, V = view public) with
version v:
    1. r = random scalar, R = r * G          (ephemeral key)
    2. D = r * V                             (Diffie-Hellman shared point)
    3. t = H_v(D, i)                         (version-specific tweak)
    4. P = S + t * G                         (one-time destination key)
    5. publish (P, R, v); r is cleared

Receiver, holding view scalar s (V = s * G):
    D' = s * R = s * r * G = r * V = D
    t' = H_v(D', i), expected = S + t' * G
    match iff expected == P; the spend key of P is spend + t' (mod L)

H_v(D, i) = BLAKE2b-512(person="camo-stealth-v<v>", [v] || D || i_be32) mod L

The index i (default 0) lets one ephemeral key fund several one-time
addresses, e.g. behind a single notification.

No step keeps state or touches shared data; every call can run in parallel
with any other as long as it owns its inputs. A non-match is not an error.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..crypto.keys import EphemeralKey
from ..crypto.point import Point
from ..crypto.primitives import blake2b_hash, secure_zero
from ..crypto.scalar import Scalar
from .versions import CamoVersion, negotiate

if TYPE_CHECKING:
    from .account import CamoAddress, CamoViewKeys


logger = logging.getLogger("nanocamo.stealth")

MAX_PAYMENT_INDEX = 0xFFFFFFFF


def derive_tweak(shared: Point, version: CamoVersion, index: int = 0) -> Scalar:
    """
    Version-specific tweak scalar H_v(D, i).

    The version number is hashed and also selects the BLAKE2b
    personalisation, so two versions never agree on a tweak for the same
    shared point.

    Args:
        shared: Diffie-Hellman shared point D (secret despite being a point)
        version: Camo protocol version
        index: Payment index under this shared point

    Returns:
        Scalar: tweak t, reduced modulo L
    """
    version = CamoVersion.parse(int(version))
    if not 0 <= index <= MAX_PAYMENT_INDEX:
        raise ValueError(f"Payment index out of range: {index}")

    data = bytearray([int(version)])
    data += shared.to_bytes()
    data += index.to_bytes(4, "big")

    digest = bytearray(blake2b_hash(data, digest_size=64, person=version.tag))
    try:
        return Scalar.from_bytes_reduced(digest)
    finally:
        secure_zero(digest)
        secure_zero(data)


def one_time_public(spend_public: Point, tweak: Scalar) -> Point:
    """S + t * G"""
    return spend_public.add(tweak.to_public())


def recover_one_time_key(private_spend: Scalar, tweak: Scalar) -> Scalar:
    """spend + t (mod L): the private key of S + t * G."""
    return private_spend.add(tweak)


@dataclass(frozen=True)
class StealthPayment:
    """Sender output, embedded in a transaction by the ledger layer."""
    one_time_public: Point
    ephemeral_public: Point
    version: CamoVersion
    index: int = 0


@dataclass(frozen=True)
class Candidate:
    """A transaction's stealth fields, as seen by a scanning receiver."""
    one_time_public: Point
    ephemeral_public: Point
    version: CamoVersion
    index: int = 0

    @classmethod
    def from_bytes(
        cls,
        one_time_public: bytes,
        ephemeral_public: bytes,
        version: int,
        index: int = 0,
    ) -> "Candidate":
        """
        Parse untrusted transaction fields.

        Raises:
            InvalidLength, InvalidPoint: If a public key is malformed
            IncompatibleCamoVersions: If version is not a defined version
        """
        return cls(
            Point.from_bytes(one_time_public),
            Point.from_bytes(ephemeral_public),
            CamoVersion.parse(version),
            index,
        )

    @classmethod
    def from_payment(cls, payment: StealthPayment) -> "Candidate":
        return cls(
            payment.one_time_public,
            payment.ephemeral_public,
            payment.version,
            payment.index,
        )


@dataclass
class Detection:
    """
    A candidate that pays the scanning account.

    Holds the tweak needed to recover the one-time private key; clear()
    once it has been used.
    """
    candidate: Candidate
    tweak: Scalar

    @property
    def one_time_public(self) -> Point:
        return self.candidate.one_time_public

    def clear(self) -> None:
        self.tweak.clear()


def create_payment(
    address: "CamoAddress",
    version: CamoVersion,
    index: int = 0,
    ephemeral: Optional[EphemeralKey] = None,
) -> StealthPayment:
    """
    Derive a one-time destination for a payment to address.

    Version negotiation happens before any cryptographic work.

    Args:
        address: Recipient camo address
        version: Version chosen by the sender
        index: Payment index under the ephemeral key
        ephemeral: Ephemeral key to reuse across indexes; the caller then
            owns it and must clear it. A fresh one is generated and cleared
            here when omitted.

    Returns:
        StealthPayment: (one-time public, ephemeral public, version, index)

    Raises:
        IncompatibleCamoVersions: If the address does not accept version
    """
    version = negotiate(version, address.versions)

    owned = ephemeral is None
    key = EphemeralKey() if owned else ephemeral
    try:
        shared = key.exchange(address.view_public)
        with derive_tweak(shared, version, index) as tweak:
            destination = one_time_public(address.spend_public, tweak)
        return StealthPayment(destination, key.public, version, index)
    finally:
        if owned:
            key.clear()


def detect(view_keys: "CamoViewKeys", candidate: Candidate) -> Optional[Detection]:
    """
    Check whether candidate pays the owner of view_keys.

    Candidates using a version the account does not accept never match.

    Returns:
        Detection on match, None otherwise (the usual outcome)
    """
    if not view_keys.versions.contains(candidate.version):
        return None

    shared = view_keys.shared_point(candidate.ephemeral_public)
    tweak = derive_tweak(shared, candidate.version, candidate.index)
    expected = one_time_public(view_keys.spend_public, tweak)

    if expected != candidate.one_time_public:
        tweak.clear()
        return None

    logger.debug(
        f"Detected camo v{int(candidate.version)} payment to "
        f"{candidate.one_time_public.hex()[:16]}..."
    )
    return Detection(candidate, tweak)
