"""
nanocamo Camo Accounts

A camo account is a recipient identity made of two independent key pairs:
- spend key: controls the funds received at one-time addresses
- view key: detects incoming stealth payments, cannot spend

Derivation from a master seed:
    spend_seed    = HKDF(master, "nanocamo-spend-seed-v1")
    view_seed     = HKDF(master, "nanocamo-view-seed-v1")
    master_spend  = account_scalar(spend_seed, 0)
    w             = BLAKE2b-512(account_seed(view_seed, index))
    partial_spend = blake2b_scalar(w[0:32])
    view          = blake2b_scalar(w[32:64])
    spend         = master_spend + partial_spend

The view branch never touches the spend seed, so a holder of view_seed and
master_spend * G can rebuild the view keys (CamoViewKeys.from_view_seed)
without learning anything about the spend scalar.

Address payload (consumed by the external address text codec):
    versions (1) || spend public (32) || view public (32)  = 65 bytes
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from ..crypto.keys import (
    Key,
    account_scalar,
    account_seed,
    blake2b_scalar,
    camo_spend_seed,
    camo_view_seed,
)
from ..crypto.point import Point
from ..crypto.primitives import POINT_SIZE, SCALAR_SIZE, blake2b512, secure_zero
from ..crypto.scalar import Scalar
from ..crypto.secrets import SecretBytes
from ..errors import IncompatibleCamoVersions, expect_length
from .stealth import (
    Candidate,
    Detection,
    derive_tweak,
    detect,
    one_time_public,
    recover_one_time_key,
)
from .versions import VERSIONS_WIDTH, CamoVersion, CamoVersions, negotiate


ADDRESS_PAYLOAD_SIZE = VERSIONS_WIDTH + 2 * POINT_SIZE  # 65 bytes
VIEW_KEYS_SIZE = VERSIONS_WIDTH + POINT_SIZE + SCALAR_SIZE  # 65 bytes

DEFAULT_VERSIONS = CamoVersions.single(CamoVersion.ONE)


class AddressCodec(Protocol):
    """
    Text codec for camo addresses (base32 with checksum).

    Implemented outside this package. decode() must raise InvalidChecksum
    when the checksum does not match.
    """

    def encode(self, payload: bytes) -> str:
        ...

    def decode(self, text: str) -> bytes:
        ...


def _check_versions(versions: CamoVersions) -> None:
    if versions.has_reserved_bits:
        raise IncompatibleCamoVersions(
            "Reserved camo version bits cannot be held by an account"
        )


def _partial_keys(view_seed: SecretBytes, index: int) -> Tuple[Scalar, Scalar]:
    """Returns (partial_spend, private_view)."""
    with account_seed(view_seed, index) as seed:
        wide = bytearray(blake2b512(seed.as_bytes()))
    try:
        view = memoryview(wide)
        return blake2b_scalar(view[:32]), blake2b_scalar(view[32:])
    finally:
        secure_zero(wide)


@dataclass(frozen=True)
class CamoAddress:
    """Public half of a camo account: what a sender needs to pay it."""

    versions: CamoVersions
    spend_public: Point
    view_public: Point

    def __post_init__(self):
        if self.versions.has_reserved_bits:
            raise IncompatibleCamoVersions(
                "Reserved camo version bits cannot be carried in an address"
            )

    @property
    def notification_public(self) -> Point:
        """Ledger account that notifications for this address are sent to."""
        return self.spend_public

    def to_bytes(self) -> bytes:
        return (
            self.versions.to_bytes()
            + self.spend_public.to_bytes()
            + self.view_public.to_bytes()
        )

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = False) -> "CamoAddress":
        """
        Parse a 65-byte address payload.

        Raises:
            InvalidLength: If data is not 65 bytes
            InvalidPoint: If either public key is not a valid point
            IncompatibleCamoVersions: If strict and reserved bits are set
        """
        expect_length(data, ADDRESS_PAYLOAD_SIZE, "camo address")
        versions = CamoVersions.from_bytes(data[:VERSIONS_WIDTH], strict=strict)
        spend = Point.from_bytes(data[VERSIONS_WIDTH:VERSIONS_WIDTH + POINT_SIZE])
        view = Point.from_bytes(data[VERSIONS_WIDTH + POINT_SIZE:])
        return cls(versions, spend, view)

    def to_text(self, codec: AddressCodec) -> str:
        return codec.encode(self.to_bytes())

    @classmethod
    def from_text(cls, text: str, codec: AddressCodec, strict: bool = False) -> "CamoAddress":
        """Decode with codec (which checks the checksum), then parse."""
        return cls.from_bytes(codec.decode(text), strict=strict)


class CamoViewKeys:
    """
    Watch-only camo keys: private view scalar plus public spend point.

    Enough to detect payments and to compute their one-time public keys,
    not to spend them.
    """

    def __init__(self, versions: CamoVersions, spend_public: Point, private_view: Scalar):
        """
        Args:
            versions: Versions this account accepts
            spend_public: Account spend public point
            private_view: View scalar; ownership is taken

        Raises:
            IncompatibleCamoVersions: If versions has reserved bits set
        """
        _check_versions(versions)
        self._versions = versions
        self._spend_public = spend_public
        self._private_view = private_view
        self._view_public = private_view.to_public()

    @classmethod
    def from_view_seed(
        cls,
        view_seed: SecretBytes,
        master_spend_public: Point,
        index: int = 0,
        versions: Optional[CamoVersions] = None,
    ) -> "CamoViewKeys":
        """
        Rebuild view keys from the view seed and the master spend point.

        Args:
            view_seed: camo_view_seed(master_seed)
            master_spend_public: CamoAccount.master_spend_public of the owner
            index: Account index
            versions: Accepted versions (default: version 1 only)
        """
        if versions is None:
            versions = DEFAULT_VERSIONS
        _check_versions(versions)
        partial_spend, private_view = _partial_keys(view_seed, index)
        with partial_spend:
            spend_public = master_spend_public.add(partial_spend.to_public())
        return cls(versions, spend_public, private_view)

    @property
    def versions(self) -> CamoVersions:
        return self._versions

    @property
    def spend_public(self) -> Point:
        return self._spend_public

    @property
    def view_public(self) -> Point:
        return self._view_public

    @property
    def address(self) -> CamoAddress:
        return CamoAddress(self._versions, self._spend_public, self._view_public)

    def shared_point(self, ephemeral_public: Point) -> Point:
        """view * R, equal to the sender's r * V."""
        return ephemeral_public.mul(self._private_view)

    def tweak(self, ephemeral_public: Point, version: CamoVersion, index: int = 0) -> Scalar:
        """
        Derivation tweak for a payment announced by ephemeral_public.

        Raises:
            IncompatibleCamoVersions: If this account does not accept version
        """
        version = negotiate(version, self._versions)
        return derive_tweak(self.shared_point(ephemeral_public), version, index)

    def derive_one_time_public(
        self,
        ephemeral_public: Point,
        version: CamoVersion,
        index: int = 0,
    ) -> Point:
        """One-time public key of payment number index behind ephemeral_public."""
        with self.tweak(ephemeral_public, version, index) as tweak:
            return one_time_public(self._spend_public, tweak)

    def detect(self, candidate: Candidate) -> Optional[Detection]:
        """Detection if candidate pays this account, None otherwise."""
        return detect(self, candidate)

    # =========================================================================
    # SERIALIZATION / LIFETIME
    # =========================================================================

    def to_secret_bytes(self) -> SecretBytes:
        """
        Export as versions (1) || spend public (32) || view scalar (32).

        Security:
            Output contains the private view key.
        """
        _check_versions(self._versions)
        data = bytearray(self._versions.to_bytes())
        data += self._spend_public.to_bytes()
        data += self._private_view.as_bytes()
        return SecretBytes(data, VIEW_KEYS_SIZE)

    @classmethod
    def from_secret_bytes(cls, secret: SecretBytes) -> "CamoViewKeys":
        """
        Import view keys exported by to_secret_bytes().

        Raises:
            InvalidLength, InvalidPoint, InvalidScalar, IncompatibleCamoVersions
        """
        expect_length(secret, VIEW_KEYS_SIZE, "view keys")
        data = secret.as_bytes()
        versions = CamoVersions.from_bytes(bytes(data[:VERSIONS_WIDTH]))
        spend_public = Point.from_bytes(data[VERSIONS_WIDTH:VERSIONS_WIDTH + POINT_SIZE])
        private_view = Scalar.from_canonical_bytes(bytearray(data[VERSIONS_WIDTH + POINT_SIZE:]))
        return cls(versions, spend_public, private_view)

    def clone(self) -> "CamoViewKeys":
        return CamoViewKeys(self._versions, self._spend_public, self._private_view.clone())

    def clear(self) -> None:
        self._private_view.clear()

    def __enter__(self) -> "CamoViewKeys":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.clear()

    def __repr__(self) -> str:
        return (
            f"CamoViewKeys(versions={self._versions!r}, "
            f"spend={self._spend_public.hex()[:16]}...)"
        )


class CamoAccount:
    """
    Full camo key bundle (spend + view), derived from a master seed.

    Only public points and the accepted versions are exposed; the private
    scalars are used internally for derivation and key recovery. Both are
    cleared together by clear(), on leaving a ``with`` block, or when the
    account is garbage collected.

    Usage:
        with CamoAccount.from_seed(seed) as account:
            address = account.address
            ...
            for detection in StealthScanner(account.to_view_keys()).scan(candidates):
                with account.recover_key(detection) as one_time_key:
                    sign(one_time_key, ...)
    """

    def __init__(
        self,
        private_spend: Scalar,
        private_view: Scalar,
        versions: CamoVersions = DEFAULT_VERSIONS,
        master_spend_public: Optional[Point] = None,
    ):
        """
        Args:
            private_spend: Spend scalar; ownership is taken
            private_view: View scalar; ownership is taken
            versions: Versions this account accepts
            master_spend_public: Master spend point (seed-derived accounts only)

        Raises:
            IncompatibleCamoVersions: If versions has reserved bits set
        """
        _check_versions(versions)
        self._private_spend = private_spend
        self._private_view = private_view
        self._versions = versions
        self._spend_public = private_spend.to_public()
        self._view_public = private_view.to_public()
        self._master_spend_public = master_spend_public

    @classmethod
    def from_seed(
        cls,
        master_seed: SecretBytes,
        index: int = 0,
        versions: Optional[CamoVersions] = None,
    ) -> "CamoAccount":
        """
        Deterministically derive camo account number index.

        Args:
            master_seed: 32-byte master seed
            index: Account index (0 to 2^32 - 1)
            versions: Accepted versions (default: version 1 only)

        Returns:
            CamoAccount: same seed and index always give the same account
        """
        if versions is None:
            versions = DEFAULT_VERSIONS
        _check_versions(versions)

        with camo_spend_seed(master_seed) as spend_seed:
            master_spend = account_scalar(spend_seed, 0)
        with camo_view_seed(master_seed) as view_seed:
            partial_spend, private_view = _partial_keys(view_seed, index)

        with master_spend, partial_spend:
            private_spend = master_spend.add(partial_spend)
            master_spend_public = master_spend.to_public()

        return cls(
            private_spend,
            private_view,
            versions,
            master_spend_public,
        )

    @property
    def versions(self) -> CamoVersions:
        return self._versions

    @property
    def spend_public(self) -> Point:
        return self._spend_public

    @property
    def view_public(self) -> Point:
        return self._view_public

    @property
    def master_spend_public(self) -> Optional[Point]:
        """Spend point shared by every index of the seed (for watch-only setup)."""
        return self._master_spend_public

    @property
    def address(self) -> CamoAddress:
        return CamoAddress(self._versions, self._spend_public, self._view_public)

    def to_view_keys(self) -> CamoViewKeys:
        """Watch-only keys holding a copy of the view scalar."""
        return CamoViewKeys(self._versions, self._spend_public, self._private_view.clone())

    def notification_key(self) -> Key:
        """Key of the notification account (the spend key pair)."""
        return Key(self._private_spend.clone())

    def detect(self, candidate: Candidate) -> Optional[Detection]:
        with self.to_view_keys() as view_keys:
            return detect(view_keys, candidate)

    def recover_key(self, detection: Detection) -> Scalar:
        """
        One-time private key of a detected payment: spend + tweak (mod L).

        The caller owns the returned scalar and should clear it after signing.
        """
        return recover_one_time_key(self._private_spend, detection.tweak)

    def derive_one_time_key(
        self,
        ephemeral_public: Point,
        version: CamoVersion,
        index: int = 0,
    ) -> Scalar:
        """One-time private key of payment number index behind ephemeral_public."""
        with self.to_view_keys() as view_keys:
            with view_keys.tweak(ephemeral_public, version, index) as tweak:
                return recover_one_time_key(self._private_spend, tweak)

    def clear(self) -> None:
        self._private_spend.clear()
        self._private_view.clear()

    def __enter__(self) -> "CamoAccount":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.clear()

    def __repr__(self) -> str:
        return (
            f"CamoAccount(versions={self._versions!r}, "
            f"spend={self._spend_public.hex()[:16]}..., "
            f"view={self._view_public.hex()[:16]}...)"
        )
