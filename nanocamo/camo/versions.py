"""
nanocamo Camo Protocol Versions

CamoVersion names one stealth derivation variant; CamoVersions is the set
of variants an account accepts.

Numbering:
    Versions are numbered 1..8. An older external numbering ran 0..7 for
    the same protocols; it is translated only at the serialization
    boundary (CamoVersion.from_legacy / CamoVersion.legacy):

        legacy  0  1  2  3  4  5  6  7
        version 1  2  3  4  5  6  7  8

Wire format:
    CamoVersions encodes as a little-endian bit field, one byte wide for
    the 8 defined versions. Bit (n - 1) set means version n is accepted.
    Longer inputs are accepted; bits past version 8 are kept as reserved
    and written back out unchanged, unless strict decoding is requested.
"""

from enum import IntEnum
from typing import Iterable, Iterator, Optional

from ..errors import IncompatibleCamoVersions, InvalidLength


VERSION_COUNT = 8
VERSIONS_WIDTH = (VERSION_COUNT + 7) // 8  # bytes
LEGACY_OFFSET = 1

_KNOWN_MASK = (1 << VERSION_COUNT) - 1


class CamoVersion(IntEnum):
    """Camo stealth protocol version."""
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8

    @classmethod
    def from_legacy(cls, number: int) -> "CamoVersion":
        """Translate a 0-based legacy version number."""
        try:
            return cls(number + LEGACY_OFFSET)
        except ValueError:
            raise IncompatibleCamoVersions(f"Unknown legacy camo version: {number}")

    @classmethod
    def parse(cls, number: int) -> "CamoVersion":
        """Like CamoVersion(number), but raising IncompatibleCamoVersions."""
        try:
            return cls(number)
        except ValueError:
            raise IncompatibleCamoVersions(f"Unknown camo version: {number}")

    @property
    def legacy(self) -> int:
        return int(self) - LEGACY_OFFSET

    @property
    def tag(self) -> bytes:
        """
        BLAKE2b personalisation string of this version's derivation hash.

        Distinct per version, so the same shared secret yields unrelated
        one-time keys under different versions.
        """
        return b"camo-stealth-v%d" % int(self)

    @property
    def bit(self) -> int:
        return 1 << (int(self) - 1)


class CamoVersions:
    """
    Immutable set of accepted camo versions.

    The empty set ("accepts nothing") is a valid value distinct from every
    non-empty set. Carries no secret; copy freely.
    """

    __slots__ = ("_bits",)

    def __init__(self, bits: int = 0):
        if bits < 0:
            raise ValueError("Version bits must be non-negative")
        self._bits = bits

    @classmethod
    def empty(cls) -> "CamoVersions":
        return cls(0)

    @classmethod
    def single(cls, version: CamoVersion) -> "CamoVersions":
        return cls(CamoVersion(version).bit)

    @classmethod
    def all(cls) -> "CamoVersions":
        return cls(_KNOWN_MASK)

    @classmethod
    def of(cls, *versions: CamoVersion) -> "CamoVersions":
        """Set holding exactly the given versions."""
        bits = 0
        for version in versions:
            bits |= CamoVersion(version).bit
        return cls(bits)

    # =========================================================================
    # SET OPERATIONS
    # =========================================================================

    def contains(self, version: CamoVersion) -> bool:
        return bool(self._bits & CamoVersion(version).bit)

    def insert(self, version: CamoVersion) -> "CamoVersions":
        """Return a new set that also holds version."""
        return CamoVersions(self._bits | CamoVersion(version).bit)

    def union(self, other: "CamoVersions") -> "CamoVersions":
        return CamoVersions(self._bits | other._bits)

    def intersection(self, other: "CamoVersions") -> "CamoVersions":
        return CamoVersions(self._bits & other._bits)

    def highest(self) -> Optional[CamoVersion]:
        """Newest known version in the set, or None if there is none."""
        known = self._bits & _KNOWN_MASK
        if not known:
            return None
        return CamoVersion(known.bit_length())

    @property
    def is_empty(self) -> bool:
        return self._bits == 0

    @property
    def has_reserved_bits(self) -> bool:
        """True if bits beyond the defined versions are set."""
        return bool(self._bits & ~_KNOWN_MASK)

    @property
    def bits(self) -> int:
        return self._bits

    # =========================================================================
    # ENCODING
    # =========================================================================

    def to_bytes(self) -> bytes:
        """Bit field, VERSIONS_WIDTH bytes, longer only if reserved bits are set."""
        width = max(VERSIONS_WIDTH, (self._bits.bit_length() + 7) // 8)
        return self._bits.to_bytes(width, "little")

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = False) -> "CamoVersions":
        """
        Decode a version bit field.

        Args:
            data: At least VERSIONS_WIDTH bytes
            strict: Reject bits that do not name a defined version

        Raises:
            InvalidLength: If data is shorter than VERSIONS_WIDTH
            IncompatibleCamoVersions: If strict and reserved bits are set
        """
        if len(data) < VERSIONS_WIDTH:
            raise InvalidLength(
                f"Invalid versions length: {len(data)} (expected at least {VERSIONS_WIDTH})"
            )
        versions = cls(int.from_bytes(data, "little"))
        if strict and versions.has_reserved_bits:
            raise IncompatibleCamoVersions(
                f"Reserved camo version bits set: {bytes(data).hex()}"
            )
        return versions

    # =========================================================================
    # PYTHON PROTOCOLS
    # =========================================================================

    def __contains__(self, version: object) -> bool:
        if not isinstance(version, int):
            return False
        try:
            return self.contains(CamoVersion(version))
        except ValueError:
            return False

    def __iter__(self) -> Iterator[CamoVersion]:
        """Known versions, oldest first."""
        for version in CamoVersion:
            if self._bits & version.bit:
                yield version

    def __len__(self) -> int:
        return bin(self._bits & _KNOWN_MASK).count("1")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CamoVersions):
            return NotImplemented
        return self._bits == other._bits

    def __hash__(self) -> int:
        return hash(self._bits)

    def __repr__(self) -> str:
        names = ", ".join(str(int(v)) for v in self)
        if self.has_reserved_bits:
            reserved = self._bits & ~_KNOWN_MASK
            return f"CamoVersions({{{names}}}, reserved=0x{reserved:x})"
        return f"CamoVersions({{{names}}})"


def negotiate(version: CamoVersion, recipient: CamoVersions) -> CamoVersion:
    """
    Check that the recipient accepts the sender's chosen version.

    Runs before any cryptographic work.

    Returns:
        The agreed version

    Raises:
        IncompatibleCamoVersions: If recipient does not accept version
    """
    version = CamoVersion.parse(int(version))
    if not recipient.contains(version):
        raise IncompatibleCamoVersions(
            f"Recipient does not accept camo version {int(version)} "
            f"(accepts {sorted(int(v) for v in recipient)})"
        )
    return version


def best_common(ours: CamoVersions, theirs: CamoVersions) -> CamoVersion:
    """
    Newest version both sides accept.

    Raises:
        IncompatibleCamoVersions: If the sets share no known version
    """
    version = ours.intersection(theirs).highest()
    if version is None:
        raise IncompatibleCamoVersions(
            f"No common camo version between {ours!r} and {theirs!r}"
        )
    return version


def versions_from_numbers(numbers: Iterable[int]) -> CamoVersions:
    """CamoVersions from plain version numbers (e.g. from a config file)."""
    return CamoVersions.of(*(CamoVersion.parse(n) for n in numbers))
