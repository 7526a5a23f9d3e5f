"""
nanocamo Camo Version Tests
"""

import pytest

from nanocamo.camo.versions import (
    VERSION_COUNT,
    VERSIONS_WIDTH,
    CamoVersion,
    CamoVersions,
    best_common,
    negotiate,
    versions_from_numbers,
)
from nanocamo.errors import IncompatibleCamoVersions, InvalidLength


class TestCamoVersion:
    """Tests for the version enumeration."""

    def test_range(self):
        assert [int(v) for v in CamoVersion] == list(range(1, VERSION_COUNT + 1))

    def test_ordered(self):
        assert CamoVersion.ONE < CamoVersion.TWO < CamoVersion.EIGHT

    def test_legacy_mapping(self):
        """Legacy numbering is offset by one."""
        for version in CamoVersion:
            assert version.legacy == int(version) - 1
            assert CamoVersion.from_legacy(version.legacy) is version

    def test_unknown_legacy(self):
        with pytest.raises(IncompatibleCamoVersions):
            CamoVersion.from_legacy(8)
        with pytest.raises(IncompatibleCamoVersions):
            CamoVersion.from_legacy(-1)

    def test_parse(self):
        assert CamoVersion.parse(3) is CamoVersion.THREE
        with pytest.raises(IncompatibleCamoVersions):
            CamoVersion.parse(0)
        with pytest.raises(IncompatibleCamoVersions):
            CamoVersion.parse(9)

    def test_tags_distinct(self):
        tags = {v.tag for v in CamoVersion}
        assert len(tags) == VERSION_COUNT
        assert all(len(tag) <= 16 for tag in tags)


class TestCamoVersionsSet:
    """Set behaviour."""

    def test_empty_contains_nothing(self):
        empty = CamoVersions.empty()
        assert empty.is_empty
        for version in CamoVersion:
            assert not empty.contains(version)

    def test_single(self):
        for version in CamoVersion:
            single = CamoVersions.single(version)
            for other in CamoVersion:
                assert single.contains(other) == (other is version)

    def test_empty_distinct_from_version_one(self):
        assert CamoVersions.empty() != CamoVersions.single(CamoVersion.ONE)
        assert CamoVersions.empty().to_bytes() != CamoVersions.single(CamoVersion.ONE).to_bytes()

    def test_all(self):
        assert list(CamoVersions.all()) == list(CamoVersion)
        assert len(CamoVersions.all()) == VERSION_COUNT

    def test_insert_returns_new_set(self):
        base = CamoVersions.single(CamoVersion.ONE)
        grown = base.insert(CamoVersion.THREE)
        assert not base.contains(CamoVersion.THREE)
        assert grown == CamoVersions.of(CamoVersion.ONE, CamoVersion.THREE)

    def test_union_intersection(self):
        a = CamoVersions.of(CamoVersion.ONE, CamoVersion.TWO)
        b = CamoVersions.of(CamoVersion.TWO, CamoVersion.FIVE)
        assert list(a.union(b)) == [CamoVersion.ONE, CamoVersion.TWO, CamoVersion.FIVE]
        assert list(a.intersection(b)) == [CamoVersion.TWO]

    def test_highest(self):
        assert CamoVersions.of(CamoVersion.TWO, CamoVersion.SIX).highest() is CamoVersion.SIX
        assert CamoVersions.empty().highest() is None
        assert CamoVersions(0x100).highest() is None

    def test_in_operator(self):
        versions = CamoVersions.single(CamoVersion.TWO)
        assert 2 in versions
        assert 1 not in versions
        assert 42 not in versions
        assert "2" not in versions

    def test_value_semantics(self):
        a = CamoVersions.of(CamoVersion.ONE, CamoVersion.FOUR)
        b = CamoVersions.of(CamoVersion.FOUR, CamoVersion.ONE)
        assert a == b
        assert len({a, b}) == 1

    def test_from_numbers(self):
        assert versions_from_numbers([1, 3]) == CamoVersions.of(CamoVersion.ONE, CamoVersion.THREE)
        with pytest.raises(IncompatibleCamoVersions):
            versions_from_numbers([0])


class TestCamoVersionsEncoding:
    """Bit field encoding."""

    def test_width(self):
        assert VERSIONS_WIDTH == 1
        assert len(CamoVersions.empty().to_bytes()) == VERSIONS_WIDTH
        assert len(CamoVersions.all().to_bytes()) == VERSIONS_WIDTH

    def test_bit_positions(self):
        assert CamoVersions.single(CamoVersion.ONE).to_bytes() == b"\x01"
        assert CamoVersions.single(CamoVersion.EIGHT).to_bytes() == b"\x80"
        assert CamoVersions.all().to_bytes() == b"\xff"

    def test_round_trip_every_byte(self):
        for value in range(256):
            data = bytes([value])
            versions = CamoVersions.from_bytes(data)
            assert versions.to_bytes() == data
            assert CamoVersions.from_bytes(versions.to_bytes()) == versions

    def test_reserved_bits_preserved(self):
        """Bits past the defined versions survive a round trip."""
        data = b"\x03\x01"
        versions = CamoVersions.from_bytes(data)
        assert versions.has_reserved_bits
        assert list(versions) == [CamoVersion.ONE, CamoVersion.TWO]
        assert versions.to_bytes() == data
        assert "reserved" in repr(versions)

    def test_trailing_zero_bytes(self):
        versions = CamoVersions.from_bytes(b"\x05\x00\x00")
        assert versions == CamoVersions.of(CamoVersion.ONE, CamoVersion.THREE)
        assert not versions.has_reserved_bits

    def test_strict_rejects_reserved(self):
        with pytest.raises(IncompatibleCamoVersions):
            CamoVersions.from_bytes(b"\x01\x02", strict=True)

    def test_strict_accepts_known(self):
        assert CamoVersions.from_bytes(b"\xff", strict=True) == CamoVersions.all()

    def test_too_short(self):
        with pytest.raises(InvalidLength):
            CamoVersions.from_bytes(b"")


class TestNegotiation:
    """Version agreement between sender and recipient."""

    def test_accepted(self):
        recipient = CamoVersions.of(CamoVersion.ONE, CamoVersion.TWO)
        assert negotiate(CamoVersion.TWO, recipient) is CamoVersion.TWO

    def test_rejected(self):
        with pytest.raises(IncompatibleCamoVersions):
            negotiate(CamoVersion.TWO, CamoVersions.single(CamoVersion.ONE))

    def test_empty_recipient(self):
        with pytest.raises(IncompatibleCamoVersions):
            negotiate(CamoVersion.ONE, CamoVersions.empty())

    def test_best_common(self):
        ours = CamoVersions.of(CamoVersion.ONE, CamoVersion.TWO, CamoVersion.THREE)
        theirs = CamoVersions.of(CamoVersion.TWO, CamoVersion.THREE, CamoVersion.FOUR)
        assert best_common(ours, theirs) is CamoVersion.THREE

    def test_no_common(self):
        with pytest.raises(IncompatibleCamoVersions):
            best_common(
                CamoVersions.single(CamoVersion.ONE),
                CamoVersions.single(CamoVersion.TWO),
            )
