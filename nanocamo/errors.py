"""
nanocamo Error Taxonomy

Every expected failure raised by this package derives from NanoError, so
callers can reject a single malformed message without catching unrelated
exceptions.

A scan that finds no match is not an error and never raises.
"""


class NanoError(Exception):
    """Base exception for all nanocamo failures."""
    pass


class InvalidLength(NanoError):
    """Input byte string has the wrong size for the target type."""
    pass


class InvalidScalar(NanoError):
    """Byte string is not a canonical reduced scalar where one was required."""
    pass


class InvalidPoint(NanoError):
    """
    Byte string does not decode to a usable curve point.

    Raised for non-canonical encodings, points off the curve, points of
    small order and points outside the prime-order subgroup.
    """
    pass


class IncompatibleCamoVersions(NanoError):
    """
    Requested camo version is not in the counterpart's capability set,
    or strict decoding met a reserved version bit.
    """
    pass


class InvalidChecksum(NanoError):
    """Address checksum mismatch reported by the address text codec."""
    pass


def expect_length(data, length: int, what: str = "value") -> None:
    """
    Raise InvalidLength unless len(data) == length.

    Args:
        data: Any sized object
        length: Required length in bytes
        what: Name used in the error message
    """
    if len(data) != length:
        raise InvalidLength(
            f"Invalid {what} length: {len(data)} (expected {length})"
        )
