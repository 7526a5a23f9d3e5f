"""
nanocamo Curve Points

Public ed25519 group elements in their standard 32-byte compressed
encoding. Points are not secret: equality is ordinary and they may be
hashed, copied and logged.

Every point parsed from external bytes is validated by libsodium:
canonical encoding, on the curve, in the prime-order subgroup and not of
small order. Invalid input raises InvalidPoint at parse time; it is never
coerced.
"""

from typing import TYPE_CHECKING

from nacl.bindings import (
    crypto_core_ed25519_add,
    crypto_core_ed25519_is_valid_point,
    crypto_core_ed25519_sub,
    crypto_scalarmult_ed25519_base_noclamp,
    crypto_scalarmult_ed25519_noclamp,
)

from ..errors import InvalidPoint, expect_length
from .primitives import POINT_SIZE, BytesLike

if TYPE_CHECKING:
    from .scalar import Scalar


# Compressed encodings of the neutral element and the standard base point
IDENTITY_BYTES = bytes([1]) + bytes(POINT_SIZE - 1)
BASE_POINT_BYTES = bytes.fromhex(
    "5866666666666666666666666666666666666666666666666666666666666666"
)


class Point:
    """Compressed ed25519 point."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes):
        """
        Wrap an encoding that is already known to be valid.

        Use Point.from_bytes() for anything that came from outside.
        """
        self._data = bytes(data)

    @classmethod
    def from_bytes(cls, data: BytesLike) -> "Point":
        """
        Parse and validate a compressed point.

        Raises:
            InvalidLength: If data is not 32 bytes
            InvalidPoint: If data is not a valid prime-order-subgroup point
        """
        expect_length(data, POINT_SIZE, "point")
        data = bytes(data)
        if not crypto_core_ed25519_is_valid_point(data):
            raise InvalidPoint(f"Invalid curve point: {data.hex()}")
        return cls(data)

    @classmethod
    def from_hex(cls, text: str) -> "Point":
        try:
            data = bytes.fromhex(text)
        except ValueError as e:
            raise InvalidPoint(f"Invalid point hex: {e}")
        return cls.from_bytes(data)

    @classmethod
    def base(cls) -> "Point":
        return cls(BASE_POINT_BYTES)

    @classmethod
    def identity(cls) -> "Point":
        return cls(IDENTITY_BYTES)

    @classmethod
    def base_mul(cls, scalar: "Scalar") -> "Point":
        """scalar * G"""
        if scalar.is_zero():
            return cls.identity()
        return cls(crypto_scalarmult_ed25519_base_noclamp(scalar._raw()))

    @property
    def is_identity(self) -> bool:
        return self._data == IDENTITY_BYTES

    def add(self, other: "Point") -> "Point":
        return Point(crypto_core_ed25519_add(self._data, other._data))

    def sub(self, other: "Point") -> "Point":
        return Point(crypto_core_ed25519_sub(self._data, other._data))

    def mul(self, scalar: "Scalar") -> "Point":
        """
        scalar * self

        libsodium refuses the identity and a zero scalar (both give the
        identity), so those are answered here.
        """
        if self.is_identity or scalar.is_zero():
            return Point.identity()
        return Point(crypto_scalarmult_ed25519_noclamp(scalar._raw(), self._data))

    def to_bytes(self) -> bytes:
        return self._data

    def hex(self) -> str:
        return self._data.hex()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash(self._data)

    def __repr__(self) -> str:
        return f"Point({self._data.hex()[:16]}...)"
