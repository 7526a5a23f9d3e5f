"""
nanocamo Scalars

Elements of the ed25519 scalar field, i.e. integers modulo the group
order L. A Scalar is always stored in canonical reduced form as 32
little-endian bytes inside a SecretBytes, so it is zeroed with it.

Raw bytes never enter arithmetic: they are first either reduced
(from_bytes_reduced, from_clamped_bytes) or validated as canonical
(from_canonical_bytes). Arithmetic and base-point multiplication are
libsodium's constant-time primitives.
"""

from typing import TYPE_CHECKING

from nacl.bindings import (
    crypto_core_ed25519_scalar_add,
    crypto_core_ed25519_scalar_invert,
    crypto_core_ed25519_scalar_mul,
    crypto_core_ed25519_scalar_negate,
    crypto_core_ed25519_scalar_reduce,
    crypto_core_ed25519_scalar_sub,
)

from ..errors import InvalidScalar, expect_length
from .primitives import (
    SCALAR_SIZE,
    WIDE_SCALAR_SIZE,
    BytesLike,
    constant_time_compare,
    random_bytes,
    secure_zero,
)
from .secrets import SecretBytes

if TYPE_CHECKING:
    from .point import Point


# Order of the ed25519 prime-order subgroup
GROUP_ORDER = 2**252 + 27742317777372353535851937790883648493

_ZERO = bytes(SCALAR_SIZE)


def _reduce_wide(data: bytes) -> bytes:
    """Reduce up to 64 little-endian bytes modulo L."""
    return crypto_core_ed25519_scalar_reduce(data.ljust(WIDE_SCALAR_SIZE, b"\x00"))


def _is_canonical(data: BytesLike) -> bool:
    return constant_time_compare(_reduce_wide(bytes(data)), data)


class Scalar:
    """
    Secret integer modulo the group order L.

    Arithmetic is exposed as named methods; every result is a new Scalar
    in canonical form.

    Usage:
        with Scalar.random() as r:
            R = r.to_public()
    """

    __slots__ = ("_secret", "__weakref__")

    def __init__(self, secret: SecretBytes):
        """
        Wrap a 32-byte canonical encoding.

        Args:
            secret: Canonical little-endian scalar; ownership is taken

        Raises:
            InvalidLength: If secret is not 32 bytes
            InvalidScalar: If secret is not reduced modulo L
            TypeError: If secret is not a SecretBytes
        """
        if not isinstance(secret, SecretBytes):
            raise TypeError(
                f"Scalar requires SecretBytes, got {type(secret).__name__}"
            )
        expect_length(secret, SCALAR_SIZE, "scalar")
        if not _is_canonical(secret.as_bytes()):
            raise InvalidScalar("Scalar is not canonically reduced")
        self._secret = secret

    @classmethod
    def _from_reduced(cls, raw: bytes) -> "Scalar":
        # raw comes straight out of a libsodium reduction; skip re-checking
        scalar = cls.__new__(cls)
        scalar._secret = SecretBytes(raw, SCALAR_SIZE)
        return scalar

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def from_bytes_reduced(cls, data: BytesLike) -> "Scalar":
        """
        Interpret data as a little-endian integer and reduce it modulo L.

        Always succeeds; inputs of up to 64 bytes use libsodium's wide
        reduction.
        """
        data = bytes(data)
        if len(data) <= WIDE_SCALAR_SIZE:
            return cls._from_reduced(_reduce_wide(data))
        value = int.from_bytes(data, "little") % GROUP_ORDER
        return cls._from_reduced(value.to_bytes(SCALAR_SIZE, "little"))

    @classmethod
    def from_canonical_bytes(cls, data: BytesLike) -> "Scalar":
        """
        Accept only an already-reduced 32-byte encoding.

        Raises:
            InvalidLength: If data is not 32 bytes
            InvalidScalar: If data encodes a value >= L
        """
        expect_length(data, SCALAR_SIZE, "scalar")
        # validate before SecretBytes takes (and wipes) the caller's buffer
        if not _is_canonical(data):
            raise InvalidScalar("Scalar is not canonically reduced")
        return cls(SecretBytes(data))

    @classmethod
    def from_clamped_bytes(cls, data: BytesLike) -> "Scalar":
        """
        Apply ed25519 clamping to 32 bytes, then reduce modulo L.

        This is how expanded ledger private keys become scalars.
        """
        expect_length(data, SCALAR_SIZE, "scalar")
        buf = bytearray(data)
        try:
            buf[0] &= 248
            buf[31] &= 127
            buf[31] |= 64
            return cls._from_reduced(_reduce_wide(bytes(buf)))
        finally:
            secure_zero(buf)

    @classmethod
    def from_int(cls, value: int) -> "Scalar":
        """Reduce a Python integer modulo L."""
        return cls._from_reduced((value % GROUP_ORDER).to_bytes(SCALAR_SIZE, "little"))

    @classmethod
    def from_hex(cls, text: str) -> "Scalar":
        """Parse 64 hex characters; the encoding must be canonical."""
        try:
            data = bytes.fromhex(text)
        except ValueError as e:
            raise InvalidScalar(f"Invalid scalar hex: {e}")
        return cls.from_canonical_bytes(data)

    @classmethod
    def random(cls) -> "Scalar":
        """
        Uniform scalar in [0, L) from the kernel CSPRNG.

        64 random bytes are reduced modulo L; the bias is below 2^-250.
        """
        return cls._from_reduced(_reduce_wide(random_bytes(WIDE_SCALAR_SIZE)))

    @classmethod
    def zero(cls) -> "Scalar":
        return cls._from_reduced(_ZERO)

    # =========================================================================
    # ARITHMETIC (mod L)
    # =========================================================================

    def _raw(self) -> bytes:
        return bytes(self._secret.as_bytes())

    def add(self, other: "Scalar") -> "Scalar":
        """Return self + other (mod L)."""
        return Scalar._from_reduced(crypto_core_ed25519_scalar_add(self._raw(), other._raw()))

    def sub(self, other: "Scalar") -> "Scalar":
        """Return self - other (mod L)."""
        return Scalar._from_reduced(crypto_core_ed25519_scalar_sub(self._raw(), other._raw()))

    def mul(self, other: "Scalar") -> "Scalar":
        """Return self * other (mod L)."""
        return Scalar._from_reduced(crypto_core_ed25519_scalar_mul(self._raw(), other._raw()))

    def negate(self) -> "Scalar":
        """Return -self (mod L)."""
        return Scalar._from_reduced(crypto_core_ed25519_scalar_negate(self._raw()))

    def invert(self) -> "Scalar":
        """
        Return the multiplicative inverse of self.

        Raises:
            InvalidScalar: If self is zero
        """
        if self.is_zero():
            raise InvalidScalar("Zero has no inverse")
        return Scalar._from_reduced(crypto_core_ed25519_scalar_invert(self._raw()))

    def is_zero(self) -> bool:
        return constant_time_compare(self._secret.as_bytes(), _ZERO)

    def to_public(self) -> "Point":
        """Multiply the base point by this scalar. The result is public."""
        from .point import Point

        return Point.base_mul(self)

    # =========================================================================
    # ENCODING / LIFETIME
    # =========================================================================

    def as_bytes(self) -> memoryview:
        """Read-only view of the canonical encoding (see SecretBytes.as_bytes)."""
        return self._secret.as_bytes()

    def to_bytes(self) -> bytes:
        """
        Canonical 32-byte little-endian encoding.

        Security:
            Output is secret key material that cannot be wiped. Handle with care.
        """
        return self._raw()

    def to_hex(self) -> str:
        return self._secret.as_bytes().hex()

    def clone(self) -> "Scalar":
        """Explicit copy with its own zeroed-on-destruction storage."""
        scalar = Scalar.__new__(Scalar)
        scalar._secret = self._secret.clone()
        return scalar

    def clear(self) -> None:
        self._secret.clear()

    def __enter__(self) -> "Scalar":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.clear()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Scalar):
            return NotImplemented
        return self._secret == other._secret

    __hash__ = None

    def __copy__(self):
        raise TypeError("Scalar cannot be copied implicitly; use clone()")

    def __deepcopy__(self, memo):
        raise TypeError("Scalar cannot be copied implicitly; use clone()")

    def __reduce_ex__(self, protocol):
        raise TypeError("Scalar cannot be pickled")

    def __repr__(self) -> str:
        return "Scalar([secret value])"
