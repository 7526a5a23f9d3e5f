"""
nanocamo Secret Containers

SecretBytes owns a fixed-length mutable buffer holding key material:
seeds, private scalars and derived secrets.

Lifetime rules:
- The constructor takes ownership: a mutable source buffer is wiped once
  its contents have been copied in.
- Copies are only made through clone(); copy.copy(), copy.deepcopy() and
  pickling raise TypeError.
- The buffer is zeroed by clear(), on leaving a ``with`` block (every exit
  path, exceptions included) and when the object is garbage collected.

Equality is constant-time. Contents never appear in repr() or logs.

SECURITY NOTES:
- Zeroing is best-effort in CPython. Immutable bytes objects passed in, or
  produced for libsodium calls, cannot be wiped.
- A SecretBytes is not synchronised. Sharing one between threads is a
  caller decision; read-only sharing is safe, clear() is not.
"""

from typing import Optional

from ..errors import InvalidLength
from .primitives import BytesLike, constant_time_compare, secure_zero


class SecretBytes:
    """
    Owned, zero-on-destruction byte buffer.

    Usage:
        with SecretBytes(seed_bytes, size=32) as seed:
            account = CamoAccount.from_seed(seed)
        # seed buffer is now all zeros
    """

    __slots__ = ("_buffer", "_cleared", "__weakref__")

    def __init__(self, data: BytesLike, size: Optional[int] = None):
        """
        Take ownership of data.

        Args:
            data: Secret bytes; a bytearray source is zeroed after copying
            size: Required length, if the container is fixed-size

        Raises:
            InvalidLength: If size is given and does not match
            TypeError: If data is not a bytes-like object
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"SecretBytes requires a bytes-like object, got {type(data).__name__}"
            )

        if size is not None and len(data) != size:
            raise InvalidLength(
                f"Invalid secret length: {len(data)} (expected {size})"
            )

        self._buffer = bytearray(data)
        self._cleared = False

        if isinstance(data, bytearray):
            secure_zero(data)
        elif isinstance(data, memoryview) and not data.readonly:
            secure_zero(data.cast("B"))

    @classmethod
    def zeroed(cls, size: int) -> "SecretBytes":
        """Create a buffer of size zero bytes, to be filled in place."""
        return cls(bytearray(size))

    def _check(self) -> None:
        if self._cleared:
            raise ValueError("SecretBytes has been cleared")

    def as_bytes(self) -> memoryview:
        """
        Read-only view of the secret.

        The view shares storage with this container, so it reads as zeros
        once the container is cleared. Do not keep it beyond the immediate
        use.
        """
        self._check()
        return memoryview(self._buffer).toreadonly()

    def clone(self) -> "SecretBytes":
        """Explicit deep copy into an independently cleared buffer."""
        self._check()
        copy = SecretBytes.zeroed(len(self._buffer))
        copy._buffer[:] = self._buffer
        return copy

    def clear(self) -> None:
        """Zero the buffer. Further reads raise ValueError."""
        if not self._cleared:
            secure_zero(self._buffer)
            self._cleared = True

    @property
    def is_cleared(self) -> bool:
        return self._cleared

    def __len__(self) -> int:
        return len(self._buffer)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretBytes):
            return NotImplemented
        self._check()
        other._check()
        return constant_time_compare(self._buffer, other._buffer)

    __hash__ = None  # mutable, secret

    def __enter__(self) -> "SecretBytes":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.clear()

    def __del__(self):
        """Zero key material when the object is collected."""
        buffer = getattr(self, "_buffer", None)
        if buffer is not None:
            secure_zero(buffer)

    def __copy__(self):
        raise TypeError("SecretBytes cannot be copied implicitly; use clone()")

    def __deepcopy__(self, memo):
        raise TypeError("SecretBytes cannot be copied implicitly; use clone()")

    def __reduce_ex__(self, protocol):
        raise TypeError("SecretBytes cannot be pickled")

    def __repr__(self) -> str:
        return "SecretBytes([secret value])"
