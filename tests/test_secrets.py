"""
nanocamo Secret Container Tests
"""

import copy
import gc
import pickle

import pytest

from nanocamo.crypto.secrets import SecretBytes
from nanocamo.errors import InvalidLength, NanoError


class TestSecretBytesOwnership:
    """Tests for construction and ownership transfer."""

    def test_bytearray_source_is_wiped(self):
        """A mutable source buffer is zeroed once copied in."""
        source = bytearray(b"\x42" * 32)
        secret = SecretBytes(source)
        assert source == bytearray(32)
        assert bytes(secret.as_bytes()) == b"\x42" * 32

    def test_writable_memoryview_source_is_wiped(self):
        backing = bytearray(b"\x17" * 16)
        secret = SecretBytes(memoryview(backing))
        assert backing == bytearray(16)
        assert bytes(secret.as_bytes()) == b"\x17" * 16

    def test_bytes_source_is_copied(self):
        secret = SecretBytes(b"abc")
        assert len(secret) == 3
        assert bytes(secret.as_bytes()) == b"abc"

    def test_size_mismatch(self):
        """Fixed-size containers reject other lengths."""
        with pytest.raises(InvalidLength):
            SecretBytes(b"\x00" * 31, size=32)

    def test_size_mismatch_is_nano_error(self):
        with pytest.raises(NanoError):
            SecretBytes(b"\x00" * 33, size=32)

    def test_rejects_non_bytes(self):
        with pytest.raises(TypeError):
            SecretBytes("not bytes")

    def test_zeroed(self):
        secret = SecretBytes.zeroed(8)
        assert bytes(secret.as_bytes()) == bytes(8)


class TestSecretBytesAccess:
    """Tests for borrowing and cloning."""

    def test_view_is_read_only(self):
        secret = SecretBytes(b"\x01" * 4)
        view = secret.as_bytes()
        with pytest.raises(TypeError):
            view[0] = 0

    def test_clone_is_independent(self):
        """Clearing the original leaves the clone intact."""
        original = SecretBytes(b"\x09" * 32)
        clone = original.clone()
        original.clear()
        assert bytes(clone.as_bytes()) == b"\x09" * 32
        assert clone._buffer is not original._buffer

    def test_read_after_clear(self):
        secret = SecretBytes(b"\x01" * 4)
        secret.clear()
        assert secret.is_cleared
        with pytest.raises(ValueError):
            secret.as_bytes()
        with pytest.raises(ValueError):
            secret.clone()

    def test_clear_is_idempotent(self):
        secret = SecretBytes(b"\x01" * 4)
        secret.clear()
        secret.clear()
        assert secret.is_cleared

    def test_implicit_copy_refused(self):
        secret = SecretBytes(b"\x01" * 4)
        with pytest.raises(TypeError):
            copy.copy(secret)
        with pytest.raises(TypeError):
            copy.deepcopy(secret)

    def test_pickle_refused(self):
        with pytest.raises(TypeError):
            pickle.dumps(SecretBytes(b"\x01" * 4))

    def test_repr_hides_contents(self):
        secret = SecretBytes(b"\xde\xad\xbe\xef")
        assert "dead" not in repr(secret)
        assert "dead" not in str(secret)


class TestSecretBytesEquality:
    """Tests for constant-time equality."""

    def test_equal(self):
        assert SecretBytes(b"\x05" * 32) == SecretBytes(b"\x05" * 32)

    def test_not_equal_last_byte(self):
        a = SecretBytes(b"\x05" * 32)
        b = SecretBytes(b"\x05" * 31 + b"\x06")
        assert a != b

    def test_not_equal_length(self):
        assert SecretBytes(b"\x05" * 32) != SecretBytes(b"\x05" * 31)

    def test_not_equal_to_plain_bytes(self):
        assert SecretBytes(b"\x05" * 4) != b"\x05" * 4

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(SecretBytes(b"\x05" * 4))


class TestSecretBytesZeroization:
    """Storage reads as zeros once the value's lifetime ends."""

    def test_zeroed_on_clear(self):
        secret = SecretBytes(b"\xff" * 32)
        buffer = secret._buffer
        secret.clear()
        assert buffer == bytearray(32)

    def test_zeroed_on_collection(self):
        secret = SecretBytes(b"\xff" * 32)
        buffer = secret._buffer
        del secret
        gc.collect()
        assert buffer == bytearray(32)

    def test_zeroed_on_with_exit(self):
        with SecretBytes(b"\xff" * 32) as secret:
            buffer = secret._buffer
            assert buffer == bytearray(b"\xff" * 32)
        assert buffer == bytearray(32)
        assert secret.is_cleared

    def test_zeroed_on_exception(self):
        """Leaving the block by an exception still wipes."""
        with pytest.raises(RuntimeError):
            with SecretBytes(b"\xff" * 32) as secret:
                buffer = secret._buffer
                raise RuntimeError("boom")
        assert buffer == bytearray(32)

    def test_clone_zeroed_separately(self):
        original = SecretBytes(b"\xff" * 32)
        clone = original.clone()
        clone_buffer = clone._buffer
        original.clear()
        assert clone_buffer == bytearray(b"\xff" * 32)
        del clone
        gc.collect()
        assert clone_buffer == bytearray(32)
