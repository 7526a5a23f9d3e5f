"""
nanocamo Test Fixtures
"""

import pytest

from nanocamo.camo.account import CamoAccount
from nanocamo.camo.versions import CamoVersions
from nanocamo.crypto.primitives import blake2b_hash
from nanocamo.crypto.secrets import SecretBytes
from nanocamo.errors import InvalidChecksum


class HexAddressCodec:
    """
    Stand-in for the external address text codec.

    "camo_" + hex(payload) + hex(4-byte BLAKE2b checksum).
    """

    PREFIX = "camo_"

    def encode(self, payload: bytes) -> str:
        checksum = blake2b_hash(payload, digest_size=16)[:4]
        return self.PREFIX + payload.hex() + checksum.hex()

    def decode(self, text: str) -> bytes:
        raw = bytes.fromhex(text[len(self.PREFIX):])
        payload, checksum = raw[:-4], raw[-4:]
        if blake2b_hash(payload, digest_size=16)[:4] != checksum:
            raise InvalidChecksum("Address checksum mismatch")
        return payload


@pytest.fixture
def seed_bytes() -> bytes:
    """Deterministic 32-byte master seed."""
    return bytes(range(32))


@pytest.fixture
def seed(seed_bytes) -> SecretBytes:
    with SecretBytes(seed_bytes, 32) as s:
        yield s


@pytest.fixture
def account(seed) -> CamoAccount:
    """Camo account accepting version 1 only."""
    with CamoAccount.from_seed(seed) as a:
        yield a


@pytest.fixture
def multi_account(seed) -> CamoAccount:
    """Camo account accepting every defined version."""
    with CamoAccount.from_seed(seed, 1, CamoVersions.all()) as a:
        yield a


@pytest.fixture
def other_account() -> CamoAccount:
    """Unrelated camo account."""
    with SecretBytes(bytes([0xA5] * 32)) as s:
        with CamoAccount.from_seed(s, 0, CamoVersions.all()) as a:
            yield a


@pytest.fixture
def codec() -> HexAddressCodec:
    return HexAddressCodec()
