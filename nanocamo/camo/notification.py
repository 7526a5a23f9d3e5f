"""
nanocamo Camo Notifications

A notification tells a camo recipient that payments are coming. The sender
publishes an ordinary ledger transfer to the recipient's notification
account (the address's spend public point) and sets the representative
field of that block to the ephemeral public point R. From R the recipient
recomputes the one-time addresses for indexes 0, 1, 2, ...

Note that the notification account is publicly linked to the camo address;
the one-time addresses behind it are not.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..crypto.point import Point
from .stealth import Candidate, StealthPayment
from .versions import CamoVersion

if TYPE_CHECKING:
    from .account import CamoAddress


@dataclass(frozen=True)
class Notification:
    """Notification block payload."""

    # Send a small amount to this account...
    recipient: Point
    # ...with the block's representative set to this point (R)
    representative_payload: Point
    version: CamoVersion = CamoVersion.ONE

    @classmethod
    def create(cls, address: "CamoAddress", payment: StealthPayment) -> "Notification":
        """Notification announcing payment's ephemeral key to address."""
        return cls(address.notification_public, payment.ephemeral_public, payment.version)

    @classmethod
    def from_block(
        cls,
        account: bytes,
        representative: bytes,
        version: int = CamoVersion.ONE,
    ) -> "Notification":
        """
        Read a notification out of a block's account and representative fields.

        Raises:
            InvalidLength, InvalidPoint: If either field is not a valid point
            IncompatibleCamoVersions: If version is not a defined version
        """
        return cls(
            Point.from_bytes(account),
            Point.from_bytes(representative),
            CamoVersion.parse(version),
        )

    @property
    def ephemeral_public(self) -> Point:
        return self.representative_payload

    def is_for(self, address: "CamoAddress") -> bool:
        return self.recipient == address.notification_public

    def candidate(self, one_time_public: Point, index: int = 0) -> Candidate:
        """Candidate for a transfer to one_time_public made under this notification."""
        return Candidate(one_time_public, self.representative_payload, self.version, index)
