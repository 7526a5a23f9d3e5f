"""
nanocamo Stealth Scanner Tests
"""

import pytest

from nanocamo.camo.scanner import StealthScanner
from nanocamo.camo.stealth import Candidate, create_payment
from nanocamo.camo.versions import CamoVersion
from nanocamo.crypto.scalar import Scalar


def noise(count: int, version: CamoVersion = CamoVersion.ONE):
    return [
        Candidate(Scalar.random().to_public(), Scalar.random().to_public(), version)
        for _ in range(count)
    ]


class TestStealthScanner:
    """Tests for batch scanning."""

    def test_finds_payments_in_order(self, account):
        payments = [create_payment(account.address, CamoVersion.ONE) for _ in range(3)]
        candidates = noise(10)
        candidates.insert(2, Candidate.from_payment(payments[0]))
        candidates.insert(7, Candidate.from_payment(payments[1]))
        candidates.append(Candidate.from_payment(payments[2]))

        with StealthScanner(account.to_view_keys(), workers=4) as scanner:
            detections = scanner.scan(candidates)

        assert [d.one_time_public for d in detections] == [p.one_time_public for p in payments]

    def test_parallel_matches_sequential(self, account):
        payment = create_payment(account.address, CamoVersion.ONE)
        candidates = noise(40) + [Candidate.from_payment(payment)] + noise(40)

        with StealthScanner(account.to_view_keys(), workers=1) as sequential:
            expected = sequential.scan(candidates)
        with StealthScanner(account.to_view_keys(), workers=8) as parallel:
            found = parallel.scan(candidates)

        assert [d.candidate for d in found] == [d.candidate for d in expected]
        assert len(found) == 1

    def test_detections_recover_keys(self, account):
        payment = create_payment(account.address, CamoVersion.ONE)
        with StealthScanner(account.to_view_keys()) as scanner:
            (detection,) = scanner.scan(noise(5) + [Candidate.from_payment(payment)])
        with account.recover_key(detection) as key:
            assert key.to_public() == payment.one_time_public

    def test_stats(self, account):
        payment = create_payment(account.address, CamoVersion.ONE)
        candidates = noise(6) + noise(3, CamoVersion.FOUR) + [Candidate.from_payment(payment)]

        with StealthScanner(account.to_view_keys(), workers=3) as scanner:
            scanner.scan(candidates)
            stats = scanner.get_stats()
            assert stats == {
                "scanned": 10,
                "matched": 1,
                "skipped_version": 3,
                "workers": 3,
            }

            scanner.reset_stats()
            assert scanner.get_stats()["scanned"] == 0

    def test_empty_batch(self, account):
        with StealthScanner(account.to_view_keys()) as scanner:
            assert scanner.scan([]) == []
            assert scanner.get_stats()["scanned"] == 0

    def test_generator_input(self, account):
        with StealthScanner(account.to_view_keys()) as scanner:
            assert scanner.scan(c for c in noise(5)) == []

    def test_scan_one(self, account):
        payment = create_payment(account.address, CamoVersion.ONE)
        with StealthScanner(account.to_view_keys()) as scanner:
            assert scanner.scan_one(noise(1)[0]) is None
            assert scanner.scan_one(Candidate.from_payment(payment)) is not None

    def test_owns_a_copy(self, account):
        view_keys = account.to_view_keys()
        scanner = StealthScanner(view_keys)
        view_keys.clear()
        payment = create_payment(account.address, CamoVersion.ONE)
        assert scanner.scan([Candidate.from_payment(payment)])
        scanner.close()

    def test_close_clears_copy(self, account):
        scanner = StealthScanner(account.to_view_keys())
        scanner.close()
        with pytest.raises(ValueError):
            scanner.scan_one(noise(1)[0])

    def test_versions(self, multi_account):
        with StealthScanner(multi_account.to_view_keys()) as scanner:
            assert scanner.versions == multi_account.versions

    def test_invalid_workers(self, account):
        with pytest.raises(ValueError):
            StealthScanner(account.to_view_keys(), workers=0)
