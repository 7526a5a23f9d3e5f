"""
nanocamo Stealth Scanner

Checks many candidate transactions against one account's view keys.

Features:
- Parallel fan-out over a thread pool (libsodium releases the GIL)
- Results returned in candidate order
- Thread-safe statistics

Design:
- Each candidate is checked independently; there is no shared state
  besides the counters
- The scanner owns a private clone of the view keys and only reads it
  from worker threads; close() clears that clone
- Fetching candidates from the ledger is the caller's job, as is
  cancellation (stop calling scan) and retrying failed fetches
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from .account import CamoViewKeys
from .stealth import Candidate, Detection, detect


logger = logging.getLogger("nanocamo.scanner")

# Default number of worker threads
DEFAULT_WORKERS = 4


class StealthScanner:
    """
    Scans candidate transactions for payments to one camo account.

    Usage:
        with StealthScanner(account.to_view_keys(), workers=8) as scanner:
            for detection in scanner.scan(candidates):
                with account.recover_key(detection) as key:
                    ...
    """

    def __init__(self, view_keys: CamoViewKeys, workers: int = DEFAULT_WORKERS):
        """
        Initialize scanner.

        Args:
            view_keys: Keys of the receiving account (cloned, not taken)
            workers: Worker threads for scan(); 1 scans inline
        """
        if workers < 1:
            raise ValueError("Worker count must be at least 1")

        self._view_keys = view_keys.clone()
        self._workers = workers

        # Lock for statistics
        self._lock = threading.Lock()

        # Statistics
        self._scanned = 0
        self._matched = 0
        self._skipped = 0

    @property
    def versions(self):
        return self._view_keys.versions

    def scan_one(self, candidate: Candidate) -> Optional[Detection]:
        """
        Check a single candidate.

        Returns:
            Detection on match, None otherwise
        """
        if not self._view_keys.versions.contains(candidate.version):
            with self._lock:
                self._scanned += 1
                self._skipped += 1
            return None

        detection = detect(self._view_keys, candidate)

        with self._lock:
            self._scanned += 1
            if detection is not None:
                self._matched += 1

        return detection

    def scan(self, candidates: Iterable[Candidate]) -> List[Detection]:
        """
        Check all candidates, fanning out across worker threads.

        Args:
            candidates: Candidate transactions

        Returns:
            List[Detection]: matches, in candidate order
        """
        candidates = list(candidates)

        if self._workers == 1 or len(candidates) <= 1:
            results = [self.scan_one(c) for c in candidates]
        else:
            with ThreadPoolExecutor(
                max_workers=min(self._workers, len(candidates)),
                thread_name_prefix="camo-scan",
            ) as executor:
                results = list(executor.map(self.scan_one, candidates))

        detections = [d for d in results if d is not None]

        logger.debug(
            f"Scanned {len(candidates)} candidates, {len(detections)} matched"
        )
        return detections

    def get_stats(self) -> dict:
        """Get scanner statistics."""
        with self._lock:
            return {
                "scanned": self._scanned,
                "matched": self._matched,
                "skipped_version": self._skipped,
                "workers": self._workers,
            }

    def reset_stats(self) -> None:
        """Reset statistics counters."""
        with self._lock:
            self._scanned = 0
            self._matched = 0
            self._skipped = 0

    def close(self) -> None:
        """Clear the scanner's copy of the view key."""
        self._view_keys.clear()

    def __enter__(self) -> "StealthScanner":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
