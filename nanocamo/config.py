"""
nanocamo Configuration Management

Handles loading and validation of configuration from TOML file.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

import toml

from .camo.account import CamoAccount, CamoAddress, CamoViewKeys
from .camo.scanner import DEFAULT_WORKERS, StealthScanner
from .camo.versions import (
    VERSION_COUNT,
    CamoVersion,
    CamoVersions,
    best_common,
    versions_from_numbers,
)
from .crypto.keys import load_seed


logger = logging.getLogger("nanocamo.config")

# Default configuration path
DEFAULT_CONFIG_PATH = Path.home() / ".nanocamo" / "config.toml"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CamoConfig:
    """Camo protocol configuration."""
    preferred_version: int = 1
    accepted_versions: List[int] = field(default_factory=lambda: [1])
    strict_versions: bool = False  # reject reserved version bits when parsing


@dataclass
class ScanConfig:
    """Scanner configuration."""
    workers: int = DEFAULT_WORKERS


@dataclass
class KeyConfig:
    """Key storage configuration."""
    seed_file: Optional[Path] = None  # None = ~/.nanocamo/seed.bin
    account_index: int = 0


@dataclass
class Config:
    """
    Complete nanocamo configuration.
    """
    # Sub-configurations
    camo: CamoConfig = field(default_factory=CamoConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    keys: KeyConfig = field(default_factory=KeyConfig)

    # Paths
    config_path: Path = field(default_factory=lambda: DEFAULT_CONFIG_PATH)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """
        Load configuration from file.

        A missing file gives the defaults. A file that cannot be parsed, or
        that holds a value of the wrong type, is reported and the defaults
        are kept.

        Args:
            config_path: Path to config file (default: ~/.nanocamo/config.toml)

        Returns:
            Loaded configuration
        """
        path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        config = cls()
        config.config_path = path

        if not path.exists():
            return config

        try:
            data = toml.load(str(path))
        except (OSError, toml.TomlDecodeError) as e:
            logger.warning(f"Ignoring unreadable config file {path}: {e}")
            return config

        try:
            config._apply_dict(data)
        except (ValueError, TypeError) as e:
            logger.warning(f"Ignoring invalid config file {path}: {e}")
            config = cls()
            config.config_path = path
        return config

    def _apply_dict(self, data: Dict[str, Any]) -> None:
        """Apply dictionary data to config."""
        # Top-level settings
        if "log_level" in data:
            self.log_level = str(data["log_level"]).upper()
        if "log_file" in data:
            self.log_file = Path(data["log_file"])

        # Camo config
        if "camo" in data:
            c = data["camo"]
            if "preferred_version" in c:
                self.camo.preferred_version = int(c["preferred_version"])
            if "accepted_versions" in c:
                self.camo.accepted_versions = [int(v) for v in c["accepted_versions"]]
            if "strict_versions" in c:
                self.camo.strict_versions = bool(c["strict_versions"])

        # Scan config
        if "scan" in data:
            s = data["scan"]
            if "workers" in s:
                self.scan.workers = int(s["workers"])

        # Key config
        if "keys" in data:
            k = data["keys"]
            if "seed_file" in k:
                self.keys.seed_file = Path(k["seed_file"])
            if "account_index" in k:
                self.keys.account_index = int(k["account_index"])

    def validate(self) -> None:
        """
        Validate configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        for number in [self.camo.preferred_version] + self.camo.accepted_versions:
            if not 1 <= number <= VERSION_COUNT:
                raise ValueError(f"Invalid camo version: {number}")

        if self.camo.preferred_version not in self.camo.accepted_versions:
            raise ValueError(
                f"Preferred camo version {self.camo.preferred_version} "
                f"is not among accepted versions {self.camo.accepted_versions}"
            )

        if self.scan.workers < 1:
            raise ValueError(f"Invalid scan worker count: {self.scan.workers}")

        if not 0 <= self.keys.account_index <= 0xFFFFFFFF:
            raise ValueError(f"Invalid account index: {self.keys.account_index}")

        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

    @property
    def accepted_versions(self) -> CamoVersions:
        return versions_from_numbers(self.camo.accepted_versions)

    @property
    def preferred_version(self) -> CamoVersion:
        return CamoVersion.parse(self.camo.preferred_version)

    def configure_logging(self) -> None:
        """Set up root logging from log_level and log_file."""
        kwargs: Dict[str, Any] = {
            "level": getattr(logging, self.log_level),
            "format": LOG_FORMAT,
        }
        if self.log_file is not None:
            kwargs["filename"] = str(self.log_file)
        logging.basicConfig(**kwargs)

    # =========================================================================
    # CONFIGURED OBJECTS
    # =========================================================================

    def open_account(self, create_if_missing: bool = False) -> CamoAccount:
        """
        Load the seed file and derive the configured camo account.

        The seed is cleared as soon as the account has been derived.
        """
        with load_seed(self.keys.seed_file, create_if_missing) as seed:
            return CamoAccount.from_seed(
                seed,
                self.keys.account_index,
                self.accepted_versions,
            )

    def make_scanner(self, view_keys: CamoViewKeys) -> StealthScanner:
        return StealthScanner(view_keys, workers=self.scan.workers)

    def parse_address(self, payload: bytes) -> CamoAddress:
        """Parse an address payload with the configured strictness."""
        return CamoAddress.from_bytes(payload, strict=self.camo.strict_versions)

    def choose_version(self, address: CamoAddress) -> CamoVersion:
        """
        Version to pay address with: the preferred version if the recipient
        accepts it, else the newest version both sides accept.

        Raises:
            IncompatibleCamoVersions: If there is no common version
        """
        preferred = self.preferred_version
        if address.versions.contains(preferred):
            return preferred
        return best_common(self.accepted_versions, address.versions)
