"""Enumerate vendored crates and their manifests."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from dep_audit.errors import VendorTreeError

logger = logging.getLogger(__name__)

MANIFEST_NAME = "Cargo.toml"


@dataclass
class VendorScan:
    vendor_dir: Path
    manifests: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)


class VendorScanner:
    """Walk the immediate subdirectories of a vendor tree.

    A directory whose name starts with an exception name is skipped entirely,
    so ``openssl`` also covers ``openssl-sys``.
    """

    def __init__(self, exceptions: tuple[str, ...] | list[str] = ()):
        self.exceptions = tuple(exceptions)

    def is_exception(self, path: Path) -> bool:
        return any(path.name.startswith(exception) for exception in self.exceptions)

    def scan(self, vendor_dir: Path) -> VendorScan:
        if not vendor_dir.is_dir():
            raise VendorTreeError(f"vendor directory missing: {vendor_dir}")

        result = VendorScan(vendor_dir=vendor_dir)
        for path in sorted(vendor_dir.iterdir()):
            if not path.is_dir():
                continue
            if self.is_exception(path):
                logger.debug("Skipping license exception %s", path.name)
                result.skipped.append(path)
                continue
            result.manifests.append(path / MANIFEST_NAME)

        if not result.manifests and not result.skipped:
            raise VendorTreeError(f"no vendored source in {vendor_dir}")
        return result
