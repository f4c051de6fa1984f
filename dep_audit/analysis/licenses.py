"""License validator — check the `license` field of vendored manifests."""

from __future__ import annotations

import logging
from pathlib import Path

from dep_audit.errors import VendorTreeError
from dep_audit.models import LicenseProblem, LicenseViolation
from dep_audit.policy import DEFAULT_POLICY, AuditPolicy
from dep_audit.scanner import VendorScanner

logger = logging.getLogger(__name__)

BAD_LICENSE_PARSE = "bad-license-parse"


def extract_license(line: str) -> str:
    """Return the text between the first and last double quote on *line*."""
    first = line.find('"')
    last = line.rfind('"')
    if first == -1 or first == last:
        return BAD_LICENSE_PARSE
    return line[first + 1:last]


def check_license(manifest: Path, allowed: tuple[str, ...] | list[str]) -> LicenseViolation | None:
    """Check one manifest. Returns None when the license is allowed.

    Only the first line starting with ``license`` is considered.
    """
    if not manifest.exists():
        raise VendorTreeError(f"{manifest} does not exist")
    try:
        contents = manifest.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise VendorTreeError(f"cannot read {manifest}: {e}")

    for line in contents.splitlines():
        if not line.startswith("license"):
            continue
        license = extract_license(line)
        if license in allowed:
            return None
        violation = LicenseViolation(manifest, LicenseProblem.INVALID, license)
        logger.info(violation.describe())
        return violation

    violation = LicenseViolation(manifest, LicenseProblem.MISSING)
    logger.info(violation.describe())
    return violation


def check_vendor(root: Path, policy: AuditPolicy = DEFAULT_POLICY) -> list[LicenseViolation]:
    """Check every vendored crate under ``root/vendor`` that is not an exception."""
    scan = VendorScanner(policy.exceptions).scan(root / "vendor")
    logger.info(
        "Checking %d vendored manifests (%d exceptions skipped)",
        len(scan.manifests), len(scan.skipped),
    )

    violations: list[LicenseViolation] = []
    for manifest in scan.manifests:
        violation = check_license(manifest, policy.licenses)
        if violation is not None:
            violations.append(violation)
    return violations
