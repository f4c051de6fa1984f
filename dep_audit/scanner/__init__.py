"""Vendor tree scanning."""

from __future__ import annotations

from dep_audit.scanner.vendor_scanner import MANIFEST_NAME, VendorScan, VendorScanner

__all__ = [
    "MANIFEST_NAME",
    "VendorScan",
    "VendorScanner",
]
