"""Tests for the license validator and vendor scanner."""

from pathlib import Path

import pytest

from dep_audit.analysis.licenses import (
    BAD_LICENSE_PARSE, check_license, check_vendor, extract_license,
)
from dep_audit.errors import VendorTreeError
from dep_audit.models import LicenseProblem
from dep_audit.policy import LICENSES, AuditPolicy
from dep_audit.scanner import VendorScanner


# ── Helpers ───────────────────────────────────────────────────

def _manifest(directory: Path, license_line: str | None = 'license = "MIT"') -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    lines = ["[package]", f'name = "{directory.name}"', 'version = "1.0.0"']
    if license_line is not None:
        lines.append(license_line)
    path = directory / "Cargo.toml"
    path.write_text("\n".join(lines) + "\n")
    return path


def _vendor(root: Path, crates: dict) -> Path:
    for name, line in crates.items():
        _manifest(root / "vendor" / name, line)
    return root


# ── extract_license ───────────────────────────────────────────

class TestExtractLicense:
    def test_simple(self):
        assert extract_license('license = "MIT"') == "MIT"

    def test_expression_with_spaces(self):
        assert extract_license('license = "MIT OR Apache-2.0"') == "MIT OR Apache-2.0"

    def test_first_and_last_quote(self):
        assert extract_license('license = "MIT" # "note"') == 'MIT" # "note'

    def test_no_quotes(self):
        assert extract_license("license = MIT") == BAD_LICENSE_PARSE

    def test_single_quote_char(self):
        assert extract_license('license = "MIT') == BAD_LICENSE_PARSE

    def test_empty_value(self):
        assert extract_license('license = ""') == ""


# ── check_license ─────────────────────────────────────────────

class TestCheckLicense:
    def test_mit_passes(self, tmp_path):
        assert check_license(_manifest(tmp_path / "foo"), LICENSES) is None

    def test_all_default_licenses_pass(self, tmp_path):
        for i, lic in enumerate(LICENSES):
            path = _manifest(tmp_path / f"crate{i}", f'license = "{lic}"')
            assert check_license(path, LICENSES) is None

    def test_gpl_fails(self, tmp_path):
        path = _manifest(tmp_path / "foo", 'license = "GPL-2.0"')
        violation = check_license(path, LICENSES)
        assert violation.problem is LicenseProblem.INVALID
        assert violation.license == "GPL-2.0"
        assert violation.describe() == f"invalid license GPL-2.0 in {path}"

    def test_no_license_line(self, tmp_path):
        path = _manifest(tmp_path / "foo", None)
        violation = check_license(path, LICENSES)
        assert violation.problem is LicenseProblem.MISSING
        assert violation.describe() == f"no license in {path}"

    def test_malformed_quotes(self, tmp_path):
        path = _manifest(tmp_path / "foo", "license = MIT")
        violation = check_license(path, LICENSES)
        assert violation.license == BAD_LICENSE_PARSE

    def test_exact_match_only(self, tmp_path):
        path = _manifest(tmp_path / "foo", 'license = "mit"')
        assert check_license(path, LICENSES).license == "mit"

    def test_first_license_line_decides(self, tmp_path):
        path = _manifest(tmp_path / "foo", 'license-file = "LICENSE"\nlicense = "MIT"')
        assert check_license(path, LICENSES).license == "LICENSE"

    def test_indented_line_ignored(self, tmp_path):
        path = _manifest(tmp_path / "foo", '  license = "MIT"')
        assert check_license(path, LICENSES).problem is LicenseProblem.MISSING

    def test_missing_manifest(self, tmp_path):
        with pytest.raises(VendorTreeError, match="does not exist"):
            check_license(tmp_path / "nope" / "Cargo.toml", LICENSES)


# ── Vendor tree ───────────────────────────────────────────────

class TestCheckVendor:
    def test_all_good(self, tmp_path):
        _vendor(tmp_path, {"libc": 'license = "MIT/Apache-2.0"', "log": 'license = "MIT"'})
        assert check_vendor(tmp_path) == []

    def test_reports_every_violation(self, tmp_path):
        _vendor(tmp_path, {
            "aaa": 'license = "GPL-3.0"',
            "bbb": 'license = "MIT"',
            "ccc": None,
        })
        violations = check_vendor(tmp_path)
        assert [v.manifest.parent.name for v in violations] == ["aaa", "ccc"]
        assert [v.problem for v in violations] == [LicenseProblem.INVALID, LicenseProblem.MISSING]

    def test_exceptions_skipped(self, tmp_path):
        _vendor(tmp_path, {
            "openssl": 'license = "Apache-2.0"',
            "openssl-sys": None,
            "libc": 'license = "MIT"',
        })
        assert check_vendor(tmp_path) == []

    def test_custom_policy(self, tmp_path):
        _vendor(tmp_path, {"foo": 'license = "BSD-3-Clause"'})
        policy = AuditPolicy(licenses=("BSD-3-Clause",), exceptions=())
        assert check_vendor(tmp_path, policy) == []

    def test_missing_vendor_dir(self, tmp_path):
        with pytest.raises(VendorTreeError, match="vendor directory missing"):
            check_vendor(tmp_path)

    def test_empty_vendor_dir(self, tmp_path):
        (tmp_path / "vendor").mkdir()
        with pytest.raises(VendorTreeError, match="no vendored source"):
            check_vendor(tmp_path)

    def test_dir_without_manifest(self, tmp_path):
        (tmp_path / "vendor" / "broken").mkdir(parents=True)
        with pytest.raises(VendorTreeError, match="Cargo.toml does not exist"):
            check_vendor(tmp_path)


class TestVendorScanner:
    def test_scan(self, tmp_path):
        _vendor(tmp_path, {"b": None, "a": None, "mdbook": None})
        (tmp_path / "vendor" / "README").write_text("not a crate")
        scan = VendorScanner(("mdbook",)).scan(tmp_path / "vendor")
        assert [p.parent.name for p in scan.manifests] == ["a", "b"]
        assert [p.name for p in scan.skipped] == ["mdbook"]

    def test_only_exceptions_is_not_empty(self, tmp_path):
        _vendor(tmp_path, {"mdbook": None})
        scan = VendorScanner(("mdbook",)).scan(tmp_path / "vendor")
        assert scan.manifests == []

    def test_is_exception(self):
        scanner = VendorScanner(("pest",))
        assert scanner.is_exception(Path("vendor/pest"))
        assert scanner.is_exception(Path("vendor/pest_derive"))
        assert not scanner.is_exception(Path("vendor/libc"))
