"""Tests for crate identity and outcome models."""

from pathlib import Path

from dep_audit.models import (
    CheckOutcome, Crate, LicenseProblem, LicenseViolation, ResolveNode,
)


class TestCrate:
    def test_from_str_strips_version_and_source(self):
        raw = "libc 0.2.40 (registry+https://github.com/rust-lang/crates.io-index)"
        assert Crate.from_str(raw) == Crate("libc")

    def test_from_str_bare_name(self):
        assert Crate.from_str("libc") == Crate("libc")

    def test_from_str_never_fails(self):
        assert Crate.from_str("") == Crate("")
        assert Crate.from_str("   ") == Crate("")
        assert Crate.from_str("  padded 1.0") == Crate("padded")

    def test_versions_normalize_to_same_identity(self):
        a = Crate.from_str("log 0.3.9 (registry+https://github.com/rust-lang/crates.io-index)")
        b = Crate.from_str("log 0.4.1 (registry+https://github.com/rust-lang/crates.io-index)")
        assert a == b
        assert len({a, b}) == 1

    def test_id_str(self):
        assert Crate("foo").id_str() == "foo "
        assert not "foobar 1.0.0".startswith(Crate("foo").id_str())

    def test_ordering(self):
        crates = [Crate("winapi"), Crate("cc"), Crate("aho-corasick")]
        assert [c.name for c in sorted(crates)] == ["aho-corasick", "cc", "winapi"]

    def test_node_defaults(self):
        node = ResolveNode(id="syntax 0.0.0 (path+file:///src/libsyntax)")
        assert Crate.from_str(node.id) == Crate("syntax")
        assert node.dependencies == ()


class TestOutcome:
    def test_passed(self):
        outcome = CheckOutcome(name="licenses")
        assert outcome.passed
        assert outcome.lines() == []

    def test_failed_lines_include_header(self):
        outcome = CheckOutcome(name="whitelist", violations=["* regex "], header="Header:")
        assert not outcome.passed
        assert outcome.lines() == ["Header:", "* regex "]
        assert outcome.to_dict() == {
            "check": "whitelist", "passed": False, "violations": ["* regex "],
        }

    def test_license_violation_describe(self):
        path = Path("vendor/foo/Cargo.toml")
        assert (LicenseViolation(path, LicenseProblem.INVALID, "GPL-2.0").describe()
                == f"invalid license GPL-2.0 in {path}")
        assert LicenseViolation(path, LicenseProblem.MISSING).describe() == f"no license in {path}"
