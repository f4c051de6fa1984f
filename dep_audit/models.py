"""Data models for the dependency audit."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, order=True)
class Crate:
    """A crate identity: the bare name, without version or source."""
    name: str

    @classmethod
    def from_str(cls, raw: str) -> Crate:
        # "libc 0.2.40 (registry+https://...)" -> Crate("libc")
        parts = raw.split(None, 1)
        return cls(parts[0] if parts else "")

    def id_str(self) -> str:
        return f"{self.name} "

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ResolveNode:
    """One resolved package from the metadata snapshot."""
    id: str
    dependencies: tuple[str, ...] = ()


class LicenseProblem(enum.Enum):
    INVALID = "invalid"
    MISSING = "missing"


@dataclass(frozen=True)
class LicenseViolation:
    """Result from the license validator for a manifest that failed."""
    manifest: Path
    problem: LicenseProblem
    license: str | None = None

    def describe(self) -> str:
        if self.problem is LicenseProblem.MISSING:
            return f"no license in {self.manifest}"
        return f"invalid license {self.license} in {self.manifest}"


@dataclass
class CheckOutcome:
    """Result of one independent check; the caller decides exit status."""
    name: str
    violations: list[str] = field(default_factory=list)
    header: str = ""

    @property
    def passed(self) -> bool:
        return not self.violations

    def lines(self) -> list[str]:
        if self.passed:
            return []
        out = [self.header] if self.header else []
        out.extend(self.violations)
        return out

    def to_dict(self) -> dict:
        return {
            "check": self.name,
            "passed": self.passed,
            "violations": list(self.violations),
        }
