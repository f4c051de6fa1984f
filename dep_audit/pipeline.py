"""Audit orchestrator: license check and whitelist check, each returning an outcome."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from dep_audit.analysis.dependency_graph import DependencyGraph
from dep_audit.analysis.licenses import check_vendor
from dep_audit.analysis.metadata import CargoMetadata, get_metadata, read_metadata
from dep_audit.analysis.whitelist import check_whitelist
from dep_audit.models import CheckOutcome
from dep_audit.policy import DEFAULT_POLICY, AuditPolicy

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]

WHITELIST_HEADER = "Dependencies not on the whitelist:"


@dataclass
class AuditConfig:
    """Configuration for one audit run."""
    root: Path = field(default_factory=lambda: Path("."))
    cargo: str | None = None
    metadata_path: Path | None = None
    policy: AuditPolicy = DEFAULT_POLICY
    check_licenses: bool = True
    check_whitelist: bool = True


def run_license_check(root: Path, policy: AuditPolicy = DEFAULT_POLICY) -> CheckOutcome:
    violations = check_vendor(root, policy)
    return CheckOutcome(
        name="licenses",
        violations=[v.describe() for v in violations],
    )


def run_whitelist_check(metadata: CargoMetadata, policy: AuditPolicy = DEFAULT_POLICY) -> CheckOutcome:
    graph = DependencyGraph.from_metadata(metadata)
    unapproved = check_whitelist(policy.roots(), graph, policy.allow_set())
    for crate in unapproved:
        logger.info("Dependency not on the whitelist: %s", crate)
    return CheckOutcome(
        name="whitelist",
        violations=[f"* {crate.id_str()}" for crate in unapproved],
        header=WHITELIST_HEADER,
    )


def load_config_metadata(config: AuditConfig) -> CargoMetadata:
    if config.metadata_path is not None:
        return read_metadata(config.metadata_path)
    return get_metadata(config.root, config.cargo)


def run_audit(
    config: AuditConfig,
    progress: ProgressCallback | None = None,
) -> list[CheckOutcome]:
    """Run the selected checks. Fatal errors propagate; violations do not."""
    stages: list[tuple[str, Callable[[], CheckOutcome]]] = []
    if config.check_licenses:
        stages.append(("Checking licenses", lambda: run_license_check(config.root, config.policy)))
    if config.check_whitelist:
        stages.append((
            "Checking whitelist",
            lambda: run_whitelist_check(load_config_metadata(config), config.policy),
        ))

    outcomes: list[CheckOutcome] = []
    for i, (stage, run) in enumerate(stages):
        if progress:
            progress(stage, i, len(stages))
        outcome = run()
        logger.info(
            "%s check %s (%d violations)",
            outcome.name, "passed" if outcome.passed else "failed", len(outcome.violations),
        )
        outcomes.append(outcome)

    if progress:
        progress("Done", len(stages), len(stages))
    return outcomes
