"""Exception hierarchy for fatal audit conditions.

Policy violations are never raised; they are collected into
:class:`~dep_audit.models.CheckOutcome` values. Everything here means the
audit could not run to completion.
"""

from __future__ import annotations


class AuditError(Exception):
    """Base class for errors that abort an audit."""


class EnvironmentFault(AuditError):
    """The invocation environment is broken; no meaningful audit is possible."""


class MetadataError(EnvironmentFault):
    """`cargo metadata` could not be run or its output could not be decoded."""


class VendorTreeError(EnvironmentFault):
    """The vendor directory or one of its manifests is missing."""


class ConfigurationError(AuditError):
    """The static policy is out of sync with the dependency tree."""


class CrateNotFoundError(ConfigurationError):
    def __init__(self, crate):
        self.crate = crate
        super().__init__(f"crate does not exist: {crate}")


class PolicyError(ConfigurationError):
    """A policy file could not be read or failed validation."""
