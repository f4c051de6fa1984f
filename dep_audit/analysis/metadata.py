"""Read the resolved dependency graph from `cargo metadata`."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from pydantic import BaseModel, ValidationError

from dep_audit.errors import MetadataError

logger = logging.getLogger(__name__)

CARGO_ENV = "DEP_AUDIT_CARGO"


# Only the parts of `cargo metadata --format-version 1` the audit reads.

class PackageMetadata(BaseModel):
    id: str
    name: str
    version: str = ""


class ResolveNodeMetadata(BaseModel):
    id: str
    dependencies: list[str]


class ResolveMetadata(BaseModel):
    nodes: list[ResolveNodeMetadata]


class CargoMetadata(BaseModel):
    packages: list[PackageMetadata] = []
    resolve: ResolveMetadata


def default_cargo() -> str:
    return os.getenv(CARGO_ENV) or "cargo"


def load_metadata(text: str | bytes, source: str = "cargo metadata") -> CargoMetadata:
    """Decode a metadata document; any shape problem is fatal."""
    try:
        return CargoMetadata.model_validate_json(text)
    except ValidationError as e:
        raise MetadataError(f"cannot decode output of {source}: {e}")


def read_metadata(path: Path) -> CargoMetadata:
    """Load a metadata snapshot captured earlier with `cargo metadata`."""
    try:
        text = path.read_bytes()
    except OSError as e:
        raise MetadataError(f"cannot read metadata snapshot {path}: {e}")
    return load_metadata(text, source=str(path))


def metadata_command(root: Path, cargo: str | Path | None = None) -> list[str]:
    return [
        str(cargo or default_cargo()),
        "metadata",
        "--format-version",
        "1",
        "--manifest-path",
        str(root / "Cargo.toml"),
    ]


def get_metadata(root: Path, cargo: str | Path | None = None) -> CargoMetadata:
    """Run `cargo metadata` against the workspace at *root*."""
    cmd = metadata_command(root, cargo)
    logger.info("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, check=False)
    except OSError as e:
        raise MetadataError(f"unable to run `{' '.join(cmd)}`: {e}")

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise MetadataError(
            f"`{' '.join(cmd)}` exited with status {result.returncode}: {stderr}"
        )

    return load_metadata(result.stdout, source="`cargo metadata`")
