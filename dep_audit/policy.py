"""Static audit policy: license allow-list, exceptions, and the crate whitelist."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from dep_audit.errors import PolicyError
from dep_audit.models import Crate

logger = logging.getLogger(__name__)


LICENSES: tuple[str, ...] = (
    "MIT/Apache-2.0",
    "MIT / Apache-2.0",
    "Apache-2.0/MIT",
    "Apache-2.0 / MIT",
    "MIT OR Apache-2.0",
    "MIT",
    "Unlicense/MIT",
)

# Exceptions to the permissive licensing policy. These should be considered
# bugs and are only allowed in tooling; none of them may be a dependency of
# the runtime crates.
EXCEPTIONS: tuple[str, ...] = (
    "mdbook",              # MPL2, mdbook
    "openssl",             # BSD+advertising clause, cargo, mdbook
    "pest",                # MPL2, mdbook via handlebars
    "thread-id",           # Apache-2.0, mdbook
    "toml-query",          # MPL-2.0, mdbook
    "is-match",            # MPL-2.0, mdbook
    "cssparser",           # MPL-2.0, rustdoc
    "smallvec",            # MPL-2.0, rustdoc
    "fuchsia-zircon-sys",  # BSD-3-Clause, rustdoc, rustc, cargo
    "fuchsia-zircon",      # BSD-3-Clause, rustdoc, rustc, cargo (jobserver & tempdir)
    "cssparser-macros",    # MPL-2.0, rustdoc
    "selectors",           # MPL-2.0, rustdoc
    "clippy_lints",        # MPL-2.0 rls
)

# Crates whose transitive dependencies are checked against WHITELIST.
WHITELIST_CRATES: tuple[str, ...] = ("rustc", "rustc_trans")

# Crates the whitelist roots may depend on. Avoid adding to this list.
WHITELIST: tuple[str, ...] = (
    "ar", "arena", "backtrace", "backtrace-sys", "bitflags", "build_helper",
    "byteorder", "cc", "cfg-if", "cmake", "filetime", "flate2", "fmt_macros",
    "fuchsia-zircon", "fuchsia-zircon-sys", "graphviz", "jobserver",
    "kernel32-sys", "lazy_static", "libc", "log", "log_settings", "miniz-sys",
    "num_cpus", "owning_ref", "parking_lot", "parking_lot_core", "rand",
    "redox_syscall", "rustc", "rustc-demangle", "rustc_allocator",
    "rustc_apfloat", "rustc_back", "rustc_binaryen", "rustc_const_eval",
    "rustc_const_math", "rustc_cratesio_shim", "rustc_data_structures",
    "rustc_errors", "rustc_incremental", "rustc_llvm", "rustc_mir",
    "rustc_platform_intrinsics", "rustc_trans", "rustc_trans_utils",
    "serialize", "smallvec", "stable_deref_trait", "syntax", "syntax_pos",
    "tempdir", "unicode-width", "winapi", "winapi-build",
)


@dataclass(frozen=True)
class AuditPolicy:
    licenses: tuple[str, ...] = LICENSES
    exceptions: tuple[str, ...] = EXCEPTIONS
    whitelist_crates: tuple[str, ...] = WHITELIST_CRATES
    whitelist: tuple[str, ...] = WHITELIST

    def roots(self) -> list[Crate]:
        return [Crate.from_str(name) for name in self.whitelist_crates]

    def allow_set(self) -> frozenset[Crate]:
        return frozenset(Crate.from_str(name) for name in self.whitelist)


DEFAULT_POLICY = AuditPolicy()


class PolicyFile(BaseModel):
    """On-disk policy overrides. Absent keys keep the compiled-in default."""
    model_config = ConfigDict(extra="forbid")

    licenses: list[str] | None = None
    exceptions: list[str] | None = None
    whitelist_crates: list[str] | None = None
    whitelist: list[str] | None = None


def load_policy(path: Path, base: AuditPolicy = DEFAULT_POLICY) -> AuditPolicy:
    """Read a JSON policy file and overlay it on *base*."""
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        raise PolicyError(f"policy file not found: {path}")
    except (OSError, ValueError) as e:
        raise PolicyError(f"cannot read policy file {path}: {e}")

    try:
        parsed = PolicyFile.model_validate(data)
    except ValidationError as e:
        raise PolicyError(f"invalid policy file {path}: {e}")

    overrides = {
        key: tuple(value)
        for key, value in parsed.model_dump().items()
        if value is not None
    }
    logger.info("Loaded policy from %s (overrides: %s)", path, sorted(overrides) or "none")
    return replace(base, **overrides)
