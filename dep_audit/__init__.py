"""dep-audit: license and dependency-whitelist checks for vendored crates."""

__version__ = "0.1.0"
