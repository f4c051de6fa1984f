"""Click CLI with licenses, whitelist, and check subcommands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from dep_audit import __version__
from dep_audit.errors import AuditError
from dep_audit.models import CheckOutcome
from dep_audit.pipeline import AuditConfig, run_audit
from dep_audit.policy import DEFAULT_POLICY, load_policy

_ROOT = click.Path(exists=True, file_okay=False, path_type=Path)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", count=True, help="Log progress (-v) or debug detail (-vv)")
def cli(verbose: int):
    """dep-audit: Check vendored licenses and the crate dependency whitelist."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _policy_option(f):
    return click.option(
        "--policy",
        "policy_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="JSON file overriding the built-in policy lists",
    )(f)


def _whitelist_options(f):
    f = click.option("--cargo", help="cargo executable (default: $DEP_AUDIT_CARGO or cargo)")(f)
    f = click.option(
        "--metadata",
        "metadata_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Read a saved `cargo metadata --format-version 1` snapshot instead of running cargo",
    )(f)
    return f


def _json_option(f):
    return click.option("--json", "as_json", is_flag=True, help="Print outcomes as JSON")(f)


def _run(config: AuditConfig, policy_path: Path | None, as_json: bool) -> None:
    try:
        if policy_path is not None:
            config.policy = load_policy(policy_path)
        outcomes = run_audit(config)
    except AuditError as e:
        raise click.ClickException(str(e))

    _report(outcomes, as_json)
    if not all(o.passed for o in outcomes):
        raise SystemExit(1)


def _report(outcomes: list[CheckOutcome], as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps([o.to_dict() for o in outcomes], indent=2))
        return

    for outcome in outcomes:
        if outcome.passed:
            click.echo(f"{outcome.name}: {click.style('ok', fg='green')}")
            continue
        click.echo(f"{outcome.name}: {click.style('FAILED', fg='red')}")
        for line in outcome.lines():
            click.echo(line)


@cli.command()
@click.argument("root", type=_ROOT, default=".")
@_policy_option
@_json_option
def licenses(root: Path, policy_path: Path | None, as_json: bool):
    """Check the license of every crate under ROOT/vendor."""
    config = AuditConfig(root=root, policy=DEFAULT_POLICY, check_whitelist=False)
    _run(config, policy_path, as_json)


@cli.command()
@click.argument("root", type=_ROOT, default=".")
@_whitelist_options
@_policy_option
@_json_option
def whitelist(
    root: Path,
    cargo: str | None,
    metadata_path: Path | None,
    policy_path: Path | None,
    as_json: bool,
):
    """Check that the whitelisted crates only depend on approved crates."""
    config = AuditConfig(
        root=root,
        cargo=cargo,
        metadata_path=metadata_path,
        check_licenses=False,
    )
    _run(config, policy_path, as_json)


@cli.command()
@click.argument("root", type=_ROOT, default=".")
@_whitelist_options
@_policy_option
@_json_option
def check(
    root: Path,
    cargo: str | None,
    metadata_path: Path | None,
    policy_path: Path | None,
    as_json: bool,
):
    """Run the license check and the whitelist check."""
    config = AuditConfig(root=root, cargo=cargo, metadata_path=metadata_path)
    _run(config, policy_path, as_json)


if __name__ == "__main__":
    cli()
