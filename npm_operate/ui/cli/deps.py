"""
CLI commands for dependencies.

Thin wrappers over ``npm_operate.core.use_cases.deps``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from npm_operate.core.models.package import PackageTool

_TOOL_CHOICE = click.Choice([t.value for t in PackageTool])


def _root(ctx: click.Context) -> Path:
    return ctx.obj.get("root_dir") or Path.cwd()


def _check_targets(members: tuple[str, ...], all_members: bool, manifest_only: bool, dry_run: bool) -> None:
    if members and all_members:
        raise click.UsageError("Use either --workspace or --all-members, not both.")
    if manifest_only and dry_run:
        raise click.UsageError("--dry-run only applies to package-manager commands.")


def _report(result, as_json: bool, verb: str) -> None:
    """Print a DepsResult and exit non-zero on failure."""
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.dry_run:
        click.secho("🔍 Dry run — commands not executed:", fg="yellow", bold=True)
        for command in result.commands:
            click.echo(f"   $ {command}")
    elif result.manifest_only:
        for edit in result.edits:
            click.secho(f"📦 {edit.package}", fg="cyan", bold=True)
            for name, version in edit.added.items():
                click.secho(f"   ✅ {name}@{version}", fg="green")
            for name in edit.removed:
                click.secho(f"   ✅ removed {name}", fg="green")
            for name, reason in edit.failed.items():
                click.secho(f"   ❌ {name}: {reason}", fg="red")
            if not edit.written:
                click.echo("   (manifest unchanged)")
    elif result.ok:
        if result.receipts:
            click.secho(f"✅ {verb} {len(result.receipts)} dependency(ies)", fg="green")
        else:
            click.echo("Nothing to do.")
    elif result.receipts:
        click.secho("⚠️  Completed before the failure:", fg="yellow")
        for command in result.commands:
            click.echo(f"   ✅ {command}")

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)
    if not result.ok:
        sys.exit(1)


@click.group()
def deps() -> None:
    """Dependencies — add, remove, look up latest versions."""


@deps.command("add")
@click.argument("names", nargs=-1, required=True)
@click.option("--dev", "-D", is_flag=True, help="Add as a dev dependency.")
@click.option("--workspace", "-w", "members", multiple=True, help="Workspace member (repeatable).")
@click.option("--all-members", is_flag=True, help="Apply to every workspace member.")
@click.option("--manifest-only", is_flag=True, help="Edit package.json instead of running the tool.")
@click.option("--tool", type=_TOOL_CHOICE, default=None, help="Package manager when no lockfile decides.")
@click.option("--dry-run", is_flag=True, help="Print the commands without running them.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def add(
    ctx: click.Context,
    names: tuple[str, ...],
    dev: bool,
    members: tuple[str, ...],
    all_members: bool,
    manifest_only: bool,
    tool: str | None,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Add dependencies to the root package or workspace members."""
    from npm_operate.core.use_cases.deps import add_dependencies

    _check_targets(members, all_members, manifest_only, dry_run)
    result = add_dependencies(
        _root(ctx),
        names,
        dev=dev,
        members=members,
        all_members=all_members,
        manifest_only=manifest_only,
        tool=tool,
        dry_run=dry_run,
    )
    _report(result, as_json, "Installed")


@deps.command("remove")
@click.argument("names", nargs=-1, required=True)
@click.option("--workspace", "-w", "members", multiple=True, help="Workspace member (repeatable).")
@click.option("--all-members", is_flag=True, help="Apply to every workspace member.")
@click.option("--manifest-only", is_flag=True, help="Edit package.json instead of running the tool.")
@click.option("--tool", type=_TOOL_CHOICE, default=None, help="Package manager when no lockfile decides.")
@click.option("--dry-run", is_flag=True, help="Print the commands without running them.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def remove(
    ctx: click.Context,
    names: tuple[str, ...],
    members: tuple[str, ...],
    all_members: bool,
    manifest_only: bool,
    tool: str | None,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Remove dependencies that the targets actually declare."""
    from npm_operate.core.use_cases.deps import remove_dependencies

    _check_targets(members, all_members, manifest_only, dry_run)
    result = remove_dependencies(
        _root(ctx),
        names,
        members=members,
        all_members=all_members,
        manifest_only=manifest_only,
        tool=tool,
        dry_run=dry_run,
    )
    _report(result, as_json, "Removed")


@deps.command("latest")
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def latest(ctx: click.Context, name: str, as_json: bool) -> None:
    """Show the latest published version of a package."""
    from npm_operate.core.use_cases.deps import get_latest

    result = get_latest(_root(ctx), name)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.echo(f"{result.package}@{result.version}")
