"""
CLI commands for package.json manifests.

Thin wrappers over ``npm_operate.core.use_cases.sort`` and ``.check``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from npm_operate.core.errors import OperateError


def _root(ctx: click.Context) -> Path:
    return ctx.obj.get("root_dir") or Path.cwd()


def _prompt_packages(root_dir: Path) -> list[str] | None:
    """Ask which packages of a workspace to sort.

    Returns None for a single-package project (nothing to choose).
    """
    from npm_operate.core.use_cases.project import open_project

    topology = open_project(root_dir).topology
    if not topology.is_workspace_root:
        return None

    names = [p.name for p in topology.packages]
    click.secho("📦 Packages:", fg="cyan", bold=True)
    for i, name in enumerate(names, 1):
        marker = " (root)" if i == 1 else ""
        click.echo(f"   {i}. {name}{marker}")

    answer = click.prompt(
        "Select packages (numbers separated by commas, or 'all')",
        default="all",
    )
    answer = answer.strip().lower()
    if answer in ("all", "*"):
        return names

    picked: list[str] = []
    for token in answer.replace(" ", "").split(","):
        if not token:
            continue
        if not token.isdigit() or not 1 <= int(token) <= len(names):
            raise click.BadParameter(f"'{token}' is not a number between 1 and {len(names)}")
        name = names[int(token) - 1]
        if name not in picked:
            picked.append(name)
    return picked


@click.group()
def manifest() -> None:
    """Manifests — sort fields, check against the schema."""


# ── Sort ────────────────────────────────────────────────────────


@manifest.command("sort")
@click.option("--package", "-p", "packages", multiple=True, help="Package name (repeatable).")
@click.option("--all", "all_packages", is_flag=True, help="Sort the root and every member.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def sort_cmd(
    ctx: click.Context,
    packages: tuple[str, ...],
    all_packages: bool,
    as_json: bool,
) -> None:
    """Rewrite package.json files in canonical field order."""
    from npm_operate.core.use_cases.sort import run_sort

    root_dir = _root(ctx)
    selection: list[str] | None
    if all_packages:
        selection = None
    elif packages:
        selection = list(packages)
    elif as_json:
        selection = None
    else:
        try:
            selection = _prompt_packages(root_dir)
        except OperateError as e:
            click.secho(f"❌ {e}", fg="red")
            sys.exit(1)

    result = run_sort(root_dir, packages=selection)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    for item in result.sorted:
        if item.changed:
            click.secho(f"   ✅ {item.package}", fg="green", nl=False)
            click.echo(f"  → {item.manifest_path}")
        else:
            click.echo(f"   ✓ {item.package} (already sorted)")

    click.echo()
    click.secho(
        f"Sorted {len(result.sorted)} manifest(s), {result.changed_count} changed",
        bold=True,
    )


# ── Check ───────────────────────────────────────────────────────


@manifest.command("check")
@click.option("--package", "-p", "packages", multiple=True, help="Package name (repeatable).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check_cmd(ctx: click.Context, packages: tuple[str, ...], as_json: bool) -> None:
    """Validate package.json files against the manifest schema."""
    from npm_operate.core.use_cases.check import check_manifests

    result = check_manifests(_root(ctx), packages=list(packages) or None)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    for report in result.reports:
        if report.valid:
            click.secho(f"   ✅ {report.package}", fg="green")
            continue
        click.secho(f"   ❌ {report.package}", fg="red", bold=True)
        for violation in report.violations:
            click.echo(f"      • {violation}")

    click.echo()
    if not result.valid:
        click.secho(f"{result.violation_count} violation(s) found", fg="red", bold=True)
        sys.exit(1)

    click.secho("✅ All manifests are valid", fg="green", bold=True)
