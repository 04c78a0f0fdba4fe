"""
npm-operate — CLI entrypoint.

Usage:
    npm-operate --help
    npm-operate info
    npm-operate manifest sort --all
    npm-operate deps add lodash -w web
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from npm_operate import __version__
from npm_operate.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="npm-operate")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--root",
    "-C",
    "root_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Project root containing package.json (default: current directory).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    root_dir: str | None,
) -> None:
    """npm-operate — sort manifests and manage dependencies across workspaces."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["root_dir"] = Path(root_dir).resolve() if root_dir else Path.cwd()

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def info(ctx: click.Context, as_json: bool) -> None:
    """Show packages, workspace layout and package manager."""
    from npm_operate.core.use_cases.project import get_info

    result = get_info(ctx.obj["root_dir"])

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    project = result.project
    if result.error or project is None:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    topology = project.topology
    selection = project.selection

    root = topology.root
    click.secho(f"\n📦 {root.name}", fg="cyan", bold=True, nl=False)
    click.echo(f" {root.version}" if root.version else "")
    click.echo(f"   {project.root_dir}")

    tool_label = str(selection.tool)
    if selection.lockfile:
        tool_label += f" (🔒 {selection.lockfile})"
    else:
        tool_label += f" ({selection.source})"
    if selection.orchestrator:
        tool_label += f" + {selection.orchestrator}"
    click.echo(f"   Tool: {tool_label}")

    if topology.is_workspace_root:
        click.echo()
        click.secho(
            f"   Workspace: {len(topology.members)} member(s)",
            fg="white",
            bold=True,
        )
        click.echo(f"   Patterns: {', '.join(topology.patterns)}")
        for member in topology.members:
            version = f"@{member.version}" if member.version else ""
            click.echo(f"     • {member.name}{version}  → {member.relative_dir}")

    if result.warnings and not ctx.obj.get("quiet"):
        click.echo()
        for warn in result.warnings:
            click.secho(f"⚠️  {warn}", fg="yellow")

    click.echo()


# ── Register sub-command groups from npm_operate/ui/cli/ ──────────

from npm_operate.ui.cli.deps import deps
from npm_operate.ui.cli.manifest import manifest

cli.add_command(manifest)
cli.add_command(deps)


if __name__ == "__main__":
    cli()
