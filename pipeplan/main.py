"""
pipeplan — CLI entrypoint.

Usage:
    python -m pipeplan.main --help
    python -m pipeplan.main detect
    python -m pipeplan.main plan emit
    python -m pipeplan.main config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from pipeplan import __version__
from pipeplan.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="pipeplan")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--workspace",
    "-w",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="GITHUB_WORKSPACE",
    default=None,
    help="Repository root (default: $GITHUB_WORKSPACE or current directory).",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Path to .iupipes.yml (default: auto-detect at the workspace root).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    workspace: Path | None,
    config_path: Path | None,
) -> None:
    """pipeplan — infer a repository's runtime and plan its CI build."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["workspace"] = workspace
    ctx.obj["config_path"] = config_path

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("PIPEPLAN_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("PIPEPLAN_LOG_FILE"),
        log_file_level=os.environ.get("PIPEPLAN_LOG_FILE_LEVEL"),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Detect the runtime, its version and the working directory."""
    from pipeplan.core.use_cases.plan import run_plan

    result = run_plan(
        workspace=ctx.obj.get("workspace"),
        config_path=ctx.obj.get("config_path"),
    )

    if result.error:
        if as_json:
            click.echo(json.dumps({"error": result.error}, indent=2))
        else:
            click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    detected = result.detected
    assert detected is not None

    if as_json:
        click.echo(json.dumps(detected.model_dump(mode="json", by_alias=True), indent=2))
        return

    click.secho(f"\n🔍 Detection: {result.workspace}", fg="cyan", bold=True)
    click.echo(f"   Runtime:           {detected.runtime}")
    click.echo(f"   Version:           {detected.runtime_version}")
    click.echo(f"   Working directory: {detected.working_directory}")
    click.echo(f"   Goal:              {detected.goal}")
    for warn in result.warnings:
        click.secho(f"   ⚠️  {warn}", fg="yellow")
    click.echo()


@cli.group()
def config() -> None:
    """Pipeline configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate .iupipes.yml configuration."""
    from pipeplan.core.use_cases.config_check import check_config

    result = check_config(
        workspace=ctx.obj.get("workspace"),
        config_path=ctx.obj.get("config_path"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        summary = result.to_dict()
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        if result.config_path:
            click.echo(f"   File: {result.config_path}")
        click.echo(f"   Working directory: {summary['working_directory']}")
        click.echo(f"   Goal: {summary['goal']}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


# ── Register sub-command groups from pipeplan/ui/cli/ ─────────────

from pipeplan.ui.cli.plan import plan  # noqa: E402

cli.add_command(plan)


if __name__ == "__main__":
    cli()
