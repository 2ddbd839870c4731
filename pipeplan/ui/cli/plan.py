"""
CLI commands for the build plan.

Thin wrappers over ``pipeplan.core.use_cases.plan``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from pipeplan.core.use_cases.plan import PlanResult, run_plan


def _run(ctx: click.Context) -> PlanResult:
    """Build the plan, exiting with status 1 on failure."""
    result = run_plan(
        workspace=ctx.obj.get("workspace"),
        config_path=ctx.obj.get("config_path"),
    )
    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)
    return result


@click.group()
def plan() -> None:
    """Build plan — phases, matrix and CI outputs."""


@plan.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, as_json: bool) -> None:
    """Show the phase commands and artifacts for this repository."""
    result = _run(ctx)
    built = result.plan
    assert built is not None

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    detected = built.detected
    click.secho(
        f"\n📋 {detected.runtime} {detected.runtime_version} "
        f"({detected.goal}) → {detected.working_directory}",
        fg="cyan",
        bold=True,
    )
    for name, commands in built.phases.items():
        if not commands:
            click.echo(f"   {name:<12} —")
            continue
        click.echo(f"   {name:<12} {commands[0]}")
        for command in commands[1:]:
            click.echo(f"   {'':<12} {command}")

    click.echo(f"\n   Artifacts: {', '.join(built.artifacts)}")
    for warn in result.warnings:
        click.secho(f"   ⚠️  {warn}", fg="yellow")
    click.echo()


@plan.command("matrix")
@click.pass_context
def matrix(ctx: click.Context) -> None:
    """Print the CI job matrix as JSON."""
    result = _run(ctx)
    assert result.matrix is not None
    click.echo(json.dumps(result.matrix.model_dump(mode="json"), indent=2))


@plan.command("emit")
@click.option(
    "--github-output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: $GITHUB_OUTPUT).",
)
@click.pass_context
def emit(ctx: click.Context, output_path: Path | None) -> None:
    """Write runtime, plan, matrix and per-phase commands as step outputs."""
    from pipeplan.adapters.github.outputs import format_output, write_outputs

    result = _run(ctx)
    outputs = result.outputs()

    written = write_outputs(outputs, output_path)
    if written is None:
        # Not inside a runner: show what would have been written
        for name, value in outputs.items():
            click.echo(format_output(name, value), nl=False)
        return

    if not ctx.obj.get("quiet"):
        click.secho(f"✅ {len(outputs)} outputs written to {written}", fg="green")
