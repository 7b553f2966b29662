"""Action commands for the dirbuf CLI: preview and apply an actions file."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress

from dirbuf.cli.utils import build_adapter, get_config, load_actions_file, print_output
from dirbuf.drivers.registry import AdapterRegistry
from dirbuf.kernel.domain.actions import Action
from dirbuf.kernel.exceptions import ActionFailedError, DirbufError
from dirbuf.kernel.mutator import aperform_actions, render_actions

console = Console()


def _load_plan(ctx: typer.Context, actions_file: Path) -> tuple[AdapterRegistry, list[Action]]:
    config = get_config(ctx)
    registry, _ = build_adapter(config)
    try:
        actions = load_actions_file(actions_file, config.scheme)
    except (DirbufError, OSError) as e:
        console.print(f"[red]Invalid actions file:[/red] {escape(str(e))}")
        raise typer.Exit(2) from e
    return registry, actions


def _render(registry: AdapterRegistry, actions: list[Action]) -> list[str]:
    try:
        return render_actions(actions, registry)
    except DirbufError as e:
        console.print(f"[red]Cannot render actions:[/red] {escape(str(e))}")
        raise typer.Exit(2) from e


def plan(
    ctx: typer.Context,
    actions_file: Path = typer.Argument(..., help="YAML file with a list of actions"),
) -> None:
    """Preview the actions in ``actions_file`` without touching the filesystem."""
    registry, actions = _load_plan(ctx, actions_file)
    lines = _render(registry, actions)
    if ctx.obj and ctx.obj.get("output_format") == "json":
        print_output(lines, ctx)
        return
    for line in lines:
        typer.echo(line)


def apply(
    ctx: typer.Context,
    actions_file: Path = typer.Argument(..., help="YAML file with a list of actions"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Apply without asking for confirmation"),
) -> None:
    """Preview, then perform the actions in ``actions_file`` in order.

    Stops at the first failing action; earlier actions stay applied.
    """
    registry, actions = _load_plan(ctx, actions_file)
    if not actions:
        console.print("[yellow]No actions to apply[/yellow]")
        return

    for line in _render(registry, actions):
        typer.echo(line)

    if not yes and not typer.confirm(f"Apply {len(actions)} action(s)?"):
        console.print("[yellow]Aborted[/yellow]")
        raise typer.Exit(1)

    with Progress(console=console, transient=True) as progress:
        task = progress.add_task("Applying actions", total=len(actions))

        def on_progress(done: int, total: int) -> None:
            progress.update(task, completed=done)

        try:
            asyncio.run(aperform_actions(actions, registry, on_progress))
        except ActionFailedError as e:
            progress.stop()
            console.print(f"[red]{escape(str(e))}[/red]")
            console.print(f"[yellow]{e.index} of {len(actions)} action(s) applied[/yellow]")
            raise typer.Exit(1) from e

    console.print(f"[green]✓ Applied {len(actions)} action(s)[/green]")
