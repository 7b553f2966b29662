"""dirbuf CLI - Main entrypoint."""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from dirbuf import __version__
from dirbuf.cli.commands import actions_cmd, ls_cmd
from dirbuf.kernel.config import load_config
from dirbuf.kernel.exceptions import ConfigurationError
from dirbuf.kernel.logging import configure_logging

app = typer.Typer(
    name="dirbuf",
    help="dirbuf - list directories and apply file actions through the files adapter.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

console = Console()

app.command("ls", help="List a directory with the requested columns")(ls_cmd.ls)
app.command("normalize", help="Print the canonical url of a directory")(ls_cmd.normalize)
app.command("plan", help="Preview the actions in an actions file")(actions_cmd.plan)
app.command("apply", help="Preview, then perform the actions in an actions file")(
    actions_cmd.apply
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold blue]dirbuf[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    config_path: Path | None = typer.Option(
        None, "--config", help="Config file (YAML, or TOML with [tool.dirbuf])"
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level: debug|info|warning|error"
    ),
    json_out: bool = typer.Option(False, "--json", help="Output machine-readable JSON"),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """dirbuf CLI.

    Global flags are parsed here and stored on `ctx.obj` for subcommands.
    """
    if ctx.obj is None:
        ctx.obj = {}

    try:
        config = load_config(config_path)
    except (ConfigurationError, FileNotFoundError) as e:
        console.print(f"[red]Error loading config:[/red] {escape(str(e))}")
        raise typer.Exit(2) from e

    effective_level = (log_level or config.logging.level).upper()
    configure_logging(
        level=effective_level,  # type: ignore[arg-type]
        format=config.logging.format,
        output_file=config.logging.output_file,
        use_color=config.logging.use_color,
        include_timestamp=config.logging.include_timestamp,
        force_reconfigure=True,
    )

    ctx.obj.update({
        "config": config,
        "output_format": "json" if json_out else "pretty",
        "log_level": effective_level,
    })


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
