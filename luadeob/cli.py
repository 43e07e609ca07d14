"""CLI entry point for luadeob."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import structlog
import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn
from rich.syntax import Syntax
from rich.table import Table

from luadeob.config import DeobConfig, load_config
from luadeob.config.loader import DEFAULT_CONFIG_TEMPLATE, PROJECT_CONFIG
from luadeob.models import TransformResult
from luadeob.output import ResultWriter
from luadeob.stages import Stage, build_pipeline, default_stages

app = typer.Typer(
    name="luadeob",
    help="Lua deobfuscator — reverse common obfuscation tricks in Lua source.",
)

config_app = typer.Typer(help="Manage luadeob configuration.")
app.add_typer(config_app, name="config")

# Results go to stdout, everything else to stderr.
err_console = Console(stderr=True)

EXAMPLE_SOURCE = f"""\
-- Example obfuscated Lua code
local {'a' * 20} = "SGVsbG8gV29ybGQ="
local {'b' * 15} = function(x) return x..x end
print({'a' * 20}..{'b' * 15}("test"))
"""

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# Global state
_config: DeobConfig | None = None


def _get_config() -> DeobConfig:
    if _config is None:
        return load_config()
    return _config


def _configure_logging(cfg: DeobConfig) -> None:
    handler = logging.StreamHandler(sys.stderr)
    if cfg.log_format == "json":
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=[
                    structlog.processors.TimeStamper(fmt="iso"),
                    structlog.stdlib.add_log_level,
                    structlog.stdlib.add_logger_name,
                ],
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.JSONRenderer(),
                ],
            )
        )
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=_LOG_LEVELS[cfg.log_level], handlers=[handler], force=True)


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to luadeob.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except (ValueError, OSError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _configure_logging(_config)


def _read_input(file: str | None) -> str:
    """Read source text from a file, or stdin when no file (or '-') is given."""
    if file is None or file == "-":
        return sys.stdin.buffer.read().decode("utf-8", errors="replace")
    return Path(file).read_text(encoding="utf-8", errors="replace")


def _display_techniques(result: TransformResult) -> None:
    """Show applied techniques on stderr."""
    if not result.fired:
        err_console.print("[dim]No techniques applied.[/dim]")
        return
    table = Table(title="Techniques Applied")
    table.add_column("Technique", style="green")
    table.add_column("Count", justify="right")
    for label, count in result.technique_counts().items():
        table.add_row(label, str(count))
    err_console.print(table)


@app.command()
def run(
    file: str | None = typer.Argument(None, help="Lua file to clean up (stdin if omitted or '-')"),
    output: str | None = typer.Option(None, "--output", "-o", help="Write result to file or directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show applied techniques on stderr"),
    json_out: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    report: bool = typer.Option(False, "--report", help="Write a techniques report next to --output"),
    progress: bool = typer.Option(False, "--progress", help="Show per-stage progress on stderr"),
    skip: list[str] | None = typer.Option(None, "--skip", help="Stage to skip (repeatable)"),
) -> None:
    """Deobfuscate Lua source and print the result."""
    cfg = _get_config()

    try:
        source = _read_input(file)
    except OSError as e:
        err_console.print(f"[red]Error:[/red] Could not read '{file}': {e}")
        raise typer.Exit(1)

    if not source.strip():
        err_console.print("[red]Error:[/red] Please enter some Lua code to deobfuscate")
        raise typer.Exit(1)

    try:
        pipeline = build_pipeline(cfg, skip=skip or ())
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if progress:
        with Progress(
            TextColumn("[bold]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total} stages"),
            console=err_console,
            transient=True,
        ) as bar:
            task = bar.add_task("Processing...", total=len(pipeline.stages))

            def _advance(stage: Stage, hits: int) -> None:
                bar.update(task, advance=1, description=stage.name)

            result = pipeline.run(source, on_stage=_advance)
    else:
        result = pipeline.run(source)

    if json_out:
        typer.echo(result.model_dump_json(indent=2))
    elif output is None:
        typer.echo(result.text)

    if output is not None:
        writer = ResultWriter(cfg.output)
        try:
            path = writer.write(result, output)
            if report or cfg.output.report:
                report_path = writer.write_report(result, path, source_file=file)
                err_console.print(f"[green]Report:[/green] {report_path}")
        except OSError as e:
            err_console.print(f"[red]Error:[/red] Could not write '{output}': {e}")
            raise typer.Exit(1)
        err_console.print(f"[green]Written to[/green] {path}")
    elif report:
        err_console.print("[yellow]--report needs --output; no report written.[/yellow]")

    if verbose:
        _display_techniques(result)


@app.command()
def techniques() -> None:
    """List the cleanup stages in the order they run."""
    cfg = _get_config()
    enabled = cfg.stages.model_dump()
    table = Table(title="Supported Techniques")
    table.add_column("#", justify="right")
    table.add_column("Stage", style="cyan")
    table.add_column("Label", style="green")
    table.add_column("Description")
    table.add_column("Enabled", justify="center")
    for i, stage in enumerate(default_stages(cfg), 1):
        table.add_row(
            str(i),
            stage.name,
            stage.label or "-",
            stage.description,
            "yes" if enabled.get(stage.name, True) else "[red]no[/red]",
        )
    rprint(table)


@app.command()
def example() -> None:
    """Print a small obfuscated Lua sample to try the pipeline on."""
    typer.echo(EXAMPLE_SOURCE, nl=False)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default luadeob.yaml in current directory."""
    target = PROJECT_CONFIG
    if target.exists() and not force:
        rprint("[yellow]luadeob.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
