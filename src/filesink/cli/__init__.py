"""filesink CLI -- typer-based command interface.

Commands:
    filesink append [LINES...]   Append lines (or stdin) to the log file
    filesink status              Show size, threshold and rotation state
    filesink path                Print the resolved log file path

Settings come from ~/.filesink/config.yaml and FILESINK_* env vars;
--path and --max-size override both.
"""

from __future__ import annotations

from pathlib import Path

import typer

from filesink.cli._errors import handle_error
from filesink.config import SinkConfig
from filesink.errors import ConfigurationError
from filesink.logging import setup_logging

app = typer.Typer(
    name="filesink",
    help="Append log lines to a size-capped file.",
    no_args_is_help=True,
)


def _load_config(
    config_file: Path | None,
    path: str | None,
    max_size: int | None,
    verbose: bool = False,
) -> SinkConfig:
    try:
        cfg = SinkConfig.load(config_file)
    except ConfigurationError as e:
        handle_error(str(e))
    if path is not None:
        cfg.path = path
    if max_size is not None:
        cfg.max_size_bytes = max_size
    if verbose:
        cfg.log_level = "DEBUG"
    try:
        setup_logging(cfg)
    except ValueError as e:
        handle_error(str(e))
    return cfg


def _stdin_lines():
    """Yield stdin lines; undecodable bytes become U+FFFD."""
    for raw in typer.get_binary_stream("stdin"):
        yield raw.decode("utf-8", errors="replace").rstrip("\r\n")


@app.command("append")
def append(
    lines: list[str] = typer.Argument(None, help="Lines to append (default: read stdin)"),
    path: str = typer.Option(None, "--path", "-p", help="Log file path"),
    max_size: int = typer.Option(
        None, "--max-size", "-m", help="Rotation threshold in bytes"
    ),
    config_file: Path = typer.Option(None, "--config", "-c", help="YAML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log sink lifecycle events"),
) -> None:
    """Append lines to the log file.

    The file is rotated first if it is already at or over the threshold.

    Examples:
        filesink append "service started" --path /tmp/app.log
        tail -n 5 build.txt | filesink append -p /tmp/app.log
    """
    cfg = _load_config(config_file, path, max_size, verbose)
    try:
        sink = cfg.create_sink()
    except ConfigurationError as e:
        handle_error(str(e))
    except OSError as e:
        handle_error(f"Cannot open log file: {e}")

    source = lines if lines else _stdin_lines()
    count = 0
    with sink:
        for line in source:
            sink.write(line)
            count += 1

    if sink.failure_count:
        handle_error(f"{sink.failure_count} of {count} lines could not be written to {sink.path}")
    typer.echo(f"Appended {count} line(s) to {sink.path}")


@app.command("status")
def status(
    path: str = typer.Option(None, "--path", "-p", help="Log file path"),
    max_size: int = typer.Option(
        None, "--max-size", "-m", help="Rotation threshold in bytes"
    ),
    config_file: Path = typer.Option(None, "--config", "-c", help="YAML config file"),
) -> None:
    """Show the log file's size and whether the next sink would rotate it."""
    cfg = _load_config(config_file, path, max_size)
    try:
        target = cfg.resolve_path()
    except ConfigurationError as e:
        handle_error(str(e))

    typer.echo(f"Path:       {target}")
    typer.echo(f"Threshold:  {cfg.max_size_bytes} bytes")
    if not target.exists():
        typer.echo("Size:       (missing, will be created)")
        return
    size = target.stat().st_size
    typer.echo(f"Size:       {size} bytes")
    typer.echo(f"Rotate:     {'yes' if size >= cfg.max_size_bytes else 'no'}")


@app.command("path")
def show_path(
    config_file: Path = typer.Option(None, "--config", "-c", help="YAML config file"),
) -> None:
    """Print the resolved log file path."""
    cfg = _load_config(config_file, None, None)
    try:
        typer.echo(str(cfg.resolve_path()))
    except ConfigurationError as e:
        handle_error(str(e))


def main() -> None:
    """Entry point for the filesink CLI."""
    app()
