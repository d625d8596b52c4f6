"""cli.py
Command-line entry point for wavepath.

Commands:
    wavepath render INPUT   - Render a WAV stream (file or "-" for stdin) to SVG
    wavepath inspect INPUT  - Show the parsed header and any skipped chunks
    wavepath config         - Show (or initialise) the configuration file
"""

from __future__ import annotations

import dataclasses
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from wavepath.header import WaveformError

console = Console()


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Config file (default ~/.wavepath/config.yaml)")
@click.option("--log-file", default=None, help="Path to write rotating logs")
@click.option("--debug", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], log_file: Optional[str], debug: bool):
    """wavepath - turn a WAV stream into an SVG waveform."""
    from wavepath.config import load_config, get_log_file_path
    from wavepath.runner import setup_logging

    try:
        config = load_config(config_path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Could not read config: {escape(str(e))}[/red]")
        sys.exit(2)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path
    ctx.obj["debug"] = debug

    setup_logging(
        debug,
        log_file or get_log_file_path(config),
        config.get("logging", {}).get("level", "INFO"),
    )


@cli.command()
@click.argument("source", default="-")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Output SVG path")
@click.option("--profile", type=click.Choice(["classic", "compact"]), default=None,
              help="classic = 1200x500 @ 2 px/point, compact = 1000x200 @ 10 px/point")
@click.option("--width", type=int, default=None, help="Canvas width (overrides profile)")
@click.option("--height", type=int, default=None, help="Canvas height (overrides profile)")
@click.option("--step", type=int, default=None, help="Pixels between points (overrides profile)")
@click.option("--window-size", type=int, default=None, help="Frames per peak row")
@click.option("--flush-partial/--drop-partial", default=None,
              help="Keep or drop the trailing partial window (default drop)")
@click.option("--optimize/--no-optimize", default=None, help="Run the external SVG optimiser")
@click.pass_context
def render(
    ctx: click.Context,
    source: str,
    output: Optional[Path],
    profile: Optional[str],
    width: Optional[int],
    height: Optional[int],
    step: Optional[int],
    window_size: Optional[int],
    flush_partial: Optional[bool],
    optimize: Optional[bool],
):
    """Render SOURCE (a WAV file, or - for stdin) to an SVG waveform."""
    from wavepath.render import PROFILES, RenderProfile
    from wavepath.runner import RenderOptions, run_render

    config = ctx.obj["config"]
    render_cfg = config.get("render", {})
    output_cfg = config.get("output", {})

    base = PROFILES[profile or render_cfg.get("profile", "classic")]
    try:
        canvas = RenderProfile(
            width=width or base.width,
            height=height or base.height,
            step=step or base.step,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))

    opts = RenderOptions(
        source=source,
        output=output or Path(output_cfg.get("path", "output.svg")),
        profile=canvas,
        window_size=window_size or render_cfg.get("window_size", 100),
        flush_partial=render_cfg.get("flush_partial", False) if flush_partial is None else flush_partial,
        read_size=render_cfg.get("read_size", 8192),
        optimize=output_cfg.get("optimize", False) if optimize is None else optimize,
        optimizer=output_cfg.get("optimizer", "svgo"),
        debug=ctx.obj["debug"],
    )

    try:
        written = run_render(opts)
    except (WaveformError, FileNotFoundError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    console.print(f"[green]Wrote {written} bytes to {escape(str(opts.output))}[/green]")


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inspect(source: Path):
    """Show the container header of SOURCE."""
    from wavepath.header import read_header

    try:
        with source.open("rb") as fh:
            header, _, chunks = read_header(fh)
    except WaveformError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    console.print(Panel.fit(f"[bold blue]{escape(str(source))}[/bold blue]"))

    table = Table(title="Container Header")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for name, value in dataclasses.asdict(header).items():
        table.add_row(name, escape(repr(value) if isinstance(value, str) else str(value)))
    console.print(table)

    if chunks:
        skipped = Table(title="Skipped Chunks")
        skipped.add_column("ID", style="cyan")
        skipped.add_column("Size", justify="right")
        for chunk in chunks:
            skipped.add_row(escape(repr(chunk.chunk_id)), str(chunk.size))
        console.print(skipped)
    else:
        console.print("  No chunks between fmt and data")

    if header.sample_rate and header.data_size_known:
        seconds = header.subchunk2_size / header.frame_size / header.sample_rate
        console.print(f"  Duration: {seconds:.2f} s")


@cli.command(name="config")
@click.option("--init", "init_file", is_flag=True, help="Write the defaults to the config file")
@click.pass_context
def config_cmd(ctx: click.Context, init_file: bool):
    """Show the effective configuration."""
    import yaml
    from wavepath.config import DEFAULT_CONFIG, config_file_path, save_config

    path = ctx.obj["config_path"] or config_file_path()

    if init_file:
        if path.exists():
            console.print(f"[yellow]{escape(str(path))} already exists, leaving it alone[/yellow]")
        else:
            save_config(DEFAULT_CONFIG, path)
            console.print(f"[green]Configuration saved to: {escape(str(path))}[/green]")
        return

    console.print(f"Config file: {escape(str(path))} ({'exists' if path.exists() else '[red]not found[/red]'})")
    console.print(escape(yaml.safe_dump(ctx.obj["config"], default_flow_style=False, sort_keys=False)))


def main():
    """Entry point for the wavepath command."""
    cli()


if __name__ == "__main__":
    main()
