"""runner.py
Orchestration for one render: logging setup, streaming the input through
the pipeline, optional optimisation, writing the document.

Run with the CLI:
    wavepath render input.wav -o waveform.svg
    some-encoder | wavepath render - -o waveform.svg

Nothing is written unless the whole input rendered successfully.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from wavepath.optimize import optimize_svg
from wavepath.pipeline import StreamRenderer, WaveformPipeline
from wavepath.reducer import WINDOW_SIZE
from wavepath.render import PROFILES, DEFAULT_PROFILE, RenderProfile

logger = logging.getLogger("wavepath")

__all__ = ["RenderOptions", "setup_logging", "render_file", "run_render"]


@dataclass
class RenderOptions:
    source: str = "-"
    output: Path = Path("output.svg")
    profile: RenderProfile = field(default_factory=lambda: PROFILES[DEFAULT_PROFILE])
    window_size: int = WINDOW_SIZE
    flush_partial: bool = False
    read_size: int = 8192
    optimize: bool = False
    optimizer: str = "svgo"
    debug: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None


def setup_logging(debug: bool = False, log_file: Optional[str] = None, level_name: str = "INFO") -> None:
    root = logging.getLogger()
    for h in root.handlers[:]:
        root.removeHandler(h)
    level = logging.DEBUG if debug else logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO
    root.setLevel(level)

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    # Console handler (always)
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        from logging.handlers import RotatingFileHandler
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        fileh = RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=2)
        fileh.setLevel(level)
        fileh.setFormatter(formatter)
        root.addHandler(fileh)


def render_file(
    source: str,
    profile: Optional[RenderProfile] = None,
    *,
    window_size: int = WINDOW_SIZE,
    flush_partial: bool = False,
    read_size: int = 8192,
) -> str:
    """Render *source* (a path, or "-" for stdin) and return the SVG document."""
    pipeline = WaveformPipeline(profile, window_size=window_size, flush_partial=flush_partial)
    renderer = StreamRenderer(pipeline, read_size=read_size)

    if source == "-":
        return asyncio.run(renderer.run(sys.stdin.buffer))
    with open(source, "rb") as fh:
        return asyncio.run(renderer.run(fh))


def run_render(opts: RenderOptions) -> int:
    """Render ``opts.source`` to ``opts.output``. Returns bytes written.

    WaveformError propagates to the caller before anything touches disk.
    """
    logger.info("Rendering %s → %s (%dx%d, %d px/point)", opts.source, opts.output,
                opts.profile.width, opts.profile.height, opts.profile.step)

    document = render_file(
        opts.source,
        opts.profile,
        window_size=opts.window_size,
        flush_partial=opts.flush_partial,
        read_size=opts.read_size,
    )
    if opts.optimize:
        document = optimize_svg(document, command=opts.optimizer)

    data = document.encode("utf-8")
    opts.output.parent.mkdir(parents=True, exist_ok=True)
    opts.output.write_bytes(data)
    logger.info("Wrote %d bytes to %s", len(data), opts.output)
    return len(data)
