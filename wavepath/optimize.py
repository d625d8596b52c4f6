"""optimize.py
Best-effort size reduction of a finished SVG through an external optimiser
(svgo by default, reading stdin and writing stdout).

Never raises: any failure is logged and the input document is returned.
"""

from __future__ import annotations

import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)

__all__ = ["optimize_svg"]


def optimize_svg(document: str, *, command: str = "svgo", timeout: float = 30.0) -> str:
    exe = shutil.which(command)
    if exe is None:
        logger.warning("SVG optimiser %r not found on PATH; writing unoptimised output", command)
        return document

    cmd = [exe, "--input", "-", "--output", "-"]
    logger.debug("optimiser cmd: %s", " ".join(cmd))
    try:
        proc = subprocess.run(
            cmd,
            input=document,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning("SVG optimiser timed out after %ss; writing unoptimised output", timeout)
        return document
    except OSError as e:
        logger.warning("SVG optimiser could not be started: %s", e)
        return document

    optimized = proc.stdout.strip()
    if proc.returncode != 0 or not optimized:
        logger.warning(
            "SVG optimiser failed (exit %d): %s", proc.returncode, proc.stderr.strip() or "no output"
        )
        return document

    logger.info("Optimised SVG: %d → %d bytes", len(document), len(optimized))
    return optimized
