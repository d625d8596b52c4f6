"""Tests for the render orchestration helpers."""

from __future__ import annotations

import numpy as np
import pytest

from wavepath import runner
from wavepath.header import UnsupportedBitDepth
from wavepath.render import PROFILES
from wavepath.runner import RenderOptions, render_file, run_render


def test_render_file(tmp_path, make_wav, sine_250hz) -> None:
    src = tmp_path / "tone.wav"
    src.write_bytes(make_wav(sine_250hz))

    svg = render_file(str(src), PROFILES["compact"], read_size=100)

    assert svg.startswith("<?xml")
    assert 'viewBox="0 0 1000 200"' in svg


def test_run_render_writes_output(tmp_path, make_wav, sine_250hz) -> None:
    src = tmp_path / "tone.wav"
    src.write_bytes(make_wav(sine_250hz))
    out = tmp_path / "deep" / "tone.svg"

    written = run_render(RenderOptions(source=str(src), output=out))

    assert out.stat().st_size == written


def test_run_render_optimises(tmp_path, make_wav, monkeypatch) -> None:
    src = tmp_path / "a.wav"
    src.write_bytes(make_wav(np.zeros(200, dtype=np.int16)))
    out = tmp_path / "a.svg"
    monkeypatch.setattr(runner, "optimize_svg", lambda doc, command: "<svg/>")

    run_render(RenderOptions(source=str(src), output=out, optimize=True))

    assert out.read_text() == "<svg/>"


def test_run_render_error_leaves_no_file(tmp_path, make_wav) -> None:
    src = tmp_path / "a.wav"
    src.write_bytes(make_wav([0, 0], bits=8))
    out = tmp_path / "a.svg"

    with pytest.raises(UnsupportedBitDepth):
        run_render(RenderOptions(source=str(src), output=out))
    assert not out.exists()
