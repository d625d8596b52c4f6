"""Shared fixtures: in-memory WAV builders."""

from __future__ import annotations

import struct

import numpy as np
import pytest


def build_wav(
    frames,
    *,
    sample_rate: int = 8000,
    bits: int = 16,
    chunks=(),
    data_size=None,
    riff: bytes = b"RIFF",
    wave: bytes = b"WAVE",
    fmt: bytes = b"fmt ",
    data: bytes = b"data",
    fmt_extra: bytes = b"",
    channels=None,
    trailing: bytes = b"",
) -> bytes:
    """Assemble a RIFF/WAVE byte string from int16 *frames* (shape (n,) or (n, ch))."""
    frames = np.asarray(frames, dtype="<i2")
    if frames.ndim == 1:
        frames = frames.reshape(-1, 1)
    channels = frames.shape[1] if channels is None else channels
    payload = frames.tobytes()

    block_align = channels * bits // 8
    fmt_body = struct.pack("<HHIIHH", 1, channels, sample_rate, sample_rate * block_align, block_align, bits)
    fmt_body += fmt_extra

    body = wave + fmt + struct.pack("<I", len(fmt_body)) + fmt_body
    for tag, content in chunks:
        body += tag + struct.pack("<I", len(content)) + content
    body += data + struct.pack("<I", len(payload) if data_size is None else data_size) + payload
    body += trailing
    return riff + struct.pack("<I", len(body)) + body


@pytest.fixture
def make_wav():
    return build_wav


@pytest.fixture
def sine_250hz() -> np.ndarray:
    """One second of a 250 Hz sine at 8 kHz, peak code 16380 (normalises to 0.5)."""
    n = np.arange(8000)
    return np.round(16380 * np.sin(2 * np.pi * 250 * n / 8000)).astype(np.int16)
