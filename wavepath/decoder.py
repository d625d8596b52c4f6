"""decoder.py
Little-endian signed 16-bit PCM → normalised amplitudes.

Stateless: the caller hands over whole frames and keeps any trailing
partial frame for the next call (see reducer.BlockReducer).
"""

from __future__ import annotations

import numpy as np

__all__ = ["decode_samples", "normalize_16bit", "FULL_SCALE"]

# Divisor used for 16-bit samples. -32768 therefore maps slightly above 1.0.
FULL_SCALE = 32760.0

_PCM16 = np.dtype("<i2")


def normalize_16bit(raw: np.ndarray) -> np.ndarray:
    """Map raw int16 codes to absolute amplitudes, nominally 0…1."""
    return np.abs(raw.astype(np.float64) / FULL_SCALE)


def decode_samples(buf: bytes, channels: int, bytes_per_sample: int = 2) -> np.ndarray:
    """Decode every complete frame in *buf*.

    Returns a float64 array of shape ``(frames, channels)``; row *i* holds
    frame *i* with channels in declared order. Bytes past the last whole
    frame are ignored.
    """
    if bytes_per_sample != _PCM16.itemsize:
        raise ValueError(f"only 16-bit samples can be decoded (got {bytes_per_sample * 8}-bit)")

    frame_size = bytes_per_sample * channels
    frames = len(buf) // frame_size
    if not frames:
        return np.empty((0, channels), dtype=np.float64)
    raw = np.frombuffer(buf, dtype=_PCM16, count=frames * channels)
    return normalize_16bit(raw).reshape(frames, channels)
