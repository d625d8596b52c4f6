"""reducer.py
Block-peak accumulation of a sample stream of unknown length.

Every ``window_size`` consecutive frames collapse into one super-sample row
holding the peak amplitude of each channel, so the working buffer never
grows past one window no matter how long the source runs.
"""

from __future__ import annotations

import logging
from typing import List

import numpy as np

from wavepath.decoder import decode_samples

logger = logging.getLogger(__name__)

__all__ = ["BlockReducer", "WINDOW_SIZE"]

# One second of 44.1 kHz audio at a 1000-point width keeps a 10:1 compression.
WINDOW_SIZE = 100


class BlockReducer:
    """Turn raw payload bytes into peak rows.

    Parameters
    ----------
    channels : int
        Interleaved channel count from the header.
    window_size : int, default 100
        Frames per super-sample row.
    flush_partial : bool, default False
        Emit a row for the trailing partial window on ``finish()``. Off by
        default: the last ``< window_size`` frames are dropped.
    bytes_per_sample : int, default 2
    """

    def __init__(
        self,
        channels: int,
        window_size: int = WINDOW_SIZE,
        *,
        flush_partial: bool = False,
        bytes_per_sample: int = 2,
    ):
        if channels < 1:
            raise ValueError("channels must be >= 1")
        if window_size < 1:
            raise ValueError("window_size must be >= 1")

        self.channels = channels
        self.window_size = window_size
        self.flush_partial = flush_partial
        self.bytes_per_sample = bytes_per_sample
        self.frame_size = bytes_per_sample * channels

        self._pending = bytearray()  # bytes of an incomplete frame
        self._window = np.empty((0, channels), dtype=np.float64)
        self._rows: List[np.ndarray] = []
        self.frames_seen = 0

    @property
    def samples_in_window(self) -> int:
        return len(self._window)

    @property
    def row_count(self) -> int:
        return len(self._rows)

    def feed(self, data: bytes) -> int:
        """Consume payload bytes; returns the number of rows completed."""
        self._pending.extend(data)
        usable = len(self._pending) - len(self._pending) % self.frame_size
        if not usable:
            return 0

        frames = decode_samples(bytes(self._pending[:usable]), self.channels, self.bytes_per_sample)
        del self._pending[:usable]
        self.frames_seen += len(frames)

        if len(self._window):
            frames = np.concatenate([self._window, frames])

        full = len(frames) // self.window_size
        if full:
            blocks = frames[: full * self.window_size].reshape(full, self.window_size, self.channels)
            self._rows.extend(blocks.max(axis=1))
        self._window = frames[full * self.window_size :]
        return full

    def finish(self) -> np.ndarray:
        """Return every row as an ``(N, channels)`` array."""
        if len(self._window):
            if self.flush_partial:
                self._rows.append(self._window.max(axis=0))
            else:
                logger.debug("Dropping %d frames of trailing partial window", len(self._window))
            self._window = self._window[:0]
        if self._pending:
            logger.debug("Ignoring %d bytes of incomplete trailing frame", len(self._pending))
            self._pending.clear()

        if not self._rows:
            return np.empty((0, self.channels), dtype=np.float64)
        return np.vstack(self._rows)
