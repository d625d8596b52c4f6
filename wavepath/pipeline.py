"""pipeline.py
Event-driven WAV → SVG pipeline.

``WaveformPipeline`` owns all run state and reacts to two events:

    feed(data)   - more bytes are available (any size, including empty)
    finish()     - the input is exhausted; returns the SVG document

State machine: AWAITING_HEADER → STREAMING_SAMPLES → FINISHED.

``StreamRenderer`` pumps a binary stream (a file, a pipe, stdin) into a
pipeline from inside an asyncio loop, doing the blocking reads in the
default executor.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import BinaryIO, Optional

import numpy as np

from wavepath.header import ContainerHeader, HeaderParser
from wavepath.reducer import BlockReducer, WINDOW_SIZE
from wavepath.render import PROFILES, DEFAULT_PROFILE, RenderProfile, render_svg

logger = logging.getLogger(__name__)

__all__ = ["PipelineState", "WaveformPipeline", "StreamRenderer"]


class PipelineState(enum.Enum):
    AWAITING_HEADER = "awaiting_header"
    STREAMING_SAMPLES = "streaming_samples"
    FINISHED = "finished"


class WaveformPipeline:
    """Single-consumer render state.

    Parameters
    ----------
    profile : RenderProfile, default PROFILES["classic"]
    window_size : int, default 100
        Frames per peak row.
    flush_partial : bool, default False
        Keep the trailing partial window instead of dropping it.
    """

    def __init__(
        self,
        profile: Optional[RenderProfile] = None,
        *,
        window_size: int = WINDOW_SIZE,
        flush_partial: bool = False,
    ):
        self.profile = profile or PROFILES[DEFAULT_PROFILE]
        self.window_size = window_size
        self.flush_partial = flush_partial

        self.state = PipelineState.AWAITING_HEADER
        self.header: Optional[ContainerHeader] = None
        self.bytes_consumed = 0
        self.rows: Optional[np.ndarray] = None

        self._parser = HeaderParser()
        self._reducer: Optional[BlockReducer] = None
        self._data_remaining: Optional[int] = None  # None = read to end of stream

    def feed(self, data: bytes) -> None:
        if self.state is PipelineState.FINISHED:
            raise RuntimeError("pipeline already finished")
        if not data:
            return
        self.bytes_consumed += len(data)

        if self.state is PipelineState.AWAITING_HEADER:
            payload = self._parser.feed(data)
            if payload is None:
                return
            self._start_streaming(self._parser.header)
            data = payload

        self._consume_payload(data)

    def _start_streaming(self, header: ContainerHeader) -> None:
        self.header = header
        logger.info("Header %s", header)
        if self._parser.chunks:
            logger.info("Skipped %d chunk(s) before data: %s", len(self._parser.chunks),
                        ", ".join(c.chunk_id for c in self._parser.chunks))

        self._reducer = BlockReducer(
            header.num_channels,
            self.window_size,
            flush_partial=self.flush_partial,
            bytes_per_sample=header.bytes_per_sample,
        )
        if header.data_size_known:
            self._data_remaining = header.subchunk2_size
        else:
            logger.debug("Data size not declared (%#x); reading to end of stream", header.subchunk2_size)
        self.state = PipelineState.STREAMING_SAMPLES

    def _consume_payload(self, data: bytes) -> None:
        if self._data_remaining is not None:
            if len(data) > self._data_remaining:
                logger.debug("Ignoring %d bytes past declared data size", len(data) - self._data_remaining)
                data = data[: self._data_remaining]
            self._data_remaining -= len(data)
        if data:
            self._reducer.feed(data)

    def finish(self) -> str:
        """End of input: run the resampler and return the SVG document."""
        if self.state is PipelineState.FINISHED:
            raise RuntimeError("pipeline already finished")

        if self._reducer is None:
            self._parser.finish()  # raises MissingDataChunk
        self.rows = self._reducer.finish()
        self.state = PipelineState.FINISHED

        logger.info("Bytes read from stream: %d", self.bytes_consumed)
        logger.debug("Rendering %d peak rows on %dx%d canvas", len(self.rows),
                     self.profile.width, self.profile.height)
        return render_svg(self.rows, self.profile)


class StreamRenderer:
    """Feed a pipeline from a binary stream until it is exhausted.

    Usage example:

        svg = asyncio.run(StreamRenderer(WaveformPipeline()).run(sys.stdin.buffer))

    A read returning ``None`` (non-blocking source with nothing ready) is
    retried; an empty read is end-of-stream.
    """

    def __init__(self, pipeline: WaveformPipeline, *, read_size: int = 8192, poll_interval: float = 0.01):
        self.pipeline = pipeline
        self.read_size = read_size
        self.poll_interval = poll_interval

    async def run(self, stream: BinaryIO) -> str:
        loop = asyncio.get_running_loop()
        while True:
            chunk = await loop.run_in_executor(None, stream.read, self.read_size)
            if chunk is None:
                await asyncio.sleep(self.poll_interval)
                continue
            if not chunk:
                break
            self.pipeline.feed(chunk)
        return self.pipeline.finish()
