"""wavepath - streamed WAV audio to a compact SVG waveform."""

from wavepath.header import (
    ContainerHeader,
    HeaderParser,
    InvalidChunkTag,
    MissingDataChunk,
    UnsupportedBitDepth,
    WaveformError,
)
from wavepath.pipeline import PipelineState, StreamRenderer, WaveformPipeline
from wavepath.render import PROFILES, RenderProfile, render_svg

__version__ = "0.1.0"

__all__ = [
    "ContainerHeader",
    "HeaderParser",
    "InvalidChunkTag",
    "MissingDataChunk",
    "UnsupportedBitDepth",
    "WaveformError",
    "PipelineState",
    "StreamRenderer",
    "WaveformPipeline",
    "PROFILES",
    "RenderProfile",
    "render_svg",
]
