"""header.py
Streaming RIFF/WAVE header reader.

The fixed 44-byte layout is decoded first; anything between the "fmt "
subchunk and the "data" subchunk (LIST, fact, bext, ...) is skipped chunk by
chunk until the sample payload is located.

Usage example:

    parser = HeaderParser()
    for block in source:
        payload = parser.feed(block)
        if payload is not None:
            break                     # parser.header is now complete
    parser.finish()                   # raises MissingDataChunk if never found

Multi-byte integers are little-endian, tags are raw 4-byte ASCII.
"""

from __future__ import annotations

import dataclasses
import logging
import struct
from dataclasses import dataclass
from typing import BinaryIO, List, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

__all__ = [
    "ContainerHeader",
    "Chunk",
    "HeaderParser",
    "parse_fixed_header",
    "read_header",
    "WaveformError",
    "InvalidChunkTag",
    "MissingDataChunk",
    "UnsupportedBitDepth",
    "HEADER_SIZE",
]

HEADER_SIZE = 44
CHUNK_HEADER_SIZE = 8
FMT_BASE_SIZE = 16
SUPPORTED_BITS_PER_SAMPLE = 16

# Encoders writing to a pipe cannot seek back to patch the sizes in.
UNKNOWN_DATA_SIZES = (0, 0xFFFFFFFF)

# <4s I 4s> RIFF descriptor, <4s I H H I I H H> fmt subchunk, <4s I> next chunk
_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")
_CHUNK_STRUCT = struct.Struct("<4sI")


# Errors

class WaveformError(Exception):
    """Base class for every fatal input error."""


class InvalidChunkTag(WaveformError):
    def __init__(self, field: str, expected: str, actual: str):
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f'Unsupported format: {field} must be "{expected}" (got {actual!r})'
        )


class MissingDataChunk(WaveformError):
    def __init__(self, bytes_scanned: int):
        self.bytes_scanned = bytes_scanned
        super().__init__(
            f'Unsupported format: no "data" chunk found '
            f"(source exhausted after {bytes_scanned} bytes)"
        )


class UnsupportedBitDepth(WaveformError):
    def __init__(self, bits_per_sample: int):
        self.bits_per_sample = bits_per_sample
        super().__init__(
            f"Unsupported format: only {SUPPORTED_BITS_PER_SAMPLE} bits per sample "
            f"are supported (got {bits_per_sample})"
        )


# Data model

@dataclass(frozen=True)
class ContainerHeader:
    chunk_id: str
    chunk_size: int
    format: str
    subchunk1_id: str
    subchunk1_size: int
    audio_format: int
    num_channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    subchunk2_id: str
    subchunk2_size: int

    @property
    def bytes_per_sample(self) -> int:
        return self.bits_per_sample // 8

    @property
    def frame_size(self) -> int:
        """Bytes per multi-channel frame, derived rather than trusted from block_align."""
        return self.bytes_per_sample * self.num_channels

    @property
    def data_size_known(self) -> bool:
        return self.subchunk2_size not in UNKNOWN_DATA_SIZES


class Chunk(NamedTuple):
    """An intervening chunk that was skipped on the way to "data"."""

    chunk_id: str
    size: int


def _tag(raw: bytes) -> str:
    return raw.decode("latin-1")


def parse_fixed_header(buf: bytes) -> ContainerHeader:
    """Decode and validate the fixed 44-byte header layout.

    The tag at offset 36 is *not* validated here: when it is not "data" the
    caller treats that region as an ordinary chunk and skips it.
    """
    if len(buf) < HEADER_SIZE:
        raise ValueError(f"need {HEADER_SIZE} bytes, got {len(buf)}")

    fields = _HEADER_STRUCT.unpack_from(buf, 0)
    header = ContainerHeader(
        chunk_id=_tag(fields[0]),
        chunk_size=fields[1],
        format=_tag(fields[2]),
        subchunk1_id=_tag(fields[3]),
        subchunk1_size=fields[4],
        audio_format=fields[5],
        num_channels=fields[6],
        sample_rate=fields[7],
        byte_rate=fields[8],
        block_align=fields[9],
        bits_per_sample=fields[10],
        subchunk2_id=_tag(fields[11]),
        subchunk2_size=fields[12],
    )
    _validate(header)
    return header


def _validate(header: ContainerHeader) -> None:
    if header.chunk_id != "RIFF":
        raise InvalidChunkTag("chunk ID", "RIFF", header.chunk_id)
    if header.format != "WAVE":
        raise InvalidChunkTag("format", "WAVE", header.format)
    if header.subchunk1_id != "fmt ":
        raise InvalidChunkTag("first subchunk ID", "fmt ", header.subchunk1_id)
    if header.bits_per_sample != SUPPORTED_BITS_PER_SAMPLE:
        raise UnsupportedBitDepth(header.bits_per_sample)
    if header.num_channels < 1:
        raise WaveformError(
            f"Unsupported format: channel count must be >= 1 (got {header.num_channels})"
        )


class HeaderParser:
    """Incremental header reader.

    Bytes may arrive in pieces of any size (including one byte at a time).
    ``feed`` returns ``None`` until the "data" chunk header has been read,
    then returns whatever payload bytes were fed past it. Skipped chunks are
    never buffered, only counted down.
    """

    def __init__(self):
        self._buf = bytearray()
        self._skip = 0
        self._fixed: Optional[ContainerHeader] = None
        self.header: Optional[ContainerHeader] = None
        self.chunks: List[Chunk] = []
        self.bytes_scanned = 0

    @property
    def done(self) -> bool:
        return self.header is not None

    def feed(self, data: bytes) -> Optional[bytes]:
        if self.done:
            raise RuntimeError("header already parsed; feed payload bytes downstream")
        self.bytes_scanned += len(data)
        self._buf.extend(data)

        if self._fixed is None:
            if len(self._buf) < HEADER_SIZE:
                return None
            self._fixed = parse_fixed_header(bytes(self._buf[:HEADER_SIZE]))
            # Bytes 36..44 are re-read below as the first chunk header, unless
            # an extended fmt subchunk owns them.
            del self._buf[: HEADER_SIZE - CHUNK_HEADER_SIZE]
            self._skip = max(self._fixed.subchunk1_size - FMT_BASE_SIZE, 0)

        return self._scan_chunks()

    def _scan_chunks(self) -> Optional[bytes]:
        while True:
            if self._skip:
                dropped = min(self._skip, len(self._buf))
                del self._buf[:dropped]
                self._skip -= dropped
                if self._skip:
                    return None

            if len(self._buf) < CHUNK_HEADER_SIZE:
                return None

            raw_id, size = _CHUNK_STRUCT.unpack_from(self._buf, 0)
            del self._buf[:CHUNK_HEADER_SIZE]
            chunk_id = _tag(raw_id)

            if chunk_id == "data":
                self.header = dataclasses.replace(
                    self._fixed, subchunk2_id=chunk_id, subchunk2_size=size
                )
                payload = bytes(self._buf)
                self._buf.clear()
                return payload

            logger.debug("Skipping chunk %r (%d bytes)", chunk_id, size)
            self.chunks.append(Chunk(chunk_id, size))
            self._skip = size

    def finish(self) -> ContainerHeader:
        """Signal end of input. Returns the header or raises MissingDataChunk."""
        if self.header is None:
            raise MissingDataChunk(self.bytes_scanned)
        return self.header


def read_header(stream: BinaryIO, read_size: int = 4096) -> Tuple[ContainerHeader, bytes, List[Chunk]]:
    """Blocking helper: read *stream* until the "data" chunk is located.

    Returns ``(header, leftover_payload, skipped_chunks)``.
    """
    parser = HeaderParser()
    while True:
        block = stream.read(read_size)
        if not block:
            raise MissingDataChunk(parser.bytes_scanned)
        payload = parser.feed(block)
        if payload is not None:
            return parser.header, payload, parser.chunks
