"""Minimal WAV (RIFF) container writer for raw linear PCM."""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass

DEFAULT_SAMPLE_RATE = 24000
DEFAULT_BITS_PER_SAMPLE = 16
CHANNELS = 1
PCM_FORMAT = 1
HEADER_SIZE = 44

_RATE_RE = re.compile(r"rate=(\d+)")
_BITS_RE = re.compile(r"audio/L(\d+)")

# tags are written as raw bytes in file order; numeric fields little-endian
_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")


@dataclass(frozen=True)
class AudioFormat:
    sample_rate: int = DEFAULT_SAMPLE_RATE
    bits_per_sample: int = DEFAULT_BITS_PER_SAMPLE
    channels: int = CHANNELS

    @property
    def bytes_per_sample(self) -> int:
        return self.bits_per_sample // 8

    @property
    def block_align(self) -> int:
        return self.channels * self.bytes_per_sample

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.block_align


def parse_audio_format(mime_type: str | None) -> AudioFormat:
    """Read sample rate and bit depth from a mime type like
    ``audio/L16;codec=pcm;rate=24000``.

    Missing or unparseable parts fall back to 24000 Hz / 16 bit.
    """

    raw = mime_type or ""
    rate_match = _RATE_RE.search(raw)
    bits_match = _BITS_RE.search(raw)

    sample_rate = int(rate_match.group(1)) if rate_match else DEFAULT_SAMPLE_RATE
    bits = int(bits_match.group(1)) if bits_match else DEFAULT_BITS_PER_SAMPLE
    if sample_rate <= 0:
        sample_rate = DEFAULT_SAMPLE_RATE
    if bits <= 0 or bits % 8:
        bits = DEFAULT_BITS_PER_SAMPLE
    return AudioFormat(sample_rate=sample_rate, bits_per_sample=bits)


def build_wav_header(data_size: int, audio_format: AudioFormat | None = None) -> bytes:
    """Return the canonical 44-byte header for ``data_size`` bytes of PCM."""

    fmt = audio_format or AudioFormat()
    return _HEADER_STRUCT.pack(
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT,
        fmt.channels,
        fmt.sample_rate,
        fmt.byte_rate,
        fmt.block_align,
        fmt.bits_per_sample,
        b"data",
        data_size,
    )


def encode_wav(pcm: bytes, audio_format: AudioFormat | None = None) -> bytes:
    return build_wav_header(len(pcm), audio_format) + pcm
