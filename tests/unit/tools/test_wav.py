import struct

import pytest

from voxquery.tools.wav import AudioFormat, build_wav_header, encode_wav, parse_audio_format


def test_encoded_file_has_canonical_layout():
    pcm = bytes(range(256)) * 3
    wav = encode_wav(pcm, AudioFormat(sample_rate=24000, bits_per_sample=16))

    assert len(wav) == len(pcm) + 44
    assert wav[0:4] == b"RIFF"
    assert wav[8:12] == b"WAVE"
    assert wav[12:16] == b"fmt "
    assert wav[36:40] == b"data"
    assert struct.unpack_from("<I", wav, 4)[0] == len(pcm) + 36
    assert struct.unpack_from("<I", wav, 40)[0] == len(pcm)
    assert wav[44:] == pcm


def test_fmt_chunk_fields_are_little_endian():
    header = build_wav_header(1000, AudioFormat(sample_rate=44100, bits_per_sample=24))

    subchunk_size, audio_format, channels = struct.unpack_from("<IHH", header, 16)
    sample_rate, byte_rate, block_align, bits = struct.unpack_from("<IIHH", header, 24)

    assert (subchunk_size, audio_format, channels) == (16, 1, 1)
    assert sample_rate == 44100
    assert bits == 24
    assert block_align == 3
    assert byte_rate == 44100 * 3


def test_empty_pcm_still_gets_full_header():
    wav = encode_wav(b"")
    assert len(wav) == 44
    assert struct.unpack_from("<I", wav, 4)[0] == 36
    assert struct.unpack_from("<I", wav, 40)[0] == 0


@pytest.mark.parametrize(
    ("mime_type", "expected"),
    [
        ("audio/L16;codec=pcm;rate=24000", (24000, 16)),
        ("audio/L24;rate=48000", (48000, 24)),
        ("audio/L8; rate=8000", (8000, 8)),
        ("audio/pcm", (24000, 16)),
        ("", (24000, 16)),
        (None, (24000, 16)),
        ("audio/L12;rate=0", (24000, 16)),
    ],
)
def test_parse_audio_format(mime_type, expected):
    fmt = parse_audio_format(mime_type)
    assert (fmt.sample_rate, fmt.bits_per_sample) == expected
    assert fmt.channels == 1
