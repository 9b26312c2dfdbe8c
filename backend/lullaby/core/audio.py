"""Audio buffers handed to the caller's sink.

Samples are mono float32 in [-1, 1]. Playback, device selection and writing
files are left to the caller; encode_wav only produces bytes for transport.
"""
import io
import wave
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .constants import BIT_DEPTH, CHANNELS, SAMPLE_RATE
from .exceptions import AudioProcessingError


@dataclass(frozen=True, eq=False)
class AudioSegment:
    """Synthesized audio plus its format."""
    samples: np.ndarray = field(repr=False)
    sample_rate: int = SAMPLE_RATE
    channels: int = CHANNELS
    bit_depth: int = BIT_DEPTH

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def duration(self) -> float:
        return len(self.samples) / self.sample_rate

    @classmethod
    def empty(cls, sample_rate: int = SAMPLE_RATE) -> "AudioSegment":
        return cls(np.zeros(0, dtype=np.float32), sample_rate)


def concatenate(segments: Sequence[AudioSegment], sample_rate: int = SAMPLE_RATE) -> AudioSegment:
    """Join segments back to back, with no silence in between.

    Raises:
        AudioProcessingError: If the segments disagree on sample rate
    """
    if not segments:
        return AudioSegment.empty(sample_rate)

    rates = {segment.sample_rate for segment in segments}
    if len(rates) > 1:
        raise AudioProcessingError(
            "concatenate", cause=f"mixed sample rates: {sorted(rates)}"
        )

    samples = np.concatenate([segment.samples for segment in segments]).astype(np.float32)
    return AudioSegment(samples, rates.pop(), segments[0].channels, segments[0].bit_depth)


def decode_wav(data: bytes) -> AudioSegment:
    """Decode 16-bit PCM WAV bytes to float samples (mixed down to mono).

    Raises:
        AudioProcessingError: If the bytes are not 16-bit PCM WAV
    """
    try:
        with wave.open(io.BytesIO(data), "rb") as wav:
            channels = wav.getnchannels()
            sample_width = wav.getsampwidth()
            sample_rate = wav.getframerate()
            frames = wav.readframes(wav.getnframes())
    except (wave.Error, EOFError) as e:
        raise AudioProcessingError("decode", "WAV", str(e))

    if sample_width != 2:
        raise AudioProcessingError(
            "decode", "WAV", f"unsupported sample width {sample_width * 8} bits"
        )

    pcm = np.frombuffer(frames, dtype="<i2").astype(np.float32) / 32768.0
    if channels > 1:
        pcm = pcm.reshape(-1, channels).mean(axis=1)

    return AudioSegment(pcm.astype(np.float32), sample_rate, CHANNELS, BIT_DEPTH)


def encode_wav(segment: AudioSegment) -> bytes:
    """Encode a segment as 16-bit PCM WAV bytes."""
    pcm = (np.clip(segment.samples, -1.0, 1.0) * 32767).astype("<i2")
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(segment.channels)
        wav.setsampwidth(segment.bit_depth // 8)
        wav.setframerate(segment.sample_rate)
        wav.writeframes(pcm.tobytes())
    return buffer.getvalue()
