"""Memory wave interference.

Superposes concurrently active memory waves and picks the one that drives
speech modulation. Two different quantities are computed:

- Dominance uses the decayed envelope at ``at_time`` weighted by emotional
  intensity. The oscillation itself plays no part, so a wave caught at a zero
  crossing can still win.
- The interference pattern is the algebraic sum of every wave's damped
  sinusoid sampled over a short window starting at ``at_time``. Its RMS is the
  combined energy used downstream to detect overload.

Everything here is a pure function of its inputs.
"""
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from .constants import SAMPLE_RATE, SCORE_EPSILON
from .waves import MemoryWave

# 50 ms is enough to resolve a few cycles of the lowest useful frequencies
DEFAULT_WINDOW = 0.05


@dataclass(frozen=True, eq=False)
class InterferenceResult:
    """Outcome of superposing a set of waves.

    Attributes:
        dominant: The wave driving modulation, None for an empty input
        dominant_index: Its position in the input sequence
        envelope_samples: Summed waveform over the sampled window
        combined_energy: RMS of envelope_samples
        sample_rate: Samples per second of envelope_samples
        start_time: Time of the first sample
    """
    dominant: Optional[MemoryWave]
    dominant_index: Optional[int]
    envelope_samples: np.ndarray = field(repr=False)
    combined_energy: float
    sample_rate: int
    start_time: float

    @property
    def is_empty(self) -> bool:
        return self.dominant is None


def select_dominant(waves: Sequence[MemoryWave], at_time: float) -> Optional[int]:
    """Index of the wave with the strongest intensity-weighted envelope.

    Ties within SCORE_EPSILON go to the earliest wave in the sequence.
    """
    best_index = None
    best_drive = 0.0
    for index, wave in enumerate(waves):
        drive = wave.drive(at_time)
        if best_index is None or drive > best_drive + SCORE_EPSILON:
            best_index = index
            best_drive = drive
    return best_index


def sample_superposition(
    waves: Sequence[MemoryWave],
    start_time: float,
    duration: float,
    sample_rate: int,
) -> np.ndarray:
    """Sum of the damped sinusoids of all waves over the window."""
    count = max(1, int(round(duration * sample_rate)))
    t = start_time + np.arange(count, dtype=np.float64) / sample_rate
    total = np.zeros(count, dtype=np.float64)
    for wave in waves:
        total += (
            wave.amplitude
            * np.exp(-wave.decay_rate * t)
            * np.sin(2 * np.pi * wave.frequency * t + wave.phase)
        )
    return total


def interfere(
    waves: Sequence[MemoryWave],
    at_time: float = 0.0,
    duration: float = DEFAULT_WINDOW,
    sample_rate: int = SAMPLE_RATE,
) -> InterferenceResult:
    """Superpose waves and select the dominant one.

    Args:
        waves: Competing memory waves, in arrival order
        at_time: Instant at which dominance is judged and sampling starts
        duration: Length of the sampled window in seconds
        sample_rate: Sampling rate of the window

    Returns:
        InterferenceResult. An empty input yields no dominant wave, a
        zero-filled window and zero energy.

    Raises:
        InvalidWaveError: If any wave is invalid. Nothing is computed.
        ValueError: If duration or sample_rate is not positive.
    """
    if duration <= 0:
        raise ValueError(f"duration must be positive, got {duration}")
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")

    for index, wave in enumerate(waves):
        wave.validate(index)

    samples = sample_superposition(waves, at_time, duration, sample_rate)
    energy = float(np.sqrt(np.mean(np.square(samples))))

    dominant_index = select_dominant(waves, at_time)
    dominant = waves[dominant_index] if dominant_index is not None else None

    return InterferenceResult(
        dominant=dominant,
        dominant_index=dominant_index,
        envelope_samples=samples,
        combined_energy=energy,
        sample_rate=sample_rate,
        start_time=at_time,
    )
