"""Value objects flowing through the engine: memory waves and salience events.

Both are frozen dataclasses built by the caller per event and never retained
by the engine past the call that consumes them.
"""
import math
from dataclasses import dataclass, field
from typing import Optional

from .constants import EmotionKind, SignalType
from .exceptions import InvalidWaveError


@dataclass(frozen=True)
class Emotion:
    """An emotion kind tagged with an intensity in [0, 1]."""
    kind: EmotionKind = EmotionKind.NEUTRAL
    intensity: float = 0.0

    @classmethod
    def neutral(cls) -> "Emotion":
        """No affect at all."""
        return cls(EmotionKind.NEUTRAL, 0.0)


@dataclass(frozen=True)
class MemoryWave:
    """One competing internal signal.

    Attributes:
        amplitude: Peak signal strength (>= 0)
        frequency: Oscillation rate in Hz (> 0), a modulation parameter only
        phase: Radians, conceptually wrapped to [0, 2*pi)
        decay_rate: Exponential decay of amplitude per unit time (>= 0)
        emotion: Emotion kind and intensity
        content: Text whose delivery this wave represents
    """
    amplitude: float
    frequency: float
    phase: float = 0.0
    decay_rate: float = 0.0
    emotion: Emotion = field(default_factory=Emotion.neutral)
    content: str = ""

    def validate(self, index: Optional[int] = None) -> None:
        """Raise InvalidWaveError if the wave cannot be computed with."""
        for name in ("amplitude", "frequency", "phase", "decay_rate"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InvalidWaveError(name, value, "a finite number", index)
        if self.frequency <= 0:
            raise InvalidWaveError("frequency", self.frequency, "> 0", index)
        if self.amplitude < 0:
            raise InvalidWaveError("amplitude", self.amplitude, ">= 0", index)
        if self.decay_rate < 0:
            raise InvalidWaveError("decay_rate", self.decay_rate, ">= 0", index)
        if not 0.0 <= self.emotion.intensity <= 1.0:
            raise InvalidWaveError(
                "intensity", self.emotion.intensity, "a value in [0, 1]", index
            )

    @property
    def wrapped_phase(self) -> float:
        return self.phase % (2 * math.pi)

    @property
    def contribution(self) -> float:
        """Weight this wave adds to the regulation accumulator."""
        return self.amplitude * self.emotion.intensity

    def envelope(self, t: float) -> float:
        """Decayed amplitude at time t."""
        return self.amplitude * math.exp(-self.decay_rate * t)

    def drive(self, t: float) -> float:
        """Dominance metric: decayed amplitude weighted by intensity."""
        return self.envelope(t) * self.emotion.intensity

    def signal(self, t: float) -> float:
        """Time-domain value of the damped oscillation at time t."""
        return self.envelope(t) * math.sin(2 * math.pi * self.frequency * t + self.phase)


@dataclass(frozen=True)
class SalienceEvent:
    """A sensory candidate competing for attention.

    Lower jitter means a more stable, familiar signal; higher harmonic score
    means a more tonal, voice-like one.
    """
    timestamp: int
    jitter_score: float
    harmonic_score: float
    salience_score: float
    signal_type: SignalType = SignalType.UNKNOWN
