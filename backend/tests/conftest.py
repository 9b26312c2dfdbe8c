"""Pytest configuration and shared fixtures."""
from typing import Optional

import numpy as np
import pytest

from lullaby.config import Settings
from lullaby.core import (
    AudioSegment,
    Emotion,
    EmotionKind,
    MemoryWave,
    SalienceEvent,
    SignalType,
    SpeechEngine,
    SynthesisParams,
    VoiceStyle,
)


class FakeBackend:
    """Synthesis backend that returns 10 samples per character."""

    def __init__(self, healthy: bool = True, error: Optional[Exception] = None):
        self.healthy = healthy
        self.error = error
        self.calls: list[tuple[str, VoiceStyle, SynthesisParams, Optional[str]]] = []

    async def synthesize(self, text, style, params, voice=None) -> AudioSegment:
        self.calls.append((text, style, params, voice))
        if self.error is not None:
            raise self.error
        marker = float(len(self.calls)) / 100
        return AudioSegment(np.full(len(text) * 10, marker, dtype=np.float32))

    async def check_health(self) -> bool:
        return self.healthy

    async def list_voices(self) -> list[dict]:
        return [{"id": "af_sky", "name": "Sky"}]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(backend, settings, clock):
    return SpeechEngine(backend, settings=settings, clock=clock, seed=7)


@pytest.fixture
def curiosity_wave():
    return MemoryWave(
        amplitude=1.5,
        frequency=440.0,
        phase=0.0,
        decay_rate=0.1,
        emotion=Emotion(EmotionKind.CURIOSITY, 0.8),
        content="Where am I?",
    )


@pytest.fixture
def love_wave():
    return MemoryWave(
        amplitude=2.5,
        frequency=528.0,
        phase=0.0,
        decay_rate=0.05,
        emotion=Emotion(EmotionKind.LOVE, 0.9),
        content="Mama! I love mama!",
    )


@pytest.fixture
def sensory_events():
    return [
        SalienceEvent(2000, jitter_score=0.1, harmonic_score=0.3, salience_score=0.4,
                      signal_type=SignalType.ENVIRONMENTAL),
        SalienceEvent(2001, jitter_score=0.9, harmonic_score=0.2, salience_score=0.6,
                      signal_type=SignalType.UNKNOWN),
        SalienceEvent(2002, jitter_score=0.3, harmonic_score=0.8, salience_score=0.85,
                      signal_type=SignalType.MUSIC),
    ]
