"""Pydantic schemas for API models"""
from typing import Optional

from pydantic import BaseModel, Field

from ..core.constants import EmotionKind, SignalType, VoiceStyle
from ..core.waves import Emotion, MemoryWave, SalienceEvent


class EmotionModel(BaseModel):
    """Emotion kind and intensity"""
    kind: EmotionKind = EmotionKind.NEUTRAL
    intensity: float = Field(0.0, ge=0.0, le=1.0)


class WaveModel(BaseModel):
    """Memory wave as sent by clients.

    Amplitude and frequency are validated by the engine so that bad values
    surface as InvalidWaveError rather than a schema error.
    """
    amplitude: float
    frequency: float
    phase: float = 0.0
    decay_rate: float = 0.0
    emotion: EmotionModel = EmotionModel()
    content: str = ""

    def to_wave(self) -> MemoryWave:
        return MemoryWave(
            amplitude=self.amplitude,
            frequency=self.frequency,
            phase=self.phase,
            decay_rate=self.decay_rate,
            emotion=Emotion(self.emotion.kind, self.emotion.intensity),
            content=self.content,
        )


class SalienceEventModel(BaseModel):
    """Sensory salience event"""
    timestamp: int
    jitter_score: float = Field(ge=0.0, le=1.0)
    harmonic_score: float = Field(ge=0.0, le=1.0)
    salience_score: float = Field(ge=0.0, le=1.0)
    signal_type: SignalType = SignalType.UNKNOWN

    def to_event(self) -> SalienceEvent:
        return SalienceEvent(
            timestamp=self.timestamp,
            jitter_score=self.jitter_score,
            harmonic_score=self.harmonic_score,
            salience_score=self.salience_score,
            signal_type=self.signal_type,
        )

    @classmethod
    def from_event(cls, event: SalienceEvent) -> "SalienceEventModel":
        return cls(
            timestamp=event.timestamp,
            jitter_score=event.jitter_score,
            harmonic_score=event.harmonic_score,
            salience_score=event.salience_score,
            signal_type=event.signal_type,
        )


class InterferenceRequest(BaseModel):
    """Waves to superpose"""
    waves: list[WaveModel]
    at_time: float = 0.0
    duration: Optional[float] = Field(None, gt=0.0)
    include_samples: bool = False


class AttentionRequest(BaseModel):
    """Concurrent events competing for attention"""
    events: list[SalienceEventModel]
    seed: Optional[int] = None


class SegmentRequest(BaseModel):
    """Text to split into chunks"""
    text: str
    max_tokens: Optional[int] = Field(None, ge=1)


class SpeakRequest(BaseModel):
    """Text (or a wave) to speak"""
    text: Optional[str] = None
    wave: Optional[WaveModel] = None
    voice: Optional[str] = None


class ChunkModel(BaseModel):
    """One segmentation chunk"""
    text: str
    start: int
    end: int
    token_count: int
    style: VoiceStyle
    sequence_index: int
    forced_split: bool


class StateModel(BaseModel):
    """Engine state snapshot"""
    awake: bool
    consciousness_level: float
    growth_stage: int
    word_capacity: Optional[int]
    regulation_load: float
    last_energy: float
