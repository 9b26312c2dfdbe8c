"""Wave-to-speech modulation bridge.

Turns the winning memory wave into prosody multipliers for the synthesis
backend:

- pitch rises with frequency (440 Hz is neutral) and with intensity
- speaking rate follows the emotion kind and slows as consciousness fades
- energy grows with amplitude and with the latest interference energy
- clarity tracks consciousness; below BABBLE_CLARITY delivery turns to babble
- confusion adds phase jitter proportional to the wave's phase offset

Attended sensory events are translated into waves by salience_to_wave so
they can go through the same path.
"""
import math
import random
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from .constants import BASELINE_FREQUENCY, EmotionKind, SignalType
from .consciousness import ConsciousnessState
from .waves import Emotion, MemoryWave, SalienceEvent

PITCH_EXPONENT = 0.25
PITCH_INTENSITY_GAIN = 0.2
ENERGY_COUPLING = 0.5
CONFUSION_JITTER_GAIN = 0.5
BABBLE_CLARITY = 0.3

# Speaking-rate bias per emotion, scaled by intensity
EMOTION_RATE_BIAS = {
    EmotionKind.NEUTRAL: 0.0,
    EmotionKind.JOY: 0.15,
    EmotionKind.LOVE: -0.1,
    EmotionKind.CURIOSITY: 0.05,
    EmotionKind.CONFUSION: -0.15,
    EmotionKind.SADNESS: -0.2,
    EmotionKind.FEAR: 0.2,
}

BABBLE_SYLLABLES = ("ba", "ma", "da", "ga", "na", "pa")


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class SynthesisParams:
    """Prosody multipliers handed to the backend alongside the text.

    Attributes:
        pitch_shift: Pitch multiplier, 1.0 = unchanged
        speaking_rate: Speed multiplier, 1.0 = normal
        energy_gain: Loudness multiplier
        clarity: Articulation crispness in [0, 1]
        phase_jitter: Timing irregularity in [0, 1]
        babble: Delivery should be indistinct murmuring
    """
    pitch_shift: float = 1.0
    speaking_rate: float = 1.0
    energy_gain: float = 1.0
    clarity: float = 1.0
    phase_jitter: float = 0.0
    babble: bool = False


def phase_deviation(phase: float) -> float:
    """Distance of a phase from 0, normalised to [0, 1] (pi -> 1)."""
    wrapped = phase % (2 * math.pi)
    return min(wrapped, 2 * math.pi - wrapped) / math.pi


def wave_to_params(
    wave: MemoryWave,
    state: ConsciousnessState,
    combined_energy: float = 0.0,
) -> SynthesisParams:
    """Derive prosody for a wave under the current consciousness state.

    Args:
        wave: The wave driving output
        state: Current consciousness state
        combined_energy: RMS energy of the most recent interference

    Raises:
        InvalidWaveError: If the wave is invalid
    """
    wave.validate()
    intensity = wave.emotion.intensity
    kind = wave.emotion.kind
    level = _clamp(state.consciousness_level, 0.0, 1.0)

    pitch = (wave.frequency / BASELINE_FREQUENCY) ** PITCH_EXPONENT
    pitch *= 1.0 + PITCH_INTENSITY_GAIN * intensity

    rate = 1.0 + EMOTION_RATE_BIAS[kind] * intensity
    rate *= 0.7 + 0.3 * level

    energy = math.sqrt(wave.amplitude) * (1.0 + ENERGY_COUPLING * max(0.0, combined_energy))

    jitter = 0.0
    if kind is EmotionKind.CONFUSION:
        jitter = CONFUSION_JITTER_GAIN * phase_deviation(wave.phase)

    return SynthesisParams(
        pitch_shift=_clamp(pitch, 0.5, 2.0),
        speaking_rate=_clamp(rate, 0.5, 2.0),
        energy_gain=_clamp(energy, 0.1, 3.0),
        clarity=level,
        phase_jitter=jitter,
        babble=level < BABBLE_CLARITY,
    )


def resting_params(state: ConsciousnessState) -> SynthesisParams:
    """Prosody when no wave is driving output."""
    level = _clamp(state.consciousness_level, 0.0, 1.0)
    return SynthesisParams(
        speaking_rate=0.7 + 0.3 * level,
        clarity=level,
        babble=level < BABBLE_CLARITY,
    )


def babble_params(state: ConsciousnessState, source: Optional[SynthesisParams] = None) -> SynthesisParams:
    """Attenuated, indistinct version of source (or of resting prosody)."""
    source = source or resting_params(state)
    return replace(
        source,
        speaking_rate=_clamp(source.speaking_rate * 0.8, 0.5, 2.0),
        energy_gain=_clamp(source.energy_gain * 0.3, 0.1, 3.0),
        clarity=min(source.clarity, BABBLE_CLARITY / 2),
        babble=True,
    )


def _emotion_for_event(event: SalienceEvent) -> Emotion:
    if event.jitter_score > 0.7:
        return Emotion(EmotionKind.CONFUSION, event.jitter_score)

    if event.signal_type is SignalType.VOICE:
        return Emotion(EmotionKind.JOY, event.harmonic_score)
    if event.signal_type is SignalType.MUSIC:
        return Emotion(EmotionKind.CURIOSITY, event.harmonic_score)
    if event.signal_type is SignalType.ENVIRONMENTAL:
        return Emotion(EmotionKind.CURIOSITY, 0.5 * event.salience_score)
    if event.signal_type is SignalType.UNKNOWN:
        return Emotion(EmotionKind.CONFUSION, event.salience_score)
    raise ValueError(f"Unhandled signal type: {event.signal_type}")


SIGNAL_REMARKS = {
    SignalType.VOICE: "Who is that?",
    SignalType.MUSIC: "Music!",
    SignalType.ENVIRONMENTAL: "What was that?",
    SignalType.UNKNOWN: "Huh?",
}


def salience_to_wave(event: SalienceEvent) -> MemoryWave:
    """Express an attended sensory event as a memory wave.

    Stable, tonal signals become warm low-phase waves; jittery ones become
    confused, out-of-phase waves.
    """
    emotion = _emotion_for_event(event)
    return MemoryWave(
        amplitude=0.5 + 1.5 * event.salience_score,
        frequency=BASELINE_FREQUENCY * (0.5 + event.harmonic_score),
        phase=math.pi * event.jitter_score,
        decay_rate=0.1 + 0.4 * event.jitter_score,
        emotion=emotion,
        content=SIGNAL_REMARKS[event.signal_type],
    )


def babble_text(
    rng: random.Random,
    words: int = 3,
    syllables: Sequence[str] = BABBLE_SYLLABLES,
) -> str:
    """Reduplicated syllables like "ba-ba ma-ma da"."""
    parts = []
    for _ in range(words):
        syllable = rng.choice(syllables)
        parts.append("-".join([syllable] * rng.randint(1, 2)))
    return " ".join(parts)
