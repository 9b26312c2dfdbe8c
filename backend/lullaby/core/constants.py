"""Constants for Lullaby - emotion kinds, signal types, voice styles.

Using string enums for JSON serialization compatibility while providing
IDE autocomplete and preventing typos.
"""
from enum import Enum


class EmotionKind(str, Enum):
    """Affect carried by a memory wave."""
    NEUTRAL = "neutral"
    JOY = "joy"
    LOVE = "love"
    CURIOSITY = "curiosity"
    CONFUSION = "confusion"
    SADNESS = "sadness"
    FEAR = "fear"


class SignalType(str, Enum):
    """Classification of a sensory salience event."""
    VOICE = "voice"
    MUSIC = "music"
    ENVIRONMENTAL = "environmental"
    UNKNOWN = "unknown"


class VoiceStyle(str, Enum):
    """Style bucket chosen from a chunk's token count."""
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

    @property
    def speed_factor(self) -> float:
        """Speed correction sent to the backend for this bucket.

        Very short chunks drag when spoken at the base rate; long ones clip.
        """
        return STYLE_SPEED_FACTORS[self]


STYLE_SPEED_FACTORS = {
    VoiceStyle.SHORT: 1.05,
    VoiceStyle.MEDIUM: 1.0,
    VoiceStyle.LONG: 0.95,
}


# Kokoro output format
SAMPLE_RATE = 24000
CHANNELS = 1
BIT_DEPTH = 16

# Modulation baseline: a 440 Hz wave with no affect leaves pitch unchanged
BASELINE_FREQUENCY = 440.0

# Ties in dominance/attention scores closer than this are treated as equal
SCORE_EPSILON = 1e-9
