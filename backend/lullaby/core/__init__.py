"""Core module - the speech engine and its shared utilities."""
from .logging import get_logger, setup_logging
from .exceptions import (
    LullabyError,
    InvalidWaveError,
    ServiceUnavailableError,
    SynthesisError,
    AudioProcessingError,
    ConfigurationError,
)
from .constants import EmotionKind, SignalType, VoiceStyle
from .waves import Emotion, MemoryWave, SalienceEvent
from .interference import InterferenceResult, interfere
from .consciousness import ConsciousnessState
from .regulation import EmotionalRegulationGate
from .attention import AttentionArbitrator, AttentionDecision
from .modulation import SynthesisParams, wave_to_params, salience_to_wave
from .segmentation import Chunk, RegexTokenizer, TokenBudgetSegmenter, VoiceStyleSelector
from .text import normalize
from .audio import AudioSegment, encode_wav, decode_wav
from .engine import SpeechEngine, SpeechPlan, SynthesisBackend

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # Exceptions
    "LullabyError",
    "InvalidWaveError",
    "ServiceUnavailableError",
    "SynthesisError",
    "AudioProcessingError",
    "ConfigurationError",
    # Value types
    "EmotionKind",
    "SignalType",
    "VoiceStyle",
    "Emotion",
    "MemoryWave",
    "SalienceEvent",
    "ConsciousnessState",
    "InterferenceResult",
    "AttentionDecision",
    "SynthesisParams",
    "Chunk",
    "AudioSegment",
    # Engine components
    "interfere",
    "EmotionalRegulationGate",
    "AttentionArbitrator",
    "wave_to_params",
    "salience_to_wave",
    "RegexTokenizer",
    "TokenBudgetSegmenter",
    "VoiceStyleSelector",
    "normalize",
    "encode_wav",
    "decode_wav",
    "SpeechEngine",
    "SpeechPlan",
    "SynthesisBackend",
]
