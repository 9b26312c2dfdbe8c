"""Speech engine: one speaker's consciousness, emotions and voice.

The engine owns a ConsciousnessState and composes the pure pieces around it:

    salience events -> attention -> waves -> regulation gate
        -> interference / modulation -> segmentation -> synthesis backend

Only wake(), sleep() and grow() (plus the passage of time on the engine
clock) change consciousness, and only admit() changes the regulation load.
An engine is single-writer: callers serving several requests at once must
serialize access (see services.sessions).
"""
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Sequence

from .attention import AttentionArbitrator
from .audio import AudioSegment, concatenate
from .constants import BIT_DEPTH, CHANNELS, VoiceStyle
from .consciousness import ConsciousnessState
from .interference import InterferenceResult, interfere
from .logging import get_logger
from .modulation import (
    SynthesisParams,
    babble_params,
    babble_text,
    resting_params,
    salience_to_wave,
    wave_to_params,
)
from .regulation import EmotionalRegulationGate
from .segmentation import Chunk, RegexTokenizer, TokenBudgetSegmenter, VoiceStyleSelector
from .text import normalize
from .waves import MemoryWave, SalienceEvent

logger = get_logger(__name__)


class SynthesisBackend(Protocol):
    """What the engine needs from a text-to-speech backend."""

    async def synthesize(
        self,
        text: str,
        style: VoiceStyle,
        params: SynthesisParams,
        voice: Optional[str] = None,
    ) -> AudioSegment:
        ...

    async def check_health(self) -> bool:
        ...


@dataclass
class SpeechPlan:
    """Ordered chunks plus the prosody they will be spoken with."""
    text: str
    chunks: list[Chunk]
    params: SynthesisParams
    warnings: list[str] = field(default_factory=list)


class SpeechEngine:
    """Turns text and memory waves into speech for a single speaker."""

    def __init__(
        self,
        backend: SynthesisBackend,
        settings=None,
        clock: Callable[[], float] = time.monotonic,
        seed: Optional[int] = None,
    ):
        """
        Args:
            backend: Synthesis backend called once per chunk
            settings: Tuning; defaults to the process Settings
            clock: Monotonic time source in seconds
            seed: Seeds attention and babble randomness
        """
        if settings is None:
            from ..config import settings as default_settings
            settings = default_settings

        self.settings = settings
        self.backend = backend
        self.state = ConsciousnessState()
        self.gate = EmotionalRegulationGate(
            saturation_threshold=settings.saturation_threshold,
            babble_threshold=settings.babble_threshold,
            decay_rate=settings.regulation_decay_rate,
        )
        self.arbitrator = AttentionArbitrator(
            weights=settings.attention_weights,
            autonomy_ratio=settings.autonomy_ratio,
            seed=seed,
        )
        self.segmenter = TokenBudgetSegmenter(
            tokenizer=RegexTokenizer(),
            selector=VoiceStyleSelector(settings.style_short_max, settings.style_medium_max),
            short_text_threshold=settings.short_text_threshold,
        )
        self.last_energy = 0.0
        self._rng = random.Random(seed)
        self._clock = clock
        self._epoch = clock()
        self._last_tick = 0.0

    # ============== Time ==============

    def now(self) -> float:
        """Seconds since the engine was created."""
        return self._clock() - self._epoch

    def _tick(self) -> float:
        now = self.now()
        elapsed = max(0.0, now - self._last_tick)
        if elapsed:
            self.state.elapse(elapsed, self.settings.sleep_decay_rate)
        self._last_tick = max(now, self._last_tick)
        return now

    # ============== Lifecycle ==============

    async def initialize(self) -> bool:
        """Check the backend once at startup. A down backend is not fatal."""
        healthy = await self.backend.check_health()
        if healthy:
            logger.info("Synthesis backend is ready")
        else:
            logger.warning("Synthesis backend is not reachable; speech will fail until it is")
        return healthy

    def wake(self) -> None:
        self._tick()
        self.state.wake()

    def sleep(self) -> None:
        self._tick()
        self.state.sleep()

    def grow(self) -> None:
        self._tick()
        self.state.grow()

    def snapshot(self) -> dict:
        """Current state as plain data."""
        now = self._tick()
        return {
            "awake": self.state.awake,
            "consciousness_level": self.state.consciousness_level,
            "growth_stage": self.state.growth_stage,
            "word_capacity": self.state.word_capacity,
            "regulation_load": self.gate.load(self.state, now),
            "last_energy": self.last_energy,
        }

    def audio_params(self) -> tuple[int, int, int]:
        """(sample_rate, channels, bit_depth) of produced audio."""
        return self.settings.sample_rate, CHANNELS, BIT_DEPTH

    # ============== Emotion & attention ==============

    def admit(self, wave: MemoryWave) -> bool:
        """Run a wave through the regulation gate."""
        now = self._tick()
        return self.gate.admit(wave, self.state, now)

    def interfere(
        self,
        waves: Sequence[MemoryWave],
        at_time: float = 0.0,
        duration: Optional[float] = None,
    ) -> InterferenceResult:
        """Superpose waves; the result's energy feeds later modulation."""
        result = interfere(
            waves,
            at_time=at_time,
            duration=self.settings.interference_window if duration is None else duration,
            sample_rate=self.settings.sample_rate,
        )
        self.last_energy = result.combined_energy
        if result.dominant is not None:
            logger.debug(
                f"Dominant wave #{result.dominant_index} "
                f"({result.dominant.emotion.kind.value}), energy {result.combined_energy:.3f}"
            )
        return result

    def decide_attention(
        self,
        events: Sequence[SalienceEvent],
        rng_seed: Optional[int] = None,
    ) -> Optional[SalienceEvent]:
        return self.arbitrator.decide(events, rng_seed)

    def process_salience(self, event: SalienceEvent) -> Optional[MemoryWave]:
        """Turn an attended event into a wave; None if the gate suppresses it."""
        wave = salience_to_wave(event)
        if self.admit(wave):
            return wave
        return None

    def wave_to_params(self, wave: MemoryWave) -> SynthesisParams:
        self._tick()
        return wave_to_params(wave, self.state, self.last_energy)

    # ============== Speech ==============

    def plan(
        self,
        text: str,
        params: Optional[SynthesisParams] = None,
        enforce_capacity: bool = True,
    ) -> SpeechPlan:
        """Normalize, trim to vocabulary capacity, and segment text.

        Args:
            text: Raw text to speak
            params: Prosody; resting prosody when None
            enforce_capacity: Trim to the growth stage's word capacity

        Returns:
            SpeechPlan with ordered chunks and all warnings raised on the way
        """
        self._tick()
        params = params or resting_params(self.state)
        clean, warnings = normalize(text)

        capacity = self.state.word_capacity
        if enforce_capacity and capacity is not None:
            words = clean.split(" ")
            if len(words) > capacity:
                clean = " ".join(words[:capacity])
                warning = (
                    f"Growth stage {self.state.growth_stage} speaks at most "
                    f"{capacity} word(s); dropped {len(words) - capacity}"
                )
                logger.info(warning)
                warnings.append(warning)

        chunks, split_warnings = self.segmenter.segment_with_warnings(
            clean, self.settings.max_tokens, params.speaking_rate
        )
        warnings.extend(split_warnings)
        return SpeechPlan(text=clean, chunks=chunks, params=params, warnings=warnings)

    async def speak(
        self,
        text: str,
        params: Optional[SynthesisParams] = None,
        voice: Optional[str] = None,
        enforce_capacity: bool = True,
    ) -> tuple[AudioSegment, list[str]]:
        """Synthesize text chunk by chunk and join the audio in order.

        Backend errors propagate unchanged; nothing is retried.
        """
        plan = self.plan(text, params, enforce_capacity)
        segments = []
        for chunk in plan.chunks:
            segment = await self.backend.synthesize(chunk.text, chunk.style, plan.params, voice)
            segments.append(segment)

        audio = concatenate(segments, self.settings.sample_rate)
        logger.debug(
            f"Spoke {len(plan.chunks)} chunk(s), {audio.duration:.2f}s of audio"
        )
        return audio, plan.warnings

    async def speak_wave(
        self,
        wave: MemoryWave,
        voice: Optional[str] = None,
    ) -> Optional[tuple[AudioSegment, list[str]]]:
        """Speak a wave's content with its own prosody.

        While asleep, a wave the gate turns away is murmured as attenuated
        babble instead. While awake, a saturated gate returns None.
        """
        if self.admit(wave):
            return await self.speak(wave.content, self.wave_to_params(wave), voice)

        if not self.state.awake:
            params = babble_params(self.state, self.wave_to_params(wave))
            audio, warnings = await self.speak(wave.content, params, voice)
            warnings.append(
                f"Asleep: {wave.emotion.kind.value} wave attenuated to babble"
            )
            return audio, warnings

        logger.info(f"Suppressed {wave.emotion.kind.value} wave: regulation saturated")
        return None

    async def babble(self, voice: Optional[str] = None) -> tuple[AudioSegment, list[str]]:
        """Speak a few random syllables with indistinct delivery."""
        text = babble_text(self._rng)
        return await self.speak(
            text, babble_params(self.state), voice, enforce_capacity=False
        )
