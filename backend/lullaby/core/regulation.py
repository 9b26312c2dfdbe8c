"""Emotional regulation gate.

Keeps simultaneous high-amplitude emotional waves from saturating the
modulation parameters. Each admitted wave adds ``amplitude * intensity`` to a
load carried in ConsciousnessState; the load decays with the same exponential
law as a wave's envelope. A candidate that would push the load past the
saturation threshold is suppressed.

While asleep only low-intensity "babble" waves get through, so output drifts
to sleepy murmuring instead of going silent.
"""
from .consciousness import ConsciousnessState
from .logging import get_logger
from .waves import MemoryWave

logger = get_logger(__name__)


class EmotionalRegulationGate:
    """Admits or suppresses candidate waves based on saturation."""

    def __init__(
        self,
        saturation_threshold: float = 5.0,
        babble_threshold: float = 0.2,
        decay_rate: float = 0.1,
    ):
        self.saturation_threshold = saturation_threshold
        self.babble_threshold = babble_threshold
        self.decay_rate = decay_rate

    def load(self, state: ConsciousnessState, now: float = 0.0) -> float:
        """Current decayed regulation load, without mutating state."""
        return state.regulation.decayed(now, self.decay_rate)

    def admit(
        self,
        candidate: MemoryWave,
        state: ConsciousnessState,
        now: float = 0.0,
    ) -> bool:
        """Decide whether a candidate wave may drive output.

        Args:
            candidate: The wave asking to be expressed
            state: Consciousness state holding the regulation load
            now: Current time on the same clock as previous admissions

        Returns:
            True if admitted (load updated), False if suppressed (state
            untouched).

        Raises:
            InvalidWaveError: If the candidate is invalid
        """
        candidate.validate()

        if not state.awake and candidate.emotion.intensity >= self.babble_threshold:
            logger.debug(
                f"Asleep: suppressed {candidate.emotion.kind.value} wave "
                f"(intensity {candidate.emotion.intensity:.2f})"
            )
            return False

        current = self.load(state, now)
        projected = current + candidate.contribution
        if projected > self.saturation_threshold:
            logger.debug(
                f"Saturated: load {current:.3f} + {candidate.contribution:.3f} "
                f"> {self.saturation_threshold}"
            )
            return False

        state.regulation.level = projected
        state.regulation.updated_at = max(now, state.regulation.updated_at)
        return True
