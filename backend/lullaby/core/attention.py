"""Attention arbitration between simultaneous sensory events.

Each event gets a composite score favouring stable (low jitter), tonal (high
harmonic) and intrinsically salient signals. With probability
``autonomy_ratio`` the arbitrator follows the score; otherwise it picks one
of the other events uniformly at random. The top event is therefore chosen
exactly ``autonomy_ratio`` of the time whenever there is an alternative.

Randomness comes from an injected ``random.Random`` so decisions are
reproducible under a seed.
"""
import math
import random
from dataclasses import dataclass
from typing import Optional, Sequence

from .constants import SCORE_EPSILON
from .exceptions import ConfigurationError
from .logging import get_logger
from .waves import SalienceEvent

logger = get_logger(__name__)

DEFAULT_WEIGHTS = (0.3, 0.3, 0.4)
DEFAULT_AUTONOMY_RATIO = 0.7


@dataclass(frozen=True)
class AttentionDecision:
    """The event attention landed on and how it got there.

    Attributes:
        event: The chosen event
        index: Its position in the input sequence
        score: Its composite score
        deliberate: True when the pick followed the score, False when it
            was a free random choice
    """
    event: SalienceEvent
    index: int
    score: float
    deliberate: bool


class AttentionArbitrator:
    """Selects one salience event to promote to conscious processing."""

    def __init__(
        self,
        weights: Sequence[float] = DEFAULT_WEIGHTS,
        autonomy_ratio: float = DEFAULT_AUTONOMY_RATIO,
        seed: Optional[int] = None,
    ):
        """
        Args:
            weights: (harmonic, stability, salience) weights, summing to 1
            autonomy_ratio: Probability of following the score
            seed: Seed for the arbitrator's own random source; None draws
                from OS entropy

        Raises:
            ConfigurationError: On invalid weights or ratio
        """
        weights = tuple(float(w) for w in weights)
        if len(weights) != 3 or any(w < 0 for w in weights):
            raise ConfigurationError(
                "attention_weights", str(weights), "three non-negative numbers"
            )
        if not math.isclose(sum(weights), 1.0, abs_tol=1e-6):
            raise ConfigurationError(
                "attention_weights", str(weights), "weights summing to 1"
            )
        if not 0.0 <= autonomy_ratio <= 1.0:
            raise ConfigurationError(
                "autonomy_ratio", str(autonomy_ratio), "a probability in [0, 1]"
            )

        self.weights = weights
        self.autonomy_ratio = autonomy_ratio
        self._rng = random.Random(seed)

    def score(self, event: SalienceEvent) -> float:
        w_harmonic, w_stability, w_salience = self.weights
        return (
            w_harmonic * event.harmonic_score
            + w_stability * (1.0 - event.jitter_score)
            + w_salience * event.salience_score
        )

    def top_index(self, events: Sequence[SalienceEvent]) -> int:
        """Index of the best-scoring event; ties go to the earliest timestamp."""
        best = 0
        best_score = self.score(events[0])
        for index in range(1, len(events)):
            score = self.score(events[index])
            if score > best_score + SCORE_EPSILON:
                best, best_score = index, score
            elif abs(score - best_score) <= SCORE_EPSILON and (
                events[index].timestamp < events[best].timestamp
            ):
                best, best_score = index, score
        return best

    def arbitrate(
        self,
        events: Sequence[SalienceEvent],
        rng_seed: Optional[int] = None,
    ) -> Optional[AttentionDecision]:
        """Pick an event and report how it was picked.

        Args:
            events: Concurrent candidates
            rng_seed: Seeds a private random source for this call only

        Returns:
            The decision, or None for no events
        """
        if not events:
            return None

        rng = random.Random(rng_seed) if rng_seed is not None else self._rng

        top = self.top_index(events)
        if len(events) == 1 or rng.random() < self.autonomy_ratio:
            index = top
            deliberate = True
        else:
            # Uniform over the n - 1 events the score did not favour
            index = rng.randrange(len(events) - 1)
            if index >= top:
                index += 1
            deliberate = False

        event = events[index]
        decision = AttentionDecision(
            event=event,
            index=index,
            score=self.score(event),
            deliberate=deliberate,
        )
        logger.debug(
            f"Attention -> {event.signal_type.value} "
            f"(score {decision.score:.3f}, {'deliberate' if deliberate else 'free'})"
        )
        return decision

    def decide(
        self,
        events: Sequence[SalienceEvent],
        rng_seed: Optional[int] = None,
    ) -> Optional[SalienceEvent]:
        """Pick the event attention should land on, None if there are none."""
        decision = self.arbitrate(events, rng_seed)
        return decision.event if decision else None
