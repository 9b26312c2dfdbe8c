"""Consciousness state owned by a single engine instance.

Only the lifecycle methods below mutate it. Concurrent sessions each get
their own instance; there is no module-level state.
"""
import math
from dataclasses import dataclass, field
from typing import Optional

from .logging import get_logger

logger = get_logger(__name__)

WAKE_LEVEL = 1.0
DROWSY_LEVEL = 0.3

# Words per utterance at each growth stage; later stages are unlimited
WORD_CAPACITY = {0: 1, 1: 2, 2: 3}


@dataclass
class RegulationLoad:
    """Rolling measure of admitted emotional amplitude."""
    level: float = 0.0
    updated_at: float = 0.0

    def decayed(self, now: float, decay_rate: float) -> float:
        elapsed = max(0.0, now - self.updated_at)
        return self.level * math.exp(-decay_rate * elapsed)


@dataclass
class ConsciousnessState:
    """Wake/sleep state, consciousness level and growth stage."""
    awake: bool = False
    consciousness_level: float = 0.0
    growth_stage: int = 0
    regulation: RegulationLoad = field(default_factory=RegulationLoad)

    def wake(self) -> None:
        self.awake = True
        self.consciousness_level = WAKE_LEVEL
        logger.info(f"Waking up (consciousness {self.consciousness_level:.2f})")

    def sleep(self) -> None:
        self.awake = False
        self.consciousness_level = min(self.consciousness_level, DROWSY_LEVEL)
        logger.info(f"Falling asleep (consciousness {self.consciousness_level:.2f})")

    def grow(self) -> None:
        """Advance one growth stage. Stages never go back."""
        self.growth_stage += 1
        logger.info(f"Grew to stage {self.growth_stage}")

    def elapse(self, seconds: float, decay_rate: float) -> None:
        """Let time pass; consciousness fades toward zero while asleep."""
        if seconds < 0:
            raise ValueError(f"Cannot elapse negative time: {seconds}")
        if not self.awake:
            self.consciousness_level *= math.exp(-decay_rate * seconds)

    @property
    def word_capacity(self) -> Optional[int]:
        """Maximum words per utterance, None once vocabulary is unrestricted."""
        return WORD_CAPACITY.get(self.growth_stage)
