"""Per-session speech engines.

Each conversation gets its own SpeechEngine, so consciousness, growth and
regulation load never leak between speakers. Engines are single-writer; the
registry hands out one asyncio.Lock per session and callers hold it for the
whole operation.

Usage:
    async with registry.session("kitchen") as engine:
        audio, warnings = await engine.speak("Good morning!")
"""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from ..core import SpeechEngine, SynthesisBackend, get_logger

logger = get_logger(__name__)

DEFAULT_SESSION = "default"


class SessionRegistry:
    """Creates engines on first use and serializes access to each."""

    def __init__(
        self,
        backend: SynthesisBackend,
        engine_factory: Optional[Callable[[SynthesisBackend], SpeechEngine]] = None,
    ):
        self.backend = backend
        self._factory = engine_factory or SpeechEngine
        self._engines: dict[str, SpeechEngine] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._engines)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._engines

    def get(self, session_id: str = DEFAULT_SESSION) -> SpeechEngine:
        """Engine for a session, created on first access."""
        engine = self._engines.get(session_id)
        if engine is None:
            engine = self._factory(self.backend)
            self._engines[session_id] = engine
            self._locks[session_id] = asyncio.Lock()
            logger.info(f"Created engine for session '{session_id}'")
        return engine

    @asynccontextmanager
    async def session(self, session_id: str = DEFAULT_SESSION) -> AsyncIterator[SpeechEngine]:
        """Hold a session's lock while using its engine."""
        engine = self.get(session_id)
        async with self._locks[session_id]:
            yield engine

    def drop(self, session_id: str) -> bool:
        """Forget a session. Returns False if it did not exist."""
        self._locks.pop(session_id, None)
        return self._engines.pop(session_id, None) is not None
