"""Lullaby Services

External collaborators of the speech engine:
- Kokoro (synthesis backend)
- Session registry (one engine per conversation)

Usage:
    from lullaby.services import KokoroService, SessionRegistry

    registry = SessionRegistry(KokoroService())
"""

from .base import BaseService
from .kokoro import KokoroService
from .sessions import SessionRegistry, DEFAULT_SESSION

__all__ = [
    "BaseService",
    "KokoroService",
    "SessionRegistry",
    "DEFAULT_SESSION",
]
