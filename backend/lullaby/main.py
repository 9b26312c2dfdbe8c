"""Lullaby Backend - Main FastAPI Application.

This is the HTTP entry point. It:
- Sets up the FastAPI application
- Configures CORS middleware
- Maps Lullaby errors to JSON responses
- Checks the synthesis backend once at startup

Speech logic lives in:
- lullaby/core/ - Engine, waves, attention, regulation, segmentation
- lullaby/services/ - Kokoro backend and per-session engines
- lullaby/routers/api.py - REST endpoints
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .core import (
    AudioProcessingError,
    ConfigurationError,
    InvalidWaveError,
    LullabyError,
    ServiceUnavailableError,
    SynthesisBackend,
    SynthesisError,
    get_logger,
    setup_logging,
)
from .routers import api_router
from .services import KokoroService, SessionRegistry

setup_logging(level=settings.log_level)
logger = get_logger(__name__)

ERROR_STATUS = {
    InvalidWaveError: 422,
    ConfigurationError: 500,
    ServiceUnavailableError: 503,
    SynthesisError: 502,
    AudioProcessingError: 502,
}


async def lullaby_error_handler(request: Request, exc: LullabyError) -> JSONResponse:
    status = next(
        (code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind)),
        500,
    )
    logger.warning(f"{request.url.path} failed: {exc}")
    return JSONResponse(status_code=status, content=exc.to_dict())


def create_app(backend: Optional[SynthesisBackend] = None) -> FastAPI:
    """Build the application around a synthesis backend (Kokoro by default)."""
    backend = backend or KokoroService()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Lullaby is waking up...")
        logger.info(f"Kokoro: {settings.kokoro_base_url}")

        registry: SessionRegistry = app.state.registry
        await registry.get().initialize()

        logger.info("Lullaby is ready!")
        yield

        close = getattr(backend, "close", None)
        if close:
            await close()
        logger.info("Lullaby is going to sleep...")

    app = FastAPI(
        title="Lullaby",
        description="Emotion-modulated speech engine",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.registry = SessionRegistry(backend)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(LullabyError, lullaby_error_handler)
    app.include_router(api_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
