"""REST API endpoints for Lullaby.

Every endpoint works on one session's engine (``?session=...``, default
"default") and holds that session's lock for the duration of the call:
- Health and voices
- Lifecycle (wake, sleep, grow) and state
- Interference, attention, regulation, modulation
- Normalization, segmentation and speech
"""
import json
from dataclasses import asdict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from ..core import get_logger, normalize
from ..core.audio import encode_wav
from ..models.schemas import (
    AttentionRequest,
    ChunkModel,
    InterferenceRequest,
    SalienceEventModel,
    SegmentRequest,
    SpeakRequest,
    StateModel,
    WaveModel,
)
from ..services.sessions import DEFAULT_SESSION, SessionRegistry

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["api"])

WARNINGS_HEADER = "X-Lullaby-Warnings"


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


# ============== Health & Voices ==============

@router.get("/health")
async def health_check(registry: SessionRegistry = Depends(get_registry)):
    """Health check endpoint"""
    return {"status": "healthy", "name": "Lullaby", "sessions": len(registry)}


@router.get("/voices")
async def list_voices(registry: SessionRegistry = Depends(get_registry)):
    """List voices offered by the synthesis backend"""
    list_backend_voices = getattr(registry.backend, "list_voices", None)
    voices = await list_backend_voices() if list_backend_voices else []
    return {"voices": voices}


# ============== Lifecycle ==============

@router.get("/state", response_model=StateModel)
async def get_state(
    session: str = DEFAULT_SESSION,
    registry: SessionRegistry = Depends(get_registry),
):
    """Current consciousness and regulation state"""
    async with registry.session(session) as engine:
        return engine.snapshot()


@router.post("/wake", response_model=StateModel)
async def wake(
    session: str = DEFAULT_SESSION,
    registry: SessionRegistry = Depends(get_registry),
):
    async with registry.session(session) as engine:
        engine.wake()
        return engine.snapshot()


@router.post("/sleep", response_model=StateModel)
async def sleep(
    session: str = DEFAULT_SESSION,
    registry: SessionRegistry = Depends(get_registry),
):
    async with registry.session(session) as engine:
        engine.sleep()
        return engine.snapshot()


@router.post("/grow", response_model=StateModel)
async def grow(
    session: str = DEFAULT_SESSION,
    registry: SessionRegistry = Depends(get_registry),
):
    """Advance one growth stage (cannot be undone)"""
    async with registry.session(session) as engine:
        engine.grow()
        return engine.snapshot()


# ============== Emotion & Attention ==============

@router.post("/interfere")
async def interfere(
    request: InterferenceRequest,
    session: str = DEFAULT_SESSION,
    registry: SessionRegistry = Depends(get_registry),
):
    """Superpose waves and report the dominant one"""
    waves = [w.to_wave() for w in request.waves]
    async with registry.session(session) as engine:
        result = engine.interfere(waves, request.at_time, request.duration)

    body = {
        "dominant_index": result.dominant_index,
        "dominant": request.waves[result.dominant_index] if not result.is_empty else None,
        "combined_energy": result.combined_energy,
        "sample_rate": result.sample_rate,
        "sample_count": len(result.envelope_samples),
    }
    if request.include_samples:
        body["samples"] = result.envelope_samples.tolist()
    return body


@router.post("/attention")
async def decide_attention(
    request: AttentionRequest,
    session: str = DEFAULT_SESSION,
    registry: SessionRegistry = Depends(get_registry),
):
    """Let the engine choose which event to attend to"""
    events = [e.to_event() for e in request.events]
    async with registry.session(session) as engine:
        decision = engine.arbitrator.arbitrate(events, request.seed)

    if decision is None:
        return {"event": None}
    return {
        "event": SalienceEventModel.from_event(decision.event),
        "index": decision.index,
        "score": decision.score,
        "deliberate": decision.deliberate,
    }


@router.post("/admit")
async def admit(
    wave: WaveModel,
    session: str = DEFAULT_SESSION,
    registry: SessionRegistry = Depends(get_registry),
):
    """Run a wave through the regulation gate"""
    async with registry.session(session) as engine:
        admitted = engine.admit(wave.to_wave())
        return {"admitted": admitted, "state": engine.snapshot()}


@router.post("/params")
async def synthesis_params(
    wave: WaveModel,
    session: str = DEFAULT_SESSION,
    registry: SessionRegistry = Depends(get_registry),
):
    """Prosody the engine would use for a wave"""
    async with registry.session(session) as engine:
        return asdict(engine.wave_to_params(wave.to_wave()))


# ============== Text & Speech ==============

@router.post("/normalize")
async def normalize_text(request: SegmentRequest):
    text, warnings = normalize(request.text)
    return {"text": text, "warnings": warnings}


@router.post("/segment")
async def segment(
    request: SegmentRequest,
    session: str = DEFAULT_SESSION,
    registry: SessionRegistry = Depends(get_registry),
):
    """Normalize text and split it into the chunks sent to the backend.

    Chunk offsets refer to the normalized text, which is returned too.
    """
    text, warnings = normalize(request.text)
    async with registry.session(session) as engine:
        max_tokens = request.max_tokens or engine.settings.max_tokens
        chunks, split_warnings = engine.segmenter.segment_with_warnings(text, max_tokens)

    warnings.extend(split_warnings)
    return {
        "text": text,
        "chunks": [ChunkModel(**asdict(chunk)) for chunk in chunks],
        "warnings": warnings,
    }


@router.post("/speak")
async def speak(
    request: SpeakRequest,
    session: str = DEFAULT_SESSION,
    registry: SessionRegistry = Depends(get_registry),
):
    """Speak text or a wave; returns WAV audio.

    Warnings travel in the X-Lullaby-Warnings header as a JSON list. A wave
    suppressed by the regulation gate yields 204 No Content.
    """
    async with registry.session(session) as engine:
        if request.wave is not None:
            result = await engine.speak_wave(request.wave.to_wave(), request.voice)
        elif request.text is not None:
            result = await engine.speak(request.text, voice=request.voice)
        else:
            return Response(status_code=422, content="Provide text or wave")

    if result is None:
        return Response(status_code=204, headers={WARNINGS_HEADER: json.dumps(["Suppressed"])})

    audio, warnings = result
    return Response(
        content=encode_wav(audio),
        media_type="audio/wav",
        headers={WARNINGS_HEADER: json.dumps(warnings)},
    )
