"""Kokoro TTS Service - synthesis backend via OpenAI-compatible API

Uses a Kokoro-FastAPI server, which provides an OpenAI-compatible TTS
endpoint. Kokoro itself only understands voice and speed, so the remaining
prosody (pitch, timing jitter, clarity, babble, energy gain) is applied to
the returned samples here.
"""
from typing import Optional

import httpx
import numpy as np

from ..config import settings
from ..core import get_logger
from ..core.audio import AudioSegment, decode_wav
from ..core.constants import VoiceStyle
from ..core.exceptions import ServiceUnavailableError, SynthesisError
from ..core.modulation import SynthesisParams
from .base import BaseService

logger = get_logger(__name__)

# Width of the smoothing window used to blur articulation at low clarity
MUFFLE_WIDTH = 48

# Timing jitter: peak warp in samples at phase_jitter == 1, and the width of
# the window that smooths the random warp into a slow wobble
JITTER_DEPTH = 96
JITTER_SMOOTHING = 480
JITTER_SEED = 8


class KokoroService(BaseService):
    """Kokoro TTS backend using the OpenAI-compatible API"""

    # Fallback voice list (af_ = American Female, am_ = American Male, ...)
    VOICES = [
        {"id": "af_sky", "name": "Sky (American Female)", "language": "en_US", "gender": "female"},
        {"id": "af_bella", "name": "Bella (American Female)", "language": "en_US", "gender": "female"},
        {"id": "af_heart", "name": "Heart (American Female)", "language": "en_US", "gender": "female"},
        {"id": "af_nicole", "name": "Nicole (American Female)", "language": "en_US", "gender": "female"},
        {"id": "am_adam", "name": "Adam (American Male)", "language": "en_US", "gender": "male"},
        {"id": "am_michael", "name": "Michael (American Male)", "language": "en_US", "gender": "male"},
        {"id": "bf_emma", "name": "Emma (British Female)", "language": "en_GB", "gender": "female"},
        {"id": "bm_george", "name": "George (British Male)", "language": "en_GB", "gender": "male"},
    ]

    PREFIXES = {
        "af": ("en_US", "American Female"),
        "am": ("en_US", "American Male"),
        "bf": ("en_GB", "British Female"),
        "bm": ("en_GB", "British Male"),
    }

    def __init__(
        self,
        base_url: Optional[str] = None,
        default_voice: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(
            "Kokoro",
            base_url or settings.kokoro_base_url,
            timeout or settings.kokoro_timeout,
        )
        self.default_voice = default_voice or settings.kokoro_default_voice

    def _get_recovery_suggestion(self) -> str:
        return "Is the Kokoro container running? Check: docker ps | grep kokoro"

    async def _health_check(self) -> bool:
        response = await self._http_get("/health")
        return response.status_code == 200

    async def synthesize(
        self,
        text: str,
        style: VoiceStyle,
        params: SynthesisParams,
        voice: Optional[str] = None,
    ) -> AudioSegment:
        """Synthesize one chunk.

        Args:
            text: Chunk text
            style: Style bucket of the chunk
            params: Prosody from the driving wave
            voice: Kokoro voice ID (e.g., "af_sky", "bf_emma")

        Returns:
            Mono float samples with prosody applied

        Raises:
            SynthesisError: If Kokoro rejects the request
            ServiceUnavailableError: If Kokoro is not reachable
            AudioProcessingError: If the returned audio cannot be decoded
        """
        voice = voice or self.default_voice
        speed = min(4.0, max(0.25, style.speed_factor * params.speaking_rate))

        payload = {
            "model": "kokoro",
            "input": text,
            "voice": voice,
            "response_format": "wav",
            "speed": round(speed, 3),
        }

        try:
            response = await self._http_post("/v1/audio/speech", json=payload)
        except httpx.HTTPStatusError as e:
            raise SynthesisError(
                provider="Kokoro",
                voice=voice,
                text_length=len(text),
                cause=f"HTTP {e.response.status_code}: {e.response.text[:100]}"
            )
        except httpx.RequestError as e:
            logger.error(f"Kokoro request failed: {e}")
            raise SynthesisError(provider="Kokoro", voice=voice, cause=str(e))

        logger.debug(f"Synthesized {len(text)} chars ({style.value}) with voice {voice}")
        return self.apply_prosody(decode_wav(response.content), params)

    @staticmethod
    def apply_prosody(segment: AudioSegment, params: SynthesisParams) -> AudioSegment:
        """Shift pitch, wobble timing, muffle as clarity drops, then apply gain.

        Pitch is shifted by resampling, so a higher pitch also shortens the
        segment. The jitter warp is seeded and therefore repeatable.
        """
        samples = segment.samples.astype(np.float64)

        if params.pitch_shift != 1.0 and len(samples) > 1:
            positions = np.arange(0.0, len(samples) - 1, params.pitch_shift)
            samples = np.interp(positions, np.arange(len(samples)), samples)

        if params.phase_jitter > 0.0 and len(samples) > 1:
            samples = KokoroService._warp_timing(samples, params.phase_jitter)

        width = MUFFLE_WIDTH * 2 if params.babble else MUFFLE_WIDTH
        if params.clarity < 1.0 and len(samples) >= width:
            kernel = np.ones(width) / width
            muffled = np.convolve(samples, kernel, mode="same")
            samples = params.clarity * samples + (1.0 - params.clarity) * muffled

        samples = np.clip(samples * params.energy_gain, -1.0, 1.0).astype(np.float32)
        return AudioSegment(samples, segment.sample_rate, segment.channels, segment.bit_depth)

    @staticmethod
    def _warp_timing(samples: np.ndarray, jitter: float) -> np.ndarray:
        rng = np.random.default_rng(JITTER_SEED)
        noise = rng.standard_normal(len(samples))
        window = min(JITTER_SMOOTHING, len(samples))
        drift = np.convolve(noise, np.ones(window) / window, mode="same")
        peak = np.max(np.abs(drift))
        if peak == 0.0:
            return samples

        index = np.arange(len(samples))
        positions = np.clip(index + drift / peak * JITTER_DEPTH * jitter, 0, len(samples) - 1)
        return np.interp(positions, index, samples)

    async def list_voices(self) -> list[dict]:
        """List available Kokoro voices, falling back to a static list"""
        try:
            response = await self._http_get("/v1/audio/voices")
        except (httpx.HTTPError, ServiceUnavailableError) as e:
            logger.debug(f"Could not fetch voices from Kokoro API: {e}")
            return self.VOICES

        voices = []
        for voice in response.json().get("voices", []):
            voice_id = voice if isinstance(voice, str) else voice.get("id") or voice.get("voice_id")
            if not voice_id:
                continue
            prefix, _, name = voice_id.partition("_")
            language, description = self.PREFIXES.get(prefix, ("en", ""))
            display_name = f"{name.title()} ({description})" if description else voice_id.title()
            voices.append({
                "id": voice_id,
                "name": display_name,
                "language": language,
                "gender": "female" if prefix.endswith("f") else "male",
            })

        if voices:
            logger.debug(f"Fetched {len(voices)} voices from Kokoro API")
            return voices
        return self.VOICES
