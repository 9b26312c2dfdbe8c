"""Lullaby Configuration"""
import math

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from LULLABY_* environment variables or .env"""

    model_config = SettingsConfigDict(
        env_prefix="LULLABY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Kokoro TTS (OpenAI-compatible Kokoro-FastAPI server)
    kokoro_base_url: str = "http://localhost:8880"
    kokoro_default_voice: str = "af_sky"
    kokoro_timeout: float = 60.0
    sample_rate: int = 24000

    # Segmentation
    max_tokens: int = 510  # Kokoro context minus start/end markers
    short_text_threshold: int = 50  # characters; shorter text is never split
    style_short_max: int = 16
    style_medium_max: int = 64

    # Attention: harmonic, stability (1 - jitter), salience
    attention_weights: tuple[float, float, float] = (0.3, 0.3, 0.4)
    autonomy_ratio: float = 0.7

    # Emotional regulation
    saturation_threshold: float = 5.0
    babble_threshold: float = 0.2
    regulation_decay_rate: float = 0.1

    # Consciousness fades at this rate per second while asleep
    sleep_decay_rate: float = 0.05

    # Interference sampling window (seconds)
    interference_window: float = 0.05

    @model_validator(mode="after")
    def check_tuning(self) -> "Settings":
        if not math.isclose(sum(self.attention_weights), 1.0, abs_tol=1e-6):
            raise ValueError(
                f"attention_weights must sum to 1, got {self.attention_weights}"
            )
        if not 0.0 <= self.autonomy_ratio <= 1.0:
            raise ValueError(f"autonomy_ratio must be in [0, 1], got {self.autonomy_ratio}")
        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be at least 1, got {self.max_tokens}")
        return self


settings = Settings()
