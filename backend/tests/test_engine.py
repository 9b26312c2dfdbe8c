"""Tests for the speech engine."""
import math

import numpy as np
import pytest

from lullaby.config import Settings
from lullaby.core import (
    EmotionKind,
    SalienceEvent,
    SignalType,
    SpeechEngine,
    SynthesisError,
    VoiceStyle,
)

PARAGRAPH = (
    "One two three four five. "
    "Six seven eight nine ten. "
    "Eleven twelve thirteen."
)


@pytest.fixture
def grown_engine(engine):
    engine.wake()
    for _ in range(3):
        engine.grow()
    return engine


class TestLifecycle:

    def test_starts_asleep(self, engine):
        snapshot = engine.snapshot()
        assert snapshot["awake"] is False
        assert snapshot["consciousness_level"] == 0.0
        assert snapshot["growth_stage"] == 0
        assert snapshot["word_capacity"] == 1
        assert snapshot["regulation_load"] == 0.0

    def test_wake_and_sleep(self, engine):
        engine.wake()
        assert engine.state.awake
        assert engine.state.consciousness_level == 1.0
        engine.sleep()
        assert not engine.state.awake
        assert engine.state.consciousness_level == pytest.approx(0.3)

    def test_consciousness_fades_while_asleep(self, engine, clock):
        engine.wake()
        engine.sleep()
        clock.advance(10.0)
        expected = 0.3 * math.exp(-0.05 * 10.0)
        assert engine.snapshot()["consciousness_level"] == pytest.approx(expected)

    def test_consciousness_steady_while_awake(self, engine, clock):
        engine.wake()
        clock.advance(100.0)
        assert engine.snapshot()["consciousness_level"] == 1.0

    def test_growth_unlocks_vocabulary(self, engine):
        capacities = [engine.snapshot()["word_capacity"]]
        for _ in range(3):
            engine.grow()
            capacities.append(engine.snapshot()["word_capacity"])
        assert capacities == [1, 2, 3, None]

    def test_audio_params(self, engine):
        assert engine.audio_params() == (24000, 1, 16)

    @pytest.mark.asyncio
    async def test_initialize_reports_health(self, engine, backend):
        assert await engine.initialize() is True
        backend.healthy = False
        assert await engine.initialize() is False


class TestEmotion:

    def test_regulation_load_decays_on_engine_clock(self, engine, clock, love_wave):
        engine.wake()
        assert engine.admit(love_wave)
        assert engine.snapshot()["regulation_load"] == pytest.approx(2.25)
        clock.advance(10.0)
        assert engine.snapshot()["regulation_load"] == pytest.approx(2.25 / math.e)

    def test_interfere_records_energy(self, engine, curiosity_wave, love_wave):
        result = engine.interfere([curiosity_wave, love_wave])
        assert result.dominant is love_wave
        assert engine.last_energy == result.combined_energy > 0.0

    def test_explicit_zero_window_rejected(self, engine, curiosity_wave):
        with pytest.raises(ValueError):
            engine.interfere([curiosity_wave], duration=0.0)
        assert engine.last_energy == 0.0

    def test_default_window_from_settings(self, engine, curiosity_wave):
        result = engine.interfere([curiosity_wave])
        assert len(result.envelope_samples) == 1200

    def test_energy_feeds_modulation(self, engine, curiosity_wave, love_wave):
        engine.wake()
        before = engine.wave_to_params(love_wave).energy_gain
        engine.interfere([curiosity_wave, love_wave])
        after = engine.wave_to_params(love_wave).energy_gain
        assert after > before

    def test_decide_attention_seeded(self, engine, sensory_events):
        first = engine.decide_attention(sensory_events, rng_seed=11)
        second = engine.decide_attention(sensory_events, rng_seed=11)
        assert first is second
        assert engine.decide_attention([]) is None

    def test_process_salience_awake(self, engine):
        engine.wake()
        event = SalienceEvent(1000, 0.2, 0.95, 0.9, SignalType.VOICE)
        wave = engine.process_salience(event)
        assert wave is not None
        assert wave.emotion.kind is EmotionKind.JOY
        assert engine.state.regulation.level > 0.0

    def test_process_salience_asleep_suppressed(self, engine):
        event = SalienceEvent(1000, 0.2, 0.95, 0.9, SignalType.VOICE)
        assert engine.process_salience(event) is None
        assert engine.state.regulation.level == 0.0


class TestSpeak:

    @pytest.mark.asyncio
    async def test_capacity_trims_words(self, engine, backend):
        audio, warnings = await engine.speak("Hello there friend")
        assert backend.calls[0][0] == "Hello"
        assert len(audio) == len("Hello") * 10
        assert any("at most 1 word" in w for w in warnings)

    @pytest.mark.asyncio
    async def test_capacity_can_be_bypassed(self, engine, backend):
        _, warnings = await engine.speak("Hello there friend", enforce_capacity=False)
        assert backend.calls[0][0] == "Hello there friend"
        assert warnings == []

    @pytest.mark.asyncio
    async def test_chunks_concatenate_in_order(self, backend, clock):
        engine = SpeechEngine(backend, Settings(max_tokens=6), clock, seed=1)
        engine.wake()
        for _ in range(3):
            engine.grow()

        audio, warnings = await engine.speak(PARAGRAPH, voice="af_bella")

        assert [call[0] for call in backend.calls] == [
            "One two three four five. ",
            "Six seven eight nine ten. ",
            "Eleven twelve thirteen.",
        ]
        assert all(call[3] == "af_bella" for call in backend.calls)
        assert len(audio) == len(PARAGRAPH) * 10
        # Each segment is filled with its call number / 100; no gaps between them
        boundaries = np.cumsum([len(call[0]) * 10 for call in backend.calls])
        assert audio.samples[0] == pytest.approx(0.01)
        assert audio.samples[boundaries[0]] == pytest.approx(0.02)
        assert audio.samples[boundaries[1]] == pytest.approx(0.03)
        assert audio.samples[-1] == pytest.approx(0.03)
        assert warnings == []

    @pytest.mark.asyncio
    async def test_backend_error_propagates(self, engine, backend):
        error = SynthesisError("Kokoro", "af_sky", 5, "HTTP 500")
        backend.error = error
        with pytest.raises(SynthesisError) as exc_info:
            await engine.speak("Hello")
        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_empty_text_gives_empty_audio(self, grown_engine, backend):
        audio, warnings = await grown_engine.speak("   ")
        assert len(audio) == 0
        assert backend.calls == []
        assert "Empty text after normalization" in warnings

    @pytest.mark.asyncio
    async def test_speaking_rate_changes_style(self, grown_engine, backend):
        from lullaby.core import SynthesisParams
        text = "one two three four five six seven eight nine ten"
        await grown_engine.speak(text)
        await grown_engine.speak(text, SynthesisParams(speaking_rate=2.0))
        assert backend.calls[0][1] is VoiceStyle.SHORT
        assert backend.calls[1][1] is VoiceStyle.MEDIUM


class TestSpeakWave:

    @pytest.mark.asyncio
    async def test_admitted_wave_uses_its_prosody(self, grown_engine, backend, love_wave):
        audio, warnings = await grown_engine.speak_wave(love_wave)
        text, _, params, _ = backend.calls[0]
        assert text == "Mama! I love mama!"
        assert params.pitch_shift > 1.0
        assert not params.babble
        assert len(audio) > 0

    @pytest.mark.asyncio
    async def test_saturated_while_awake_is_dropped(self, grown_engine, backend, love_wave):
        assert await grown_engine.speak_wave(love_wave) is not None
        assert await grown_engine.speak_wave(love_wave) is not None
        assert await grown_engine.speak_wave(love_wave) is None
        assert len(backend.calls) == 2

    @pytest.mark.asyncio
    async def test_asleep_wave_becomes_babble(self, engine, backend, love_wave):
        audio, warnings = await engine.speak_wave(love_wave)
        params = backend.calls[0][2]
        assert params.babble
        assert params.clarity <= 0.15
        assert "Asleep: love wave attenuated to babble" in warnings
        assert engine.state.regulation.level == 0.0

    @pytest.mark.asyncio
    async def test_babble(self, engine, backend):
        audio, warnings = await engine.babble()
        text, _, params, _ = backend.calls[0]
        assert len(text.split(" ")) == 3
        assert params.babble
        assert len(audio) == len(text) * 10
