"""Tests for wave-to-speech modulation."""
import math
import random

import pytest

from lullaby.core import (
    ConsciousnessState,
    Emotion,
    EmotionKind,
    MemoryWave,
    SalienceEvent,
    SignalType,
    salience_to_wave,
    wave_to_params,
)
from lullaby.core.modulation import (
    EMOTION_RATE_BIAS,
    babble_params,
    babble_text,
    phase_deviation,
    resting_params,
)


@pytest.fixture
def awake():
    state = ConsciousnessState()
    state.wake()
    return state


def wave(frequency=440.0, amplitude=1.0, kind=EmotionKind.NEUTRAL, intensity=0.0, phase=0.0):
    return MemoryWave(amplitude=amplitude, frequency=frequency, phase=phase,
                      emotion=Emotion(kind, intensity))


class TestPitchAndRate:

    def test_baseline_is_neutral(self, awake):
        params = wave_to_params(wave(), awake)
        assert params.pitch_shift == pytest.approx(1.0)
        assert params.speaking_rate == pytest.approx(1.0)
        assert params.energy_gain == pytest.approx(1.0)
        assert params.phase_jitter == 0.0
        assert not params.babble

    def test_pitch_rises_with_frequency(self, awake):
        low = wave_to_params(wave(frequency=220.0), awake).pitch_shift
        high = wave_to_params(wave(frequency=880.0), awake).pitch_shift
        assert low < 1.0 < high

    def test_pitch_rises_with_intensity(self, awake):
        calm = wave_to_params(wave(kind=EmotionKind.JOY, intensity=0.1), awake).pitch_shift
        excited = wave_to_params(wave(kind=EmotionKind.JOY, intensity=0.9), awake).pitch_shift
        assert excited > calm

    def test_every_emotion_has_prosody(self, awake):
        assert set(EMOTION_RATE_BIAS) == set(EmotionKind)
        for kind in EmotionKind:
            wave_to_params(wave(kind=kind, intensity=1.0), awake)

    def test_joy_speeds_up_sadness_slows_down(self, awake):
        joy = wave_to_params(wave(kind=EmotionKind.JOY, intensity=1.0), awake)
        sad = wave_to_params(wave(kind=EmotionKind.SADNESS, intensity=1.0), awake)
        assert joy.speaking_rate > 1.0 > sad.speaking_rate


class TestEnergyAndClarity:

    def test_energy_follows_amplitude_and_interference(self, awake):
        quiet = wave_to_params(wave(amplitude=0.25), awake).energy_gain
        loud = wave_to_params(wave(amplitude=2.25), awake).energy_gain
        boosted = wave_to_params(wave(amplitude=2.25), awake, combined_energy=1.0).energy_gain
        assert quiet == pytest.approx(0.5)
        assert loud == pytest.approx(1.5)
        assert boosted == pytest.approx(2.25)

    def test_low_consciousness_degrades_not_fails(self):
        asleep = ConsciousnessState()
        params = wave_to_params(wave(kind=EmotionKind.LOVE, intensity=0.9), asleep)
        assert params.clarity == 0.0
        assert params.babble
        assert params.speaking_rate < 1.0

    def test_clarity_tracks_consciousness(self, awake):
        assert wave_to_params(wave(), awake).clarity == 1.0
        awake.sleep()
        assert wave_to_params(wave(), awake).clarity == pytest.approx(0.3)


class TestConfusionJitter:

    def test_out_of_phase_confusion_jitters(self, awake):
        confused = wave(kind=EmotionKind.CONFUSION, intensity=0.8, phase=math.pi)
        assert wave_to_params(confused, awake).phase_jitter == pytest.approx(0.5)

    def test_in_phase_confusion_is_steady(self, awake):
        confused = wave(kind=EmotionKind.CONFUSION, intensity=0.8, phase=2 * math.pi)
        assert wave_to_params(confused, awake).phase_jitter == pytest.approx(0.0, abs=1e-12)

    def test_other_emotions_never_jitter(self, awake):
        joyful = wave(kind=EmotionKind.JOY, intensity=0.8, phase=math.pi)
        assert wave_to_params(joyful, awake).phase_jitter == 0.0

    def test_phase_deviation_wraps(self):
        assert phase_deviation(math.pi / 2) == pytest.approx(0.5)
        assert phase_deviation(3 * math.pi / 2) == pytest.approx(0.5)
        assert phase_deviation(-math.pi / 2) == pytest.approx(0.5)


class TestSalienceAndBabble:

    @pytest.mark.parametrize("signal_type", list(SignalType))
    def test_every_signal_type_becomes_valid_wave(self, signal_type):
        event = SalienceEvent(1, 0.3, 0.6, 0.5, signal_type)
        result = salience_to_wave(event)
        result.validate()
        assert result.content

    def test_familiar_voice_is_joyful(self):
        event = SalienceEvent(1000, 0.2, 0.95, 0.9, SignalType.VOICE)
        assert salience_to_wave(event).emotion == Emotion(EmotionKind.JOY, 0.95)

    def test_jittery_event_is_confusing(self):
        event = SalienceEvent(3000, 0.95, 0.1, 0.8, SignalType.VOICE)
        result = salience_to_wave(event)
        assert result.emotion.kind is EmotionKind.CONFUSION
        assert result.phase == pytest.approx(0.95 * math.pi)

    def test_babble_text_is_seeded(self):
        assert babble_text(random.Random(3)) == babble_text(random.Random(3))
        words = babble_text(random.Random(3), words=4).split(" ")
        assert len(words) == 4

    def test_babble_params_attenuate(self, awake):
        source = wave_to_params(wave(amplitude=4.0, kind=EmotionKind.JOY, intensity=1.0), awake)
        quiet = babble_params(awake, source)
        assert quiet.babble
        assert quiet.energy_gain < source.energy_gain
        assert quiet.clarity < 0.3

    def test_resting_params(self, awake):
        params = resting_params(awake)
        assert params.pitch_shift == 1.0
        assert params.clarity == 1.0
