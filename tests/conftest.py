"""Pytest configuration and fixtures"""

import io
import wave

import numpy as np
import pytest
from hypothesis import settings, Verbosity

from voicestress.models.frames import FrameFeatures, RecordedTake
from voicestress.models.results import RawStressResult

# Register Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20, verbosity=Verbosity.normal)
settings.register_profile("debug", max_examples=10, verbosity=Verbosity.verbose)

# Use CI profile by default
settings.load_profile("ci")


def _make_frame(rms=0.1, zcr=0.05, spectral_centroid=1500.0, spectral_flatness=0.2, mfcc=None):
    return FrameFeatures(
        rms=rms,
        zcr=zcr,
        spectral_centroid=spectral_centroid,
        spectral_flatness=spectral_flatness,
        mfcc=mfcc if mfcc is not None else tuple(float(i) for i in range(13)),
    )


def _make_raw_result(**overrides):
    values = dict(
        stress_level=42.0,
        f0_mean=145.0,
        f0_range=60.0,
        jitter=0.8,
        shimmer=3.0,
        hnr=21.0,
        f1=720.0,
        f2=1450.0,
        speech_rate=150.0,
        confidence=85.0,
        snr=24.0,
        ai_summary="Your voice is close to your calm baseline.",
    )
    values.update(overrides)
    return RawStressResult(**values)


def _make_wav_bytes(samples, sample_rate=16000):
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype('<i2')
    buffer = io.BytesIO()
    with wave.open(buffer, 'wb') as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm.tobytes())
    return buffer.getvalue()


def _voiced_signal(duration=1.0, sample_rate=16000, f0=140.0):
    # Harmonic tone with a slow amplitude envelope, well above the silence floor
    t = np.arange(int(duration * sample_rate)) / sample_rate
    signal = sum(np.sin(2 * np.pi * f0 * k * t) / k for k in range(1, 6))
    envelope = 0.6 + 0.4 * np.sin(2 * np.pi * 2.0 * t)
    return (0.3 * envelope * signal / 2.3).astype(np.float32)


@pytest.fixture
def make_frame():
    """Factory for FrameFeatures with voiced defaults"""
    return _make_frame


@pytest.fixture
def make_raw_result():
    """Factory for RawStressResult with mid-range defaults"""
    return _make_raw_result


@pytest.fixture
def make_wav_bytes():
    """Encode float samples in [-1, 1] as 16-bit mono WAV bytes"""
    return _make_wav_bytes


@pytest.fixture
def voiced_signal():
    """Generator of synthetic voiced PCM"""
    return _voiced_signal


@pytest.fixture
def voiced_take():
    """A 1-second voiced WAV take at 16 kHz"""
    return RecordedTake(data=_make_wav_bytes(_voiced_signal()), mime_type="audio/wav")


@pytest.fixture
def silent_take():
    """A 1-second silent WAV take, large enough to be accepted"""
    return RecordedTake(data=_make_wav_bytes(np.zeros(16000, dtype=np.float32)), mime_type="audio/wav")
