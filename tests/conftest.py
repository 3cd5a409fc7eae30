import pytest
import numpy as np
import pandas as pd
import soundfile as sf

from voicescreen.core.base import AudioSampleBuffer, VoiceFeatures


SAMPLE_RATE = 44100


def _sine(freq, duration=1.0, sr=SAMPLE_RATE, amplitude=0.5, phase=0.0):
    t = np.arange(int(round(duration * sr))) / sr
    return amplitude * np.sin(2 * np.pi * freq * t + phase)


@pytest.fixture
def make_sine():
    """Factory for sine tones: make_sine(freq, duration, sr, amplitude, phase)."""
    return _sine


@pytest.fixture
def sine_buffer():
    """One second of a 200 Hz sine at 44.1 kHz."""
    return AudioSampleBuffer(_sine(200.0), SAMPLE_RATE)


@pytest.fixture
def silent_buffer():
    return AudioSampleBuffer(np.zeros(SAMPLE_RATE), SAMPLE_RATE)


@pytest.fixture
def short_buffer():
    """Shorter than a single analysis frame."""
    return AudioSampleBuffer(_sine(200.0)[:100], SAMPLE_RATE)


@pytest.fixture
def healthy_features():
    return VoiceFeatures(
        pitch=180.0,
        pitch_variation=20.0,
        jitter=0.6,
        shimmer=2.5,
        hnr=24.0,
        duration=3.0,
        amplitude=0.2,
        formants=[700.0, 1200.0, 2500.0, 3500.0]
    )


@pytest.fixture
def wav_file(tmp_path):
    """A 16 kHz mono wav file holding one second of a 200 Hz tone."""
    path = tmp_path / "tone.wav"
    sf.write(path, _sine(200.0, duration=1.0, sr=16000), 16000)
    return path


@pytest.fixture
def recordings_dir(tmp_path):
    """
    Creates a directory with two wav recordings and a metadata table that
    also lists one missing file.
    """
    data_dir = tmp_path / "recordings"
    data_dir.mkdir()

    sf.write(data_dir / "r1.wav", _sine(200.0, duration=1.0, sr=16000), 16000)
    sf.write(data_dir / "r2.wav", _sine(150.0, duration=1.5, sr=16000), 16000)

    metadata = pd.DataFrame([
        {"recording_id": "r1", "patient_id": "p001", "path": "r1.wav", "age": 61},
        {"recording_id": "r2", "patient_id": "p002", "path": "r2.wav", "age": 58},
        {"recording_id": "r3", "patient_id": "p003", "path": "missing.wav", "age": 70},
    ])
    metadata.to_csv(data_dir / "metadata.csv", index=False)

    return data_dir
