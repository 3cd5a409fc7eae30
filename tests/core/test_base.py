import pytest
import numpy as np

from voicescreen.core.base import (
    AnalysisConfig,
    AudioSampleBuffer,
    AudioDecoder,
    VoiceFeatures
)


class TestAnalysisConfig:
    def test_defaults_are_valid(self):
        config = AnalysisConfig()
        config.validate()
        assert config.pitch_frame_size == 2048
        assert config.shimmer_frame_size == 512
        assert config.max_formants == 4

    def test_from_dict_moves_unknown_keys_to_metadata(self):
        config = AnalysisConfig.from_dict({"min_pitch": 60.0, "site": "clinic-a"})
        assert config.min_pitch == 60.0
        assert config.metadata == {"site": "clinic-a"}
        assert config.to_dict()["site"] == "clinic-a"

    @pytest.mark.parametrize("suffix", [".json", ".yaml"])
    def test_save_and_load(self, tmp_path, suffix):
        config = AnalysisConfig(max_pitch=400.0, default_hnr=20.0)
        path = tmp_path / f"analysis{suffix}"
        config.save(path)

        loaded = AnalysisConfig.load(path)
        assert loaded.max_pitch == 400.0
        assert loaded.default_hnr == 20.0
        assert loaded.metadata == {}

    @pytest.mark.parametrize("overrides", [
        {"pitch_frame_size": 0},
        {"pitch_hop_size": -1},
        {"min_pitch": 500.0, "max_pitch": 50.0},
        {"hnr_floor": 40.0, "hnr_ceiling": 10.0},
        {"min_formant_freq": 5000.0},
        {"max_formants": 0},
    ])
    def test_validate_rejects_bad_values(self, overrides):
        with pytest.raises(ValueError):
            AnalysisConfig(**overrides).validate()


class TestAudioSampleBuffer:
    def test_basic_properties(self):
        buffer = AudioSampleBuffer(np.zeros(22050), 44100)
        assert len(buffer) == 22050
        assert buffer.duration == pytest.approx(0.5)
        assert buffer.samples.dtype == np.float32

    def test_samples_are_read_only(self):
        buffer = AudioSampleBuffer(np.zeros(10), 8000)
        with pytest.raises(ValueError):
            buffer.samples[0] = 1.0

    def test_does_not_alias_input(self):
        raw = np.zeros(10, dtype=np.float32)
        buffer = AudioSampleBuffer(raw, 8000)
        raw[0] = 1.0
        assert buffer.samples[0] == 0.0

    def test_non_finite_samples_become_zero(self):
        buffer = AudioSampleBuffer(np.array([0.1, np.nan, np.inf, -np.inf, 0.2]), 8000)
        assert np.all(np.isfinite(buffer.samples))
        assert buffer.samples[1:4].tolist() == [0.0, 0.0, 0.0]

    def test_empty_buffer(self):
        buffer = AudioSampleBuffer.from_array([], 16000)
        assert len(buffer) == 0
        assert buffer.duration == 0.0

    @pytest.mark.parametrize("sample_rate", [0, -16000, 44100.5, True])
    def test_invalid_sample_rate(self, sample_rate):
        with pytest.raises(ValueError):
            AudioSampleBuffer(np.zeros(10), sample_rate)

    def test_multichannel_rejected(self):
        with pytest.raises(ValueError):
            AudioSampleBuffer(np.zeros((2, 10)), 16000)


class TestVoiceFeatures:
    def test_to_flat_dict(self, healthy_features):
        flat = healthy_features.to_flat_dict()
        assert "formants" not in flat
        assert flat["formant_1"] == 700.0
        assert flat["formant_4"] == 3500.0
        assert flat["pitch_variation"] == 20.0

    def test_from_dict_accepts_camel_case(self, healthy_features):
        data = healthy_features.to_dict()
        data["pitchVariation"] = data.pop("pitch_variation")
        assert VoiceFeatures.from_dict(data) == healthy_features

    def test_from_dict_missing_field(self):
        with pytest.raises(ValueError, match="hnr"):
            VoiceFeatures.from_dict({
                "pitch": 150.0, "pitch_variation": 10.0, "jitter": 0.5,
                "shimmer": 3.0, "duration": 1.0, "amplitude": 0.1,
                "formants": [500, 1500, 2500, 3500],
            })


class _EchoDecoder(AudioDecoder):
    name = "echo"

    def __init__(self, target_sr=None):
        super().__init__(target_sr)
        self.open_calls = 0
        self.close_calls = 0

    def _open(self):
        self.open_calls += 1

    def _close(self):
        self.close_calls += 1

    def _decode(self, source):
        return AudioSampleBuffer(np.frombuffer(source, dtype=np.int8).astype(np.float32), 8000)


class TestAudioDecoder:
    def test_decode_requires_open(self):
        decoder = _EchoDecoder()
        with pytest.raises(RuntimeError):
            decoder.decode(b"\x01\x02")

    def test_lifecycle(self):
        decoder = _EchoDecoder()
        decoder.open()
        decoder.open()
        assert decoder.is_open
        assert decoder.open_calls == 1

        buffer = decoder.decode(b"\x01\x02\x03")
        assert len(buffer) == 3

        decoder.close()
        decoder.close()
        assert not decoder.is_open
        assert decoder.close_calls == 1

    def test_context_manager(self):
        with _EchoDecoder() as decoder:
            assert decoder.is_open
        assert not decoder.is_open
