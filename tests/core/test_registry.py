import pytest

import voicescreen
from voicescreen.core.base import AudioDecoder, AudioSampleBuffer
from voicescreen.core.registry import DecoderRegistry, get_decoder, create_decoder, list_decoders
from voicescreen.data.decoders import LibrosaDecoder, SoundFileDecoder


# Dummy decoder for testing
class DummyDecoder(AudioDecoder):
    name = "dummy"

    def _decode(self, source):
        return AudioSampleBuffer.from_array([0.0] * 16, 8000)


@pytest.fixture
def registry():
    """Fixture for a clean DecoderRegistry instance."""
    return DecoderRegistry()


class TestDecoderRegistry:
    def test_register_and_get(self, registry):
        registry.register("dummy", DummyDecoder)
        assert registry.get("dummy") is DummyDecoder
        assert "dummy" in registry
        assert len(registry) == 1

    def test_create_returns_unopened_instance(self, registry):
        registry.register("dummy", DummyDecoder)
        decoder = registry.create("dummy", target_sr=16000)
        assert isinstance(decoder, DummyDecoder)
        assert decoder.target_sr == 16000
        assert not decoder.is_open

    def test_list_decoders(self, registry):
        registry.register("dummy1", DummyDecoder)
        registry.register("dummy2", DummyDecoder)
        assert registry.list_decoders() == ["dummy1", "dummy2"]

    def test_metadata(self, registry):
        registry.register("dummy", DummyDecoder)
        assert registry.get_metadata("dummy")["class_name"] == "DummyDecoder"

        registry.register("dummy", DummyDecoder, metadata={"formats": ["raw"]}, override=True)
        assert registry.get_metadata("dummy") == {"formats": ["raw"]}

    def test_duplicate_registration(self, registry):
        registry.register("dummy", DummyDecoder)
        with pytest.raises(ValueError):
            registry.register("dummy", DummyDecoder)

    def test_rejects_non_decoder(self, registry):
        with pytest.raises(ValueError):
            registry.register("bad", dict)

    def test_unknown_name(self, registry):
        with pytest.raises(KeyError):
            registry.get("missing")


def test_builtin_decoders_registered():
    assert voicescreen.__version__ == "0.1.0"
    assert "librosa" in list_decoders()
    assert "soundfile" in list_decoders()
    assert get_decoder("librosa") is LibrosaDecoder
    assert isinstance(create_decoder("soundfile"), SoundFileDecoder)
