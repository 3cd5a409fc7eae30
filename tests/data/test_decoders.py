import io

import pytest
import numpy as np
import soundfile as sf

from voicescreen.core.base import DecodingError
from voicescreen.data.decoders import LibrosaDecoder, SoundFileDecoder


@pytest.fixture(params=[LibrosaDecoder, SoundFileDecoder])
def decoder(request):
    with request.param() as d:
        yield d


def test_decode_path_keeps_native_rate(decoder, wav_file):
    buffer = decoder.decode(wav_file)
    assert buffer.sample_rate == 16000
    assert len(buffer) == 16000
    assert buffer.samples.dtype == np.float32
    assert np.max(np.abs(buffer.samples)) == pytest.approx(0.5, abs=1e-3)


def test_decode_str_path(decoder, wav_file):
    assert len(decoder.decode(str(wav_file))) == 16000


def test_decode_bytes(decoder, wav_file):
    buffer = decoder.decode(wav_file.read_bytes())
    assert buffer.sample_rate == 16000
    assert len(buffer) == 16000


def test_decode_file_object(decoder, wav_file):
    with open(wav_file, 'rb') as f:
        buffer = decoder.decode(f)
    assert len(buffer) == 16000


def test_stereo_keeps_first_channel(decoder, tmp_path):
    left = np.full(8000, 0.25)
    right = np.full(8000, -0.5)
    path = tmp_path / "stereo.wav"
    sf.write(path, np.stack([left, right], axis=1), 8000)

    buffer = decoder.decode(path)
    assert len(buffer) == 8000
    assert np.allclose(buffer.samples, 0.25, atol=1e-3)


def test_invalid_bytes_raise_decoding_error(decoder):
    with pytest.raises(DecodingError):
        decoder.decode(b"definitely not audio" * 10)


def test_missing_file_raises_decoding_error(decoder, tmp_path):
    with pytest.raises(DecodingError):
        decoder.decode(tmp_path / "missing.wav")


@pytest.mark.parametrize("decoder_class", [LibrosaDecoder, SoundFileDecoder])
def test_resampling(decoder_class, wav_file):
    with decoder_class(target_sr=8000) as decoder:
        buffer = decoder.decode(wav_file)
    assert buffer.sample_rate == 8000
    assert len(buffer) == 8000


def test_decoder_must_be_open(wav_file):
    decoder = SoundFileDecoder()
    with pytest.raises(RuntimeError):
        decoder.decode(wav_file)


def test_flac_bytes_with_soundfile(make_sine):
    data = io.BytesIO()
    sf.write(data, make_sine(220.0, sr=22050), 22050, format='FLAC')

    with SoundFileDecoder() as decoder:
        buffer = decoder.decode(data.getvalue())
    assert buffer.sample_rate == 22050
    assert buffer.duration == pytest.approx(1.0)
