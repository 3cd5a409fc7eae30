"""Audio decoders producing mono sample buffers"""

import io
import logging
from pathlib import Path
from typing import Any

import numpy as np
import librosa
import soundfile as sf

from voicescreen.core.base import AudioDecoder, AudioSampleBuffer, AudioSource, DecodingError

logger = logging.getLogger(__name__)


def _as_readable(source: AudioSource) -> Any:
    """Wrap raw bytes in a file object; paths and file objects pass through"""
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(source)
    if isinstance(source, Path):
        return str(source)
    return source


def _describe(source: AudioSource) -> str:
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    return str(getattr(source, 'name', source))


class LibrosaDecoder(AudioDecoder):
    """Decoder backed by librosa.load

    Keeps the native sample rate unless ``target_sr`` is given. Compressed
    containers that libsndfile cannot read fall back to librosa's audioread
    backend when a path is given. Only the first channel is kept.
    """

    name = "librosa"

    def _decode(self, source: AudioSource) -> AudioSampleBuffer:
        try:
            audio, sr = librosa.load(_as_readable(source), sr=self.target_sr, mono=False)
        except Exception as e:
            logger.error(f"Failed to decode {_describe(source)}: {e}")
            raise DecodingError(f"Failed to decode audio {_describe(source)}: {e}") from e

        if audio.ndim > 1:
            audio = audio[0]

        buffer = AudioSampleBuffer(samples=audio.astype(np.float32), sample_rate=int(sr))
        logger.debug(f"Decoded {_describe(source)} with librosa: {buffer!r}")
        return buffer


class SoundFileDecoder(AudioDecoder):
    """Decoder backed by soundfile (libsndfile formats: wav, flac, ogg, ...)"""

    name = "soundfile"

    def _decode(self, source: AudioSource) -> AudioSampleBuffer:
        try:
            audio, sr = sf.read(_as_readable(source), dtype='float32', always_2d=True)
        except Exception as e:
            logger.error(f"Failed to decode {_describe(source)}: {e}")
            raise DecodingError(f"Failed to decode audio {_describe(source)}: {e}") from e

        # soundfile returns (frames, channels)
        audio = np.ascontiguousarray(audio[:, 0])

        if self.target_sr is not None and self.target_sr != sr:
            audio = librosa.resample(audio, orig_sr=sr, target_sr=self.target_sr)
            sr = self.target_sr

        buffer = AudioSampleBuffer(samples=audio.astype(np.float32), sample_rate=int(sr))
        logger.debug(f"Decoded {_describe(source)} with soundfile: {buffer!r}")
        return buffer
