"""Base classes and data records for voice screening"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List, Union, BinaryIO
import logging
from pathlib import Path
import json
import yaml
from dataclasses import dataclass, field, fields


logger = logging.getLogger(__name__)

AudioSource = Union[str, Path, bytes, BinaryIO]


@dataclass
class AnalysisConfig:
    """Constants and fallback values for the DSP feature extractor"""
    # Pitch tracker
    pitch_frame_size: int = 2048
    pitch_hop_size: int = 512
    min_pitch: float = 50.0
    max_pitch: float = 500.0
    default_pitch: float = 150.0
    default_pitch_variation: float = 10.0

    # Jitter
    min_period_ratio: float = 0.5
    max_period_ratio: float = 2.0
    default_jitter: float = 0.5

    # Shimmer
    shimmer_frame_size: int = 512
    default_shimmer: float = 3.0

    # Harmonics-to-noise
    hnr_frame_size: int = 2048
    noise_scale: float = 0.1
    hnr_floor: float = 0.0
    hnr_ceiling: float = 40.0
    default_hnr: float = 25.0

    # Formants
    formant_frame_size: int = 2048
    min_formant_freq: float = 200.0
    max_formant_freq: float = 4000.0
    max_formants: int = 4
    formant_base: float = 500.0
    formant_spacing: float = 1000.0

    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        d = {
            k: v for k, v in self.__dict__.items()
            if not k.startswith('_') and k != 'metadata'
        }
        d.update(self.metadata)
        return d

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'AnalysisConfig':
        """Create config from dictionary, moving unknown keys into metadata."""
        config_keys = {f.name for f in fields(cls)}
        init_args = {k: v for k, v in config_dict.items() if k in config_keys}
        metadata = dict(init_args.get('metadata', {}))

        for k, v in config_dict.items():
            if k not in config_keys:
                metadata[k] = v

        init_args['metadata'] = metadata
        return cls(**init_args)

    def validate(self) -> None:
        """Validate configuration values

        Raises:
            ValueError: If any value is out of range
        """
        for name in ('pitch_frame_size', 'pitch_hop_size', 'shimmer_frame_size',
                     'hnr_frame_size', 'formant_frame_size'):
            if getattr(self, name) <= 0:
                raise ValueError(f"Invalid {name}: {getattr(self, name)}, must be positive")

        if not 0 < self.min_pitch < self.max_pitch:
            raise ValueError(
                f"Invalid pitch range: ({self.min_pitch}, {self.max_pitch})"
            )
        if not 0 <= self.hnr_floor < self.hnr_ceiling:
            raise ValueError(
                f"Invalid HNR range: [{self.hnr_floor}, {self.hnr_ceiling}]"
            )
        if not self.min_formant_freq < self.max_formant_freq:
            raise ValueError(
                f"Invalid formant band: [{self.min_formant_freq}, {self.max_formant_freq}]"
            )
        if self.max_formants < 1:
            raise ValueError(f"Invalid max_formants: {self.max_formants}, must be >= 1")

    def save(self, path: Union[str, Path]):
        """Save configuration to a JSON or YAML file"""
        path = Path(path)
        with open(path, 'w') as f:
            if path.suffix in ('.yaml', '.yml'):
                yaml.safe_dump(self.to_dict(), f, sort_keys=False)
            else:
                json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'AnalysisConfig':
        """Load configuration from a JSON or YAML file"""
        path = Path(path)
        with open(path, 'r') as f:
            if path.suffix in ('.yaml', '.yml'):
                config_dict = yaml.safe_load(f) or {}
            else:
                config_dict = json.load(f)
        return cls.from_dict(config_dict)


@dataclass(frozen=True)
class AudioSampleBuffer:
    """Decoded mono recording

    Attributes:
        samples: float32 amplitude samples, roughly in [-1, 1]
        sample_rate: Sample rate in Hz
    """
    samples: np.ndarray
    sample_rate: int

    def __post_init__(self):
        if isinstance(self.sample_rate, bool) or int(self.sample_rate) != self.sample_rate:
            raise ValueError(f"Sample rate must be an integer, got {self.sample_rate!r}")
        if self.sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {self.sample_rate}")

        samples = np.array(self.samples, dtype=np.float32)
        if samples.ndim != 1:
            raise ValueError(f"Samples must be one-dimensional, got shape {samples.shape}")

        non_finite = ~np.isfinite(samples)
        if np.any(non_finite):
            logger.warning(f"Replacing {int(non_finite.sum())} non-finite samples with 0.0")
            samples[non_finite] = 0.0

        samples.flags.writeable = False
        object.__setattr__(self, 'samples', samples)
        object.__setattr__(self, 'sample_rate', int(self.sample_rate))

    @classmethod
    def from_array(cls, samples: Any, sample_rate: int) -> 'AudioSampleBuffer':
        return cls(samples=np.asarray(samples), sample_rate=sample_rate)

    @property
    def duration(self) -> float:
        """Length of the recording in seconds"""
        return len(self.samples) / self.sample_rate

    def __len__(self) -> int:
        return len(self.samples)

    def __repr__(self) -> str:
        return (f"AudioSampleBuffer(num_samples={len(self.samples)}, "
                f"sample_rate={self.sample_rate}, duration={self.duration:.3f}s)")


_CAMEL_CASE_KEYS = {'pitchVariation': 'pitch_variation'}


@dataclass
class VoiceFeatures:
    """Acoustic measurements extracted from one recording

    Attributes:
        pitch: Median fundamental frequency (F0) in Hz
        pitch_variation: Standard deviation of per-frame pitch in Hz
        jitter: Cycle-to-cycle period perturbation (%)
        shimmer: Cycle-to-cycle amplitude perturbation (%)
        hnr: Harmonics-to-noise ratio in dB, within [0, 40]
        duration: Recording length in seconds
        amplitude: RMS of the whole recording
        formants: Exactly four formant frequencies in Hz
    """
    pitch: float
    pitch_variation: float
    jitter: float
    shimmer: float
    hnr: float
    duration: float
    amplitude: float
    formants: List[float]

    def to_dict(self) -> Dict[str, Any]:
        d = {f.name: getattr(self, f.name) for f in fields(self)}
        d['formants'] = list(self.formants)
        return d

    def to_flat_dict(self) -> Dict[str, float]:
        """Dictionary with formants expanded to formant_1 ... formant_n"""
        d = self.to_dict()
        for i, freq in enumerate(d.pop('formants'), start=1):
            d[f'formant_{i}'] = freq
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VoiceFeatures':
        """Create features from snake_case or camelCase keys"""
        normalized = {_CAMEL_CASE_KEYS.get(k, k): v for k, v in data.items()}
        names = {f.name for f in fields(cls)}
        missing = names - normalized.keys()
        if missing:
            raise ValueError(f"Missing voice feature fields: {sorted(missing)}")
        values = {k: normalized[k] for k in names}
        values['formants'] = [float(x) for x in values['formants']]
        return cls(**values)


class DecodingError(Exception):
    """Raised when a recording cannot be decoded into samples"""
    pass


class AudioDecoder(ABC):
    """Base class for decoders turning compressed audio into sample buffers

    Decoders have an explicit lifecycle: open once at startup, decode any
    number of recordings, close at shutdown. They can also be used as
    context managers.
    """

    name: str = "base"

    def __init__(self, target_sr: Optional[int] = None):
        self.target_sr = target_sr
        self._is_open = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    def open(self) -> 'AudioDecoder':
        if not self._is_open:
            self._open()
            self._is_open = True
            logger.info(f"Opened {self.__class__.__name__}")
        return self

    def close(self):
        if self._is_open:
            self._close()
            self._is_open = False
            logger.info(f"Closed {self.__class__.__name__}")

    def _open(self):
        """Acquire decoding resources; override in subclasses that need any"""
        pass

    def _close(self):
        """Release decoding resources"""
        pass

    def decode(self, source: AudioSource) -> AudioSampleBuffer:
        """Decode a recording into a mono sample buffer

        Args:
            source: File path, raw bytes or binary file-like object

        Raises:
            RuntimeError: If the decoder has not been opened
            DecodingError: If the audio cannot be decoded
        """
        if not self._is_open:
            raise RuntimeError(f"{self.__class__.__name__} is not open")
        return self._decode(source)

    @abstractmethod
    def _decode(self, source: AudioSource) -> AudioSampleBuffer:
        """Decode source - must be implemented by subclasses"""
        pass

    def __enter__(self) -> 'AudioDecoder':
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(target_sr={self.target_sr}, is_open={self._is_open})"
