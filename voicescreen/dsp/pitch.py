"""
Autocorrelation pitch tracking.

The recording is cut into overlapping frames; each frame's fundamental
frequency is the sample rate divided by the lag that maximises the
unnormalised autocorrelation within the 50-500 Hz search range. Frame
estimates outside that range are discarded, and the survivors are reduced
to a median pitch and a population standard deviation.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from voicescreen.core.base import AnalysisConfig
from voicescreen.core.metrics import frame_starts, upper_median, population_std

logger = logging.getLogger(__name__)


@dataclass
class PitchEstimate:
    """Aggregated pitch of a recording

    Attributes:
        pitch: Median per-frame F0 in Hz
        pitch_variation: Population standard deviation of per-frame F0 in Hz
        frame_pitches: Retained per-frame estimates, in frame order
    """
    pitch: float
    pitch_variation: float
    frame_pitches: List[float] = field(default_factory=list)


class PitchTracker:
    """Per-frame autocorrelation F0 estimator"""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    def lag_range(self, sample_rate: int, frame_length: int) -> Tuple[int, int]:
        """Half-open lag search range [min_lag, max_lag) in samples"""
        min_lag = max(int(np.floor(sample_rate / self.config.max_pitch)), 1)
        max_lag = min(int(np.floor(sample_rate / self.config.min_pitch)), frame_length)
        return min_lag, max_lag

    def frame_pitch(self, frame: np.ndarray, sample_rate: int) -> Optional[float]:
        """F0 of a single frame, or None if no lag can be searched.

        Ties between equal autocorrelation values resolve to the lowest lag.
        """
        frame = np.asarray(frame, dtype=np.float64)
        min_lag, max_lag = self.lag_range(sample_rate, len(frame))
        if min_lag >= max_lag:
            return None

        n = len(frame)
        # Index n - 1 + lag of the full correlation holds sum(x[i] * x[i + lag])
        autocorr = np.correlate(frame, frame, mode='full')
        correlations = autocorr[n - 1 + min_lag:n - 1 + max_lag]

        best_lag = min_lag + int(np.argmax(correlations))
        return sample_rate / best_lag

    def frame_pitches(self, samples: np.ndarray, sample_rate: int) -> List[float]:
        """Per-frame F0 estimates strictly inside the plausible pitch range"""
        samples = np.asarray(samples, dtype=np.float64)
        frame_size = self.config.pitch_frame_size
        pitches = []

        for start in frame_starts(len(samples), frame_size, self.config.pitch_hop_size):
            f0 = self.frame_pitch(samples[start:start + frame_size], sample_rate)
            if f0 is not None and self.config.min_pitch < f0 < self.config.max_pitch:
                pitches.append(f0)

        return pitches

    def summarize(self, pitches: Sequence[float]) -> Tuple[float, float]:
        """Reduce frame estimates to (pitch, pitch_variation) with fallbacks"""
        pitch = upper_median(pitches) if len(pitches) > 0 else self.config.default_pitch
        if len(pitches) >= 2:
            variation = population_std(pitches)
        else:
            variation = self.config.default_pitch_variation
        return pitch, variation

    def track(self, samples: np.ndarray, sample_rate: int) -> PitchEstimate:
        pitches = self.frame_pitches(samples, sample_rate)
        if not pitches:
            logger.debug("No voiced frames found, using default pitch")

        pitch, variation = self.summarize(pitches)
        logger.debug(f"Pitch {pitch:.2f} Hz, variation {variation:.2f} Hz "
                     f"from {len(pitches)} frames")
        return PitchEstimate(pitch=pitch, pitch_variation=variation, frame_pitches=pitches)
