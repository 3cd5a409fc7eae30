"""
Harmonics-to-noise ratio approximation.

Noise energy is approximated by the energy of the first difference of each
frame, scaled down by a constant factor. This is a rough high-frequency
proxy rather than a cepstral or autocorrelation HNR, and downstream
thresholds are calibrated against it.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from voicescreen.core.base import AnalysisConfig
from voicescreen.core.metrics import frame_starts

logger = logging.getLogger(__name__)


class HNREstimator:
    """Frame energy vs scaled first-difference energy, in decibels"""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    def powers(self, samples: np.ndarray) -> Tuple[float, float]:
        """Total (signal, noise) power summed over all analysis frames"""
        samples = np.asarray(samples, dtype=np.float64)
        frame_size = self.config.hnr_frame_size
        total_signal = 0.0
        total_noise = 0.0

        for start in frame_starts(len(samples), frame_size, frame_size):
            frame = samples[start:start + frame_size]
            signal_power = np.sum(frame ** 2) / frame_size
            # Divided by the frame length, not the number of differences
            noise_power = np.sum(np.diff(frame) ** 2) / frame_size

            total_signal += signal_power
            total_noise += noise_power * self.config.noise_scale

        return float(total_signal), float(total_noise)

    def estimate(self, samples: np.ndarray) -> float:
        total_signal, total_noise = self.powers(samples)
        if total_noise == 0:
            return self.config.default_hnr

        hnr = 10 * np.log10(total_signal / total_noise)
        return float(np.clip(hnr, self.config.hnr_floor, self.config.hnr_ceiling))
