"""Cycle-to-cycle perturbation measures: jitter and shimmer"""

import logging
from typing import Optional

import numpy as np

from voicescreen.core.base import AnalysisConfig
from voicescreen.core.metrics import frame_starts, relative_perturbation, round_half_up

logger = logging.getLogger(__name__)


class JitterEstimator:
    """
    Period perturbation from rising zero crossings.

    The distance between consecutive rising crossings is taken as a period
    candidate. Candidates shorter than half or longer than twice the period
    implied by the pitch estimate are dropped (octave errors, noise
    crossings). Jitter is the mean absolute difference between consecutive
    accepted periods over the mean accepted period, in percent.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    @staticmethod
    def rising_crossings(samples: np.ndarray) -> np.ndarray:
        """Indices i where samples[i - 1] <= 0 and samples[i] > 0"""
        samples = np.asarray(samples)
        return np.flatnonzero((samples[:-1] <= 0) & (samples[1:] > 0)) + 1

    def periods(self, samples: np.ndarray, sample_rate: int, pitch: float) -> np.ndarray:
        """Accepted period lengths in samples"""
        expected = round_half_up(sample_rate / pitch)
        candidates = np.diff(self.rising_crossings(samples))
        accepted = ((candidates > expected * self.config.min_period_ratio)
                    & (candidates < expected * self.config.max_period_ratio))
        return candidates[accepted]

    def estimate(self, samples: np.ndarray, sample_rate: int, pitch: float) -> float:
        if pitch <= 0:
            return self.config.default_jitter

        periods = self.periods(samples, sample_rate, pitch)
        jitter = relative_perturbation(periods)
        if jitter is None:
            logger.debug(f"Only {len(periods)} usable periods, using default jitter")
            return self.config.default_jitter
        return jitter


class ShimmerEstimator:
    """Peak amplitude perturbation across fixed non-overlapping frames"""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    def frame_peaks(self, samples: np.ndarray) -> np.ndarray:
        samples = np.abs(np.asarray(samples, dtype=np.float64))
        frame_size = self.config.shimmer_frame_size
        starts = frame_starts(len(samples), frame_size, frame_size)
        return np.array([samples[i:i + frame_size].max() for i in starts], dtype=np.float64)

    def estimate(self, samples: np.ndarray) -> float:
        shimmer = relative_perturbation(self.frame_peaks(samples))
        if shimmer is None:
            logger.debug("Not enough non-silent frames, using default shimmer")
            return self.config.default_shimmer
        return shimmer
