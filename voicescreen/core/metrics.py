"""Summary statistics shared by the feature extractors"""

import numpy as np
from typing import Optional, Sequence


def frame_starts(num_samples: int, frame_size: int, hop_size: int) -> range:
    """Start indices of the frames that fit strictly inside the signal.

    A frame starting at ``i`` is used only when ``i + frame_size < num_samples``,
    so a signal of exactly one frame yields no frames.
    """
    return range(0, max(num_samples - frame_size, 0), hop_size)


def upper_median(values: Sequence[float]) -> float:
    """Element at index n // 2 of the sorted values (upper median for even n)"""
    ordered = np.sort(np.asarray(values, dtype=np.float64))
    return float(ordered[len(ordered) // 2])


def population_std(values: Sequence[float]) -> float:
    return float(np.std(np.asarray(values, dtype=np.float64)))


def relative_perturbation(values: Sequence[float]) -> Optional[float]:
    """Mean absolute consecutive difference over the mean, as a percentage.

    Returns None when there are fewer than two values or the mean is zero.
    """
    values = np.asarray(values, dtype=np.float64)
    if len(values) < 2:
        return None

    mean_value = np.mean(values)
    if mean_value == 0:
        return None

    mean_diff = np.mean(np.abs(np.diff(values)))
    return float(mean_diff / mean_value * 100)


def rms(samples: np.ndarray) -> float:
    """Root mean square amplitude, 0.0 for an empty signal"""
    if len(samples) == 0:
        return 0.0
    samples = np.asarray(samples, dtype=np.float64)
    return float(np.sqrt(np.mean(samples ** 2)))


def round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))
