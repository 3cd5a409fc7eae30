"""
Formant estimation by spectral peak picking.

Only the first frame of the recording is analysed. Peaks are local maxima of
the DFT magnitude inside the formant band, found with a single rising /
falling scan; no LPC envelope is fitted. Missing slots are filled with
synthetic formants at 500, 1500, 2500, ... Hz.
"""

import logging
from typing import List, Optional

import numpy as np

from voicescreen.core.base import AnalysisConfig

logger = logging.getLogger(__name__)


class FormantEstimator:
    """Spectral peak picker returning a fixed number of formant frequencies"""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    def bin_width(self, sample_rate: int) -> float:
        # Based on the nominal frame size even when the recording is shorter
        return sample_rate / self.config.formant_frame_size

    def magnitude_spectrum(self, samples: np.ndarray) -> np.ndarray:
        """DFT magnitudes of the first frame, bins 0 .. n // 2"""
        frame = np.asarray(samples[:self.config.formant_frame_size], dtype=np.float64)
        if len(frame) == 0:
            return np.zeros(0)
        return np.abs(np.fft.rfft(frame))

    def pick_peaks(self, magnitudes: np.ndarray, frame_length: int,
                   bin_width: float) -> List[float]:
        """Frequencies of local magnitude maxima in the formant band.

        A peak is reported when the magnitude drops after a strictly rising
        run; it is placed at the bin just before the drop. Scanning starts
        from a previous magnitude of zero.
        """
        start_bin = int(np.floor(self.config.min_formant_freq / bin_width))
        end_bin = min(np.floor(self.config.max_formant_freq / bin_width), frame_length / 2)

        peaks = []
        prev_mag = 0.0
        rising = False
        i = start_bin
        while i < end_bin and i < len(magnitudes):
            mag = magnitudes[i]
            if mag > prev_mag:
                rising = True
            elif rising and mag < prev_mag:
                peaks.append((i - 1) * bin_width)
                rising = False
                if len(peaks) >= self.config.max_formants:
                    break
            prev_mag = mag
            i += 1

        return peaks

    def pad(self, formants: List[float]) -> List[float]:
        """Fill missing slots with base + spacing * index, capped at max_formants"""
        formants = list(formants)
        while len(formants) < self.config.max_formants:
            formants.append(self.config.formant_base + len(formants) * self.config.formant_spacing)
        return formants[:self.config.max_formants]

    def estimate(self, samples: np.ndarray, sample_rate: int) -> List[float]:
        magnitudes = self.magnitude_spectrum(samples)
        frame_length = min(len(samples), self.config.formant_frame_size)
        peaks = self.pick_peaks(magnitudes, frame_length, self.bin_width(sample_rate))

        if len(peaks) < self.config.max_formants:
            logger.debug(f"Found {len(peaks)} spectral peaks, padding with defaults")
        return [float(f) for f in self.pad(peaks)]
