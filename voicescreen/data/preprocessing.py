"""Recording quality checks run before feature extraction"""

import numpy as np
from typing import Dict, List, Any, Tuple, Optional, Callable
import logging
import librosa

from voicescreen.core.base import AudioSampleBuffer

logger = logging.getLogger(__name__)


class SignalQualityChecker:
    """Check whether a voice recording is usable for screening

    The report never changes the extracted features; it only tells the
    caller whether the recording should be repeated.
    """

    def __init__(self,
                 quality_threshold: float = 0.7,
                 min_duration: float = 1.0,
                 frame_length: int = 2048,
                 hop_length: int = 512):
        self.quality_threshold = quality_threshold
        self.min_duration = min_duration
        self.frame_length = frame_length
        self.hop_length = hop_length
        self.checks: List[Callable[[AudioSampleBuffer], Tuple[float, Optional[str]]]] = [
            self._check_voice_quality,
            self._check_duration,
        ]

    def check_quality(self, buffer: AudioSampleBuffer) -> Dict[str, Any]:
        """Check recording quality and return metrics

        The overall score is the lowest individual check score.
        """
        quality_scores = []
        issues = []

        for check in self.checks:
            score, issue = check(buffer)
            quality_scores.append(score)
            if issue:
                issues.append(issue)

        overall_score = float(min(quality_scores)) if quality_scores else 0.0
        passes = overall_score >= self.quality_threshold
        if not passes:
            logger.warning(f"Recording quality {overall_score:.2f} below threshold: {issues}")

        return {
            'quality_score': overall_score,
            'passes': passes,
            'issues': issues,
            'detailed_scores': quality_scores
        }

    def _check_voice_quality(self, buffer: AudioSampleBuffer) -> Tuple[float, Optional[str]]:
        """Check clipping, level and frame-energy SNR"""
        audio = np.array(buffer.samples, dtype=np.float64)
        if len(audio) == 0:
            return 0.0, "Signal too weak"

        max_val = np.max(np.abs(audio))
        if max_val >= 0.99:
            return 0.3, "Signal clipping detected"

        signal_power = np.mean(audio ** 2)
        if signal_power < 1e-6:
            return 0.0, "Signal too weak"

        energy = librosa.feature.rms(
            y=audio, frame_length=self.frame_length, hop_length=self.hop_length
        )[0]

        # Very stable energy means a sustained tone with no noise floor to compare
        if np.std(energy) / (np.mean(energy) + 1e-10) < 0.1:
            return 1.0, None

        threshold = np.percentile(energy, 10)
        noise_frames = energy < threshold

        if np.any(noise_frames):
            noise_level = np.mean(energy[noise_frames])
            signal_level = np.mean(energy[~noise_frames]) if np.any(~noise_frames) else 0

            if signal_level > 0:
                snr = 20 * np.log10(signal_level / (noise_level + 1e-10))
                quality_score = float(min(1.0, snr / 40))
                issue = None if snr > 10 else "Low SNR"
                return quality_score, issue

        return 0.8, None

    def _check_duration(self, buffer: AudioSampleBuffer) -> Tuple[float, Optional[str]]:
        if buffer.duration < self.min_duration:
            return 0.5, "Recording too short"
        return 1.0, None
