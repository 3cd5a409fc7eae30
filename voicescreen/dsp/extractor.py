"""
Voice feature extraction.

Runs the pitch, jitter, shimmer, HNR and formant stages over one decoded
recording and assembles a VoiceFeatures record. Extraction is a pure
function of the buffer: it holds no state between calls, never raises for a
valid AudioSampleBuffer, and falls back to configured defaults whenever the
input is too short, silent or otherwise degenerate.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

import numpy as np

from voicescreen.core.base import AnalysisConfig, AudioSampleBuffer, VoiceFeatures
from voicescreen.core.metrics import rms
from voicescreen.dsp.pitch import PitchTracker
from voicescreen.dsp.perturbation import JitterEstimator, ShimmerEstimator
from voicescreen.dsp.hnr import HNREstimator
from voicescreen.dsp.formants import FormantEstimator

logger = logging.getLogger(__name__)


class VoiceFeatureExtractor:
    """Turns an AudioSampleBuffer into VoiceFeatures

    Attributes:
        config: Frame sizes, ranges and fallback values shared by all stages
        pitch_tracker: F0 stage; its pitch feeds the jitter stage
        jitter_estimator: Period perturbation stage
        shimmer_estimator: Amplitude perturbation stage
        hnr_estimator: Harmonics-to-noise stage
        formant_estimator: Spectral peak stage
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()
        self.config.validate()

        self.pitch_tracker = PitchTracker(self.config)
        self.jitter_estimator = JitterEstimator(self.config)
        self.shimmer_estimator = ShimmerEstimator(self.config)
        self.hnr_estimator = HNREstimator(self.config)
        self.formant_estimator = FormantEstimator(self.config)

    def extract(self, buffer: AudioSampleBuffer) -> VoiceFeatures:
        """Extract the full feature record from one recording"""
        samples = np.asarray(buffer.samples, dtype=np.float64)
        sr = buffer.sample_rate

        pitch = self.pitch_tracker.track(samples, sr)
        features = VoiceFeatures(
            pitch=pitch.pitch,
            pitch_variation=pitch.pitch_variation,
            jitter=self.jitter_estimator.estimate(samples, sr, pitch.pitch),
            shimmer=self.shimmer_estimator.estimate(samples),
            hnr=self.hnr_estimator.estimate(samples),
            duration=buffer.duration,
            amplitude=rms(samples),
            formants=self.formant_estimator.estimate(samples, sr),
        )

        logger.debug(f"Extracted features: {features}")
        return features

    def extract_many(self,
                     buffers: Iterable[AudioSampleBuffer],
                     max_workers: Optional[int] = None) -> List[VoiceFeatures]:
        """Extract features from independent recordings, preserving order.

        Buffers are never shared between workers, so extractions run on a
        thread pool without locking. ``max_workers=1`` runs inline.
        """
        buffers = list(buffers)
        if max_workers == 1 or len(buffers) <= 1:
            return [self.extract(b) for b in buffers]

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self.extract, buffers))

    def __call__(self, buffer: AudioSampleBuffer) -> VoiceFeatures:
        return self.extract(buffer)


def extract_features(buffer: AudioSampleBuffer,
                     config: Optional[AnalysisConfig] = None) -> VoiceFeatures:
    """Extract VoiceFeatures from a decoded recording with default stages"""
    return VoiceFeatureExtractor(config).extract(buffer)
