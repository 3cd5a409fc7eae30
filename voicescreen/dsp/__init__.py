"""Signal processing stages for voice feature extraction"""

from voicescreen.dsp.pitch import PitchTracker, PitchEstimate
from voicescreen.dsp.perturbation import JitterEstimator, ShimmerEstimator
from voicescreen.dsp.hnr import HNREstimator
from voicescreen.dsp.formants import FormantEstimator
from voicescreen.dsp.extractor import VoiceFeatureExtractor, extract_features

__all__ = [
    "PitchTracker",
    "PitchEstimate",
    "JitterEstimator",
    "ShimmerEstimator",
    "HNREstimator",
    "FormantEstimator",
    "VoiceFeatureExtractor",
    "extract_features"
]
