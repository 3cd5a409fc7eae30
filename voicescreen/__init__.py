"""
Voice Screening Toolkit

Signal-processing feature extraction and threshold-based risk scoring of
sustained-vowel recordings for Parkinsonian speech screening.
"""

__version__ = "0.1.0"
__author__ = "Voice Screening Team"

from voicescreen.core.registry import register_decoder, get_decoder, create_decoder, list_decoders
from voicescreen.core.base import (
    AnalysisConfig,
    AudioSampleBuffer,
    AudioDecoder,
    DecodingError,
    VoiceFeatures
)
from voicescreen.dsp.extractor import VoiceFeatureExtractor, extract_features
from voicescreen.scoring.risk import RiskAssessor, PredictionResult
from voicescreen.screening.pipeline import ScreeningPipeline, ScreeningResult


# Register built-in decoders
def _register_builtin_decoders():
    """Register all built-in audio decoders"""
    from voicescreen.data.decoders import LibrosaDecoder, SoundFileDecoder

    register_decoder(LibrosaDecoder.name, LibrosaDecoder)
    register_decoder(SoundFileDecoder.name, SoundFileDecoder)

_register_builtin_decoders()

__all__ = [
    "register_decoder",
    "get_decoder",
    "create_decoder",
    "list_decoders",
    "AnalysisConfig",
    "AudioSampleBuffer",
    "AudioDecoder",
    "DecodingError",
    "VoiceFeatures",
    "VoiceFeatureExtractor",
    "extract_features",
    "RiskAssessor",
    "PredictionResult",
    "ScreeningPipeline",
    "ScreeningResult"
]
