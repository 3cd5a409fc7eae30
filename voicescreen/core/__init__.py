"""Core components for the voice screening package"""

from voicescreen.core.base import (
    AnalysisConfig,
    AudioSampleBuffer,
    VoiceFeatures,
    AudioDecoder,
    DecodingError
)
from voicescreen.core.registry import (
    DecoderRegistry,
    register_decoder,
    get_decoder,
    create_decoder,
    list_decoders
)
from voicescreen.core.metrics import (
    frame_starts,
    upper_median,
    population_std,
    relative_perturbation,
    rms
)

__all__ = [
    # Base classes and records
    "AnalysisConfig",
    "AudioSampleBuffer",
    "VoiceFeatures",
    "AudioDecoder",
    "DecodingError",
    # Registry
    "DecoderRegistry",
    "register_decoder",
    "get_decoder",
    "create_decoder",
    "list_decoders",
    # Metrics
    "frame_starts",
    "upper_median",
    "population_std",
    "relative_perturbation",
    "rms"
]
