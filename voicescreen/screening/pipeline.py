"""End-to-end screening: decode, check quality, extract features, score"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

from voicescreen.core.base import (
    AnalysisConfig,
    AudioDecoder,
    AudioSampleBuffer,
    AudioSource,
    VoiceFeatures
)
from voicescreen.core.registry import create_decoder
from voicescreen.data.preprocessing import SignalQualityChecker
from voicescreen.dsp.extractor import VoiceFeatureExtractor
from voicescreen.scoring.risk import RiskAssessor, PredictionResult

logger = logging.getLogger(__name__)


@dataclass
class ScreeningResult:
    """Features, prediction and quality report of one recording"""
    features: VoiceFeatures
    prediction: PredictionResult
    quality: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'features': self.features.to_dict(),
            'prediction': self.prediction.to_dict(),
            'quality': self.quality,
        }


class ScreeningPipeline:
    """Runs one recording through decoding, quality check, extraction and scoring

    The decoder is injected and its lifecycle is explicit: use the pipeline
    as a context manager, or call open() at startup and close() at shutdown.
    """

    def __init__(self,
                 decoder: AudioDecoder,
                 extractor: Optional[VoiceFeatureExtractor] = None,
                 assessor: Optional[RiskAssessor] = None,
                 quality_checker: Optional[SignalQualityChecker] = None):
        self.decoder = decoder
        self.extractor = extractor or VoiceFeatureExtractor()
        self.assessor = assessor or RiskAssessor()
        self.quality_checker = quality_checker or SignalQualityChecker()

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'ScreeningPipeline':
        """Build a pipeline from the sections of a screening YAML config"""
        decoder_cfg = dict(config.get('decoder') or {})
        decoder = create_decoder(decoder_cfg.pop('name', 'librosa'), **decoder_cfg)

        analysis = AnalysisConfig.from_dict(config.get('analysis') or {})
        quality_cfg = config.get('quality') or {}

        return cls(
            decoder=decoder,
            extractor=VoiceFeatureExtractor(analysis),
            quality_checker=SignalQualityChecker(**quality_cfg),
        )

    def open(self) -> 'ScreeningPipeline':
        self.decoder.open()
        return self

    def close(self):
        self.decoder.close()

    def __enter__(self) -> 'ScreeningPipeline':
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def analyze(self,
                source: AudioSource,
                patient_id: str,
                recording_id: Optional[str] = None) -> ScreeningResult:
        """Decode and screen one recording

        Raises:
            DecodingError: If the recording cannot be decoded
        """
        buffer = self.decoder.decode(source)
        return self.analyze_buffer(buffer, patient_id, recording_id)

    def analyze_buffer(self,
                       buffer: AudioSampleBuffer,
                       patient_id: str,
                       recording_id: Optional[str] = None) -> ScreeningResult:
        recording_id = recording_id or str(uuid.uuid4())
        logger.debug(f"Screening recording {recording_id} for patient {patient_id}: {buffer!r}")

        quality = self.quality_checker.check_quality(buffer)
        features = self.extractor.extract(buffer)
        prediction = self.assessor.assess(features, patient_id, recording_id)

        return ScreeningResult(features=features, prediction=prediction, quality=quality)
