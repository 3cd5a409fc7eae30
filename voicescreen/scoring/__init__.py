"""Risk scoring over extracted voice features"""

from voicescreen.scoring.thresholds import (
    ClinicalThreshold,
    CLINICAL_THRESHOLDS,
    FEATURE_WEIGHTS
)
from voicescreen.scoring.risk import (
    RiskAssessor,
    PredictionResult,
    FeatureImportance,
    normalize_feature,
    feature_status
)

__all__ = [
    "ClinicalThreshold",
    "CLINICAL_THRESHOLDS",
    "FEATURE_WEIGHTS",
    "RiskAssessor",
    "PredictionResult",
    "FeatureImportance",
    "normalize_feature",
    "feature_status"
]
