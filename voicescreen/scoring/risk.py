"""Threshold-based Parkinsonian voice risk scoring

Each feature is mapped to a 0-1 "badness" by piecewise-linear interpolation
between its healthy, warning and critical thresholds, and the weighted sum is
reported as the screening probability. This is a screening heuristic, not a
diagnostic model.
"""

import logging
import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Dict, List, Any, Optional

from voicescreen.core.base import VoiceFeatures
from voicescreen.scoring.thresholds import (
    ClinicalThreshold,
    CLINICAL_THRESHOLDS,
    FEATURE_WEIGHTS,
    LOW_RISK_MAX,
    MEDIUM_RISK_MAX
)

logger = logging.getLogger(__name__)


def normalize_feature(value: float, threshold: ClinicalThreshold) -> float:
    """Map a feature value to [0, 1] (0 = healthy, 1 = pathological)"""
    t = threshold
    if t.higher_is_worse:
        if value <= t.healthy:
            return 0.0
        if value >= t.critical:
            return 1.0
        if value <= t.warning:
            return (value - t.healthy) / (t.warning - t.healthy) * 0.5
        return 0.5 + (value - t.warning) / (t.critical - t.warning) * 0.5

    if value >= t.healthy:
        return 0.0
    if value <= t.critical:
        return 1.0
    if value >= t.warning:
        return (t.healthy - value) / (t.healthy - t.warning) * 0.5
    return 0.5 + (t.warning - value) / (t.warning - t.critical) * 0.5


def feature_status(value: float, threshold: ClinicalThreshold) -> str:
    """'normal', 'borderline' or the threshold's abnormal status"""
    t = threshold
    if t.higher_is_worse:
        if value <= t.healthy:
            return 'normal'
        if value <= t.warning:
            return 'borderline'
        return t.abnormal_status

    if value >= t.healthy:
        return 'normal'
    if value >= t.warning:
        return 'borderline'
    return t.abnormal_status


@dataclass
class FeatureImportance:
    feature: str
    importance: float
    value: float
    status: str


@dataclass
class PredictionResult:
    """Screening outcome for one recording

    Attributes:
        id: Unique prediction id
        recording_id: Recording the features came from
        patient_id: Patient the recording belongs to
        analyzed_at: ISO-8601 UTC timestamp
        probability: Weighted risk score in [0, 1]
        confidence: Signal-quality based confidence in [0.70, 0.95]
        risk_level: 'low', 'medium' or 'high'
        feature_importance: Per-feature weight, value and status
        recommendation: Plain-language advice
    """
    id: str
    recording_id: str
    patient_id: str
    analyzed_at: str
    probability: float
    confidence: float
    risk_level: str
    feature_importance: List[FeatureImportance] = field(default_factory=list)
    recommendation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class RiskAssessor:
    """Weighted-threshold risk scorer consuming VoiceFeatures"""

    def __init__(self,
                 thresholds: Optional[Dict[str, ClinicalThreshold]] = None,
                 weights: Optional[Dict[str, float]] = None):
        self.thresholds = dict(thresholds or CLINICAL_THRESHOLDS)
        self.weights = dict(weights or FEATURE_WEIGHTS)

        if set(self.thresholds) != set(self.weights):
            raise ValueError(
                f"Thresholds {sorted(self.thresholds)} and weights "
                f"{sorted(self.weights)} must cover the same features"
            )
        unknown = set(self.weights) - set(VoiceFeatures.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown voice features: {sorted(unknown)}")

    def normalized_scores(self, features: VoiceFeatures) -> Dict[str, float]:
        return {
            name: normalize_feature(getattr(features, name), threshold)
            for name, threshold in self.thresholds.items()
        }

    def score(self, features: VoiceFeatures) -> float:
        normalized = self.normalized_scores(features)
        return sum(self.weights[name] * normalized[name] for name in self.weights)

    @staticmethod
    def risk_level(probability: float) -> str:
        if probability > MEDIUM_RISK_MAX:
            return 'high'
        if probability > LOW_RISK_MAX:
            return 'medium'
        return 'low'

    @staticmethod
    def confidence(features: VoiceFeatures) -> float:
        """0.70-0.95, rising with loudness and recording length"""
        signal_quality = min(1.0, features.amplitude * 10) * min(1.0, features.duration / 3)
        return 0.70 + signal_quality * 0.25

    def feature_importance(self, features: VoiceFeatures) -> List[FeatureImportance]:
        """Per-feature breakdown sorted by weight, heaviest first"""
        entries = [
            FeatureImportance(
                feature=threshold.label or name,
                importance=self.weights[name],
                value=getattr(features, name),
                status=feature_status(getattr(features, name), threshold),
            )
            for name, threshold in self.thresholds.items()
        ]
        return sorted(entries, key=lambda e: e.importance, reverse=True)

    def recommendation(self,
                       features: VoiceFeatures,
                       risk_level: str,
                       importance: List[FeatureImportance]) -> str:
        if risk_level == 'low':
            healthy = sum(1 for entry in importance if entry.status == 'normal')
            jitter = self.thresholds.get('jitter')
            shimmer = self.thresholds.get('shimmer')
            hnr = self.thresholds.get('hnr')
            text = (f"Your voice analysis shows {healthy}/{len(importance)} features "
                    f"within healthy ranges. ")
            if jitter and shimmer and hnr:
                text += (f"Jitter: {features.jitter:.2f}% (healthy < {jitter.healthy:g}%), "
                         f"Shimmer: {features.shimmer:.2f}% (healthy < {shimmer.healthy:g}%), "
                         f"HNR: {features.hnr:.1f}dB (healthy > {hnr.healthy:g}dB). ")
            return text + "Continue regular monitoring and maintain healthy vocal habits."

        if risk_level == 'medium':
            return ("Some voice characteristics show mild variations from typical ranges. "
                    "This does not indicate a diagnosis but suggests continued monitoring. "
                    "Consider discussing these results with your healthcare provider during "
                    "your next routine visit. Factors like fatigue, stress, or recent illness "
                    "can affect voice measurements.")

        return ("The voice analysis indicates patterns that may warrant further clinical "
                "evaluation. Please note: This is a screening tool, not a diagnostic. "
                "Schedule an appointment with your neurologist for a comprehensive "
                "assessment including clinical examination.")

    def assess(self,
               features: VoiceFeatures,
               patient_id: str,
               recording_id: str) -> PredictionResult:
        """Score a feature record and build the full prediction"""
        probability = self.score(features)
        risk_level = self.risk_level(probability)
        importance = self.feature_importance(features)

        logger.info(f"Recording {recording_id}: probability={probability:.3f}, "
                    f"risk={risk_level}")

        return PredictionResult(
            id=str(uuid.uuid4()),
            recording_id=recording_id,
            patient_id=patient_id,
            analyzed_at=datetime.now(timezone.utc).isoformat(),
            probability=probability,
            confidence=self.confidence(features),
            risk_level=risk_level,
            feature_importance=importance,
            recommendation=self.recommendation(features, risk_level, importance),
        )
