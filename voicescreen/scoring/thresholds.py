"""Clinical reference thresholds for Parkinsonian voice markers

References: Tsanas et al. and Little et al. studies on PD voice biomarkers.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class ClinicalThreshold:
    """Healthy / warning / critical boundaries of one voice feature

    Attributes:
        healthy: Boundary of the healthy range
        warning: Boundary between borderline and pathological
        critical: Value at which the feature counts as fully pathological
        higher_is_worse: True for jitter-like features, False for HNR-like ones
        label: Display name
        unit: Display unit
        abnormal_status: Status reported beyond the warning boundary
    """
    healthy: float
    warning: float
    critical: float
    higher_is_worse: bool = True
    label: str = ""
    unit: str = ""
    abnormal_status: str = "elevated"

    def __post_init__(self):
        if self.higher_is_worse:
            ordered = self.healthy < self.warning < self.critical
        else:
            ordered = self.healthy > self.warning > self.critical
        if not ordered:
            raise ValueError(
                f"Thresholds for {self.label or 'feature'} are not monotonic: "
                f"({self.healthy}, {self.warning}, {self.critical})"
            )


CLINICAL_THRESHOLDS: Dict[str, ClinicalThreshold] = {
    # Healthy < 1.04 %, PD typically > 1.5 %
    'jitter': ClinicalThreshold(1.04, 1.5, 2.5, True, 'Jitter', '%'),
    # Healthy < 3.81 %, PD typically > 5 %
    'shimmer': ClinicalThreshold(3.81, 5.0, 8.0, True, 'Shimmer', '%'),
    # Healthy > 20 dB, PD typically < 15 dB
    'hnr': ClinicalThreshold(20.0, 15.0, 10.0, False, 'HNR', 'dB', 'low'),
    # PD often shows reduced (monotone) pitch variation
    'pitch_variation': ClinicalThreshold(15.0, 8.0, 5.0, False, 'Pitch Variation', 'Hz', 'reduced'),
}

FEATURE_WEIGHTS: Dict[str, float] = {
    'jitter': 0.30,
    'shimmer': 0.28,
    'hnr': 0.25,
    'pitch_variation': 0.17,
}

# Upper probability bounds of the low and medium risk bands
LOW_RISK_MAX = 0.40
MEDIUM_RISK_MAX = 0.65
