"""Data models for reasoning-service results and derived biomarkers"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from voicestress.models.enums import StatusTier, StressTier, BiomarkerIcon
from voicestress.models.features import AggregateFeatures, CalibrationBaseline


# Numeric fields of the reasoning-service result, in schema order
RESULT_NUMERIC_FIELDS: Tuple[str, ...] = (
    "stress_level",
    "f0_mean",
    "f0_range",
    "jitter",
    "shimmer",
    "hnr",
    "f1",
    "f2",
    "speech_rate",
    "confidence",
    "snr",
)
RESULT_FIELDS: Tuple[str, ...] = RESULT_NUMERIC_FIELDS + ("ai_summary",)


@dataclass(frozen=True)
class AnalysisRequest:
    """Comparison payload for the reasoning service

    Attributes:
        current: Aggregate of the take being analyzed
        baseline: Snapshot of the calibration baseline, if one exists
        prompt: Natural-language rendering of the comparison
    """
    current: AggregateFeatures
    baseline: Optional[CalibrationBaseline]
    prompt: str

    @property
    def has_baseline(self) -> bool:
        return self.baseline is not None


@dataclass(frozen=True)
class RawStressResult:
    """Validated physiological-style measurements from the reasoning service

    Attributes:
        stress_level: Overall stress score [0, 100]
        f0_mean: Mean fundamental frequency (Hz)
        f0_range: Pitch range (Hz)
        jitter: Frequency perturbation (%)
        shimmer: Amplitude perturbation (%)
        hnr: Harmonics-to-noise ratio (dB)
        f1: First formant (Hz)
        f2: Second formant (Hz)
        speech_rate: Words per minute
        confidence: Confidence of the analysis [0, 100]
        snr: Estimated signal-to-noise ratio (dB)
        ai_summary: Short free-text explanation
    """
    stress_level: float
    f0_mean: float
    f0_range: float
    jitter: float
    shimmer: float
    hnr: float
    f1: float
    f2: float
    speech_rate: float
    confidence: float
    snr: float
    ai_summary: str


@dataclass(frozen=True)
class Biomarker:
    """One normalized, classified, display-ready measurement

    Attributes:
        name: Display name, e.g. "Pitch (F0)"
        formatted_value: Value with unit, e.g. "165 Hz"
        status: Three-tier classification
        normalized_value: Position within the reference range, clamped to [0, 1]
        delta_label: Short comparison hint, e.g. "vs. normal (<1.0%)"
        explanation: What the measurement means
        icon: Icon identifier
    """
    name: str
    formatted_value: str
    status: StatusTier
    normalized_value: float
    delta_label: str
    explanation: str
    icon: BiomarkerIcon

    def __post_init__(self):
        assert 0.0 <= self.normalized_value <= 1.0, "Normalized value must be in [0, 1]"


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one analysis session

    Attributes:
        stress_level: Overall stress score [0, 100]
        stress_tier: Low, moderate or high band of stress_level
        biomarkers: The 8 biomarkers in display order
        confidence: Confidence of the analysis [0, 100]
        snr: Estimated signal-to-noise ratio (dB)
        ai_summary: Short free-text explanation
        has_baseline: Whether a personal baseline was used for comparison
        timestamp: When this result was produced (seconds since epoch)
    """
    stress_level: float
    stress_tier: StressTier
    biomarkers: List[Biomarker]
    confidence: float
    snr: float
    ai_summary: str
    has_baseline: bool
    timestamp: float

    def __post_init__(self):
        assert 0.0 <= self.stress_level <= 100.0, "Stress level must be in [0, 100]"
        assert len(self.biomarkers) == 8, "An analysis always carries 8 biomarkers"
