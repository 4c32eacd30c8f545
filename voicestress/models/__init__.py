"""Data models and interfaces"""

from voicestress.models.frames import RecordedTake, FrameFeatures
from voicestress.models.features import AggregateFeatures, CalibrationBaseline
from voicestress.models.results import (
    AnalysisRequest,
    RawStressResult,
    Biomarker,
    AnalysisResult
)
from voicestress.models.enums import StatusTier, StressTier, BiomarkerIcon, CalibrationState, AnalysisState
from voicestress.models.interfaces import (
    FrameFeatureSource,
    BaselineStore,
    StressReasoningService
)

__all__ = [
    # Frames
    "RecordedTake",
    "FrameFeatures",
    # Features
    "AggregateFeatures",
    "CalibrationBaseline",
    # Results
    "AnalysisRequest",
    "RawStressResult",
    "Biomarker",
    "AnalysisResult",
    # Enums
    "StatusTier",
    "StressTier",
    "BiomarkerIcon",
    "CalibrationState",
    "AnalysisState",
    # Interfaces
    "FrameFeatureSource",
    "BaselineStore",
    "StressReasoningService",
]
