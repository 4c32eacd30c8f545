"""Enumerations for biomarker classification and session states"""

from enum import Enum


class StatusTier(Enum):
    """Three-tier biomarker classification"""
    GREEN = "green"
    ORANGE = "orange"
    RED = "red"


class StressTier(Enum):
    """Overall stress band derived from stress_level"""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class BiomarkerIcon(Enum):
    """Icon identifiers used by the display layer"""
    SINE_WAVE = "SineWave"
    RANGE = "Range"
    WAVY_LINE = "WavyLine"
    AMPLITUDE = "Amplitude"
    SIGNAL = "Signal"
    CURVE1 = "Curve1"
    CURVE2 = "Curve2"
    SPEEDOMETER = "Speedometer"


class CalibrationState(Enum):
    """States of the calibration flow"""
    IDLE = "idle"
    RECORDING = "recording"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    PROCESSING = "processing"
    SAVED = "saved"
    FAILED = "failed"


class AnalysisState(Enum):
    """States of a single-take analysis"""
    IDLE = "idle"
    RECORDING = "recording"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    ERROR = "error"
