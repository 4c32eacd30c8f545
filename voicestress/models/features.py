"""Data models for aggregated session features and the calibration baseline"""

import json
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from voicestress.errors import BaselineFormatError


# Persisted key -> attribute name. Key order is the serialized order.
SCALAR_KEYS = {
    "rms": "rms",
    "zcr": "zcr",
    "spectralCentroid": "spectral_centroid",
    "spectralFlatness": "spectral_flatness",
}


@dataclass(frozen=True)
class AggregateFeatures:
    """Mean feature vector over the voiced frames of one or more takes

    Attributes:
        rms: Mean RMS energy
        zcr: Mean zero crossing rate
        spectral_centroid: Mean spectral centroid (Hz)
        spectral_flatness: Mean spectral flatness
        mfcc: Element-wise mean of the MFCC vectors
        frame_count: Number of contributing frames (not persisted)
    """
    rms: float
    zcr: float
    spectral_centroid: float
    spectral_flatness: float
    mfcc: Tuple[float, ...] = field(default_factory=tuple)
    frame_count: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "mfcc", tuple(float(c) for c in self.mfcc))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted baseline shape (no metadata)"""
        data: Dict[str, Any] = {key: getattr(self, attr) for key, attr in SCALAR_KEYS.items()}
        data["mfcc"] = list(self.mfcc)
        return data

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Build features from a persisted baseline object

        Raises:
            BaselineFormatError: If a key is missing or a value is not a finite number
        """
        if not isinstance(data, dict):
            raise BaselineFormatError(f"Baseline must be a JSON object, got {type(data).__name__}")

        values = {}
        for key, attr in SCALAR_KEYS.items():
            if key not in data:
                raise BaselineFormatError(f"Baseline is missing '{key}'")
            values[attr] = _finite_number(key, data[key])

        mfcc = data.get("mfcc")
        if not isinstance(mfcc, list):
            raise BaselineFormatError("Baseline 'mfcc' must be a list of numbers")
        values["mfcc"] = tuple(_finite_number(f"mfcc[{i}]", c) for i, c in enumerate(mfcc))

        return cls(**values)

    @classmethod
    def from_json(cls, text: str):
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise BaselineFormatError(f"Baseline is not valid JSON: {e}")
        return cls.from_dict(data)


@dataclass(frozen=True)
class CalibrationBaseline(AggregateFeatures):
    """Calm-voice aggregate saved by a successful calibration"""

    @classmethod
    def from_aggregate(cls, aggregate: AggregateFeatures) -> "CalibrationBaseline":
        return cls(
            rms=aggregate.rms,
            zcr=aggregate.zcr,
            spectral_centroid=aggregate.spectral_centroid,
            spectral_flatness=aggregate.spectral_flatness,
            mfcc=aggregate.mfcc,
            frame_count=aggregate.frame_count,
        )


def _finite_number(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise BaselineFormatError(f"Baseline '{key}' must be a number, got {value!r}")
    if not math.isfinite(value):
        raise BaselineFormatError(f"Baseline '{key}' must be finite, got {value!r}")
    return float(value)
