"""Data models for recorded takes and per-frame features"""

from dataclasses import dataclass, field
from typing import Tuple
import math


@dataclass(frozen=True)
class RecordedTake:
    """One discrete recorded audio sample

    Attributes:
        data: Encoded audio bytes as captured (e.g. a WebM/Opus blob)
        mime_type: Container MIME type reported by the recorder
    """
    data: bytes
    mime_type: str = "audio/webm"

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class FrameFeatures:
    """Acoustic descriptors of a single analysis frame

    Attributes:
        rms: Root-mean-square energy of the frame
        zcr: Zero crossing rate
        spectral_centroid: Center of mass of the spectrum in Hz
        spectral_flatness: Tonality measure in [0, 1] (1 = noise-like)
        mfcc: Mel-frequency cepstral coefficients, fixed length per session
    """
    rms: float
    zcr: float
    spectral_centroid: float
    spectral_flatness: float
    mfcc: Tuple[float, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Validate frame feature data"""
        assert self.rms >= 0, "RMS must be non-negative"
        assert self.zcr >= 0, "ZCR must be non-negative"
        assert self.spectral_centroid >= 0, "Spectral centroid must be non-negative"
        assert 0.0 <= self.spectral_flatness <= 1.0, "Spectral flatness must be in [0, 1]"
        assert all(math.isfinite(c) for c in self.mfcc), "MFCCs must be finite"
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, "mfcc", tuple(float(c) for c in self.mfcc))
