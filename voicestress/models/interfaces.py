"""Base interfaces for the pipeline's external collaborators"""

from abc import ABC, abstractmethod
from typing import List, Optional
from voicestress.models.frames import FrameFeatures, RecordedTake
from voicestress.models.features import CalibrationBaseline
from voicestress.models.results import AnalysisRequest, RawStressResult


class FrameFeatureSource(ABC):
    """Interface for per-frame acoustic feature extraction"""

    @abstractmethod
    async def extract_take(self, take: RecordedTake) -> List[FrameFeatures]:
        """Decode a recorded take and extract features for every frame

        The whole buffer is processed before returning; no partial results.

        Args:
            take: Recorded take to analyze

        Returns:
            Ordered per-frame features (unfiltered)

        Raises:
            AudioDecodeError: If the take cannot be decoded
        """
        pass


class BaselineStore(ABC):
    """Single-slot store for the calibration baseline"""

    @abstractmethod
    async def get(self) -> Optional[CalibrationBaseline]:
        """Get a snapshot of the current baseline

        Returns:
            The baseline or None if no calibration has been saved
        """
        pass

    @abstractmethod
    async def put(self, baseline: CalibrationBaseline) -> None:
        """Replace the current baseline wholesale"""
        pass

    async def close(self) -> None:
        """Release backend resources; a no-op for stores that hold none"""
        pass


class StressReasoningService(ABC):
    """Interface for the external stress reasoning service"""

    @abstractmethod
    async def submit(self, request: AnalysisRequest) -> RawStressResult:
        """Submit a comparison request

        Args:
            request: Current aggregate plus optional baseline

        Returns:
            Validated raw stress result

        Raises:
            ServiceUnavailableError: If the call fails or times out
            ServiceSchemaViolationError: If the response breaks the result schema
        """
        pass
