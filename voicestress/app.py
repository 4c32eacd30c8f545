"""Application Orchestrator

Wires the pipeline components together and owns the baseline store.
"""

import logging
from typing import Callable, Optional

from voicestress.analysis.aggregator import FeatureAggregator
from voicestress.analysis.extractor import LibrosaFeatureExtractor
from voicestress.models.features import CalibrationBaseline
from voicestress.models.frames import RecordedTake
from voicestress.models.interfaces import BaselineStore, FrameFeatureSource, StressReasoningService
from voicestress.models.results import AnalysisResult
from voicestress.service.reasoning import OpenAIStressService
from voicestress.session.analysis import AnalysisSession
from voicestress.session.calibration import CalibrationSession
from voicestress.storage.baseline_store import create_baseline_store


logger = logging.getLogger(__name__)


class VoiceStressApp:
    """Main orchestrator for calibration and analysis.

    Attributes:
        store: Single-slot baseline store
        extractor: Per-frame feature source
        aggregator: Silence filter and feature aggregator
        service: Stress reasoning service
        analysis: Analysis session (one at a time)
        baseline_json: Serialized baseline as last loaded or saved
    """

    def __init__(
        self,
        store: BaselineStore = None,
        extractor: FrameFeatureSource = None,
        aggregator: FeatureAggregator = None,
        service: StressReasoningService = None
    ):
        logger.info("Initializing VoiceStressApp...")

        self.store = store or create_baseline_store()
        self.extractor = extractor or LibrosaFeatureExtractor()
        self.aggregator = aggregator or FeatureAggregator()
        self.service = service or OpenAIStressService()

        self.analysis = AnalysisSession(
            extractor=self.extractor,
            aggregator=self.aggregator,
            store=self.store,
            service=self.service,
        )
        self.baseline_json: Optional[str] = None

        logger.info("VoiceStressApp initialized successfully")

    async def load_baseline(self) -> Optional[CalibrationBaseline]:
        """Load any previously persisted baseline at start-up

        Raises:
            BaselineFormatError: If the stored baseline is corrupt
            BaselineStoreError: If the store cannot be read
        """
        baseline = await self.store.get()
        if baseline is None:
            logger.info("No calibration baseline stored")
            self.baseline_json = None
        else:
            logger.info("Loaded stored calibration baseline")
            self.baseline_json = baseline.to_json()
        return baseline

    @property
    def has_baseline(self) -> bool:
        return self.baseline_json is not None

    def _on_calibration_complete(self, baseline_json: str) -> None:
        self.baseline_json = baseline_json

    def start_calibration(self, on_complete: Callable[[str], None] = None) -> CalibrationSession:
        """Open a fresh calibration session.

        Args:
            on_complete: Optional extra callback receiving the baseline JSON

        Returns:
            A new CalibrationSession writing into this app's store
        """
        def complete(baseline_json: str) -> None:
            self._on_calibration_complete(baseline_json)
            if on_complete is not None:
                on_complete(baseline_json)

        return CalibrationSession(
            extractor=self.extractor,
            aggregator=self.aggregator,
            store=self.store,
            on_complete=complete,
        )

    async def calibrate(self, *takes: RecordedTake) -> str:
        """Run a full calibration from already-recorded takes.

        Takes that are too small are rejected and not counted.

        Returns:
            The serialized baseline JSON

        Raises:
            CalibrationStateError: If fewer takes than required were accepted
            InsufficientSignalError: If the takes hold too little voiced speech
        """
        session = self.start_calibration()
        for take in takes:
            if session.is_ready:
                logger.warning("Ignoring extra calibration take")
                break
            session.start_take()
            session.finish_take(take)
        return await session.process()

    async def analyze(self, take: RecordedTake) -> Optional[AnalysisResult]:
        """Analyze one recorded take against the current baseline"""
        self.analysis.start_recording()
        return await self.analysis.analyze(take)

    async def close(self) -> None:
        """Release the baseline store's backend connection"""
        await self.store.close()
        logger.info("VoiceStressApp closed")
