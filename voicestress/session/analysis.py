"""Analysis Session

Runs one voice-stress analysis from a recorded take to the 8 biomarkers:

    IDLE -> RECORDING -> ANALYZING -> (COMPLETE | ERROR)

The take is decoded and aggregated, a snapshot of the baseline is taken, the
comparison request is sent to the reasoning service, and the validated result
is normalized. Every failure leaves the session in ERROR with ``last_error``
set and no partial result; a new recording can start from ERROR.

The reasoning-service call is not cancellable mid-flight. ``abandon()`` stops
waiting for it: the call runs to completion under ``asyncio.shield`` and its
late response or error is discarded because its run id is no longer current.
"""

import asyncio
import functools
import logging
import time
from typing import Optional

from voicestress.analysis.aggregator import FeatureAggregator
from voicestress.analysis.biomarkers import BiomarkerNormalizer, classify_stress
from voicestress.analysis.request_builder import AnalysisRequestBuilder
from voicestress.errors import AnalysisStateError, VoiceStressError
from voicestress.models.enums import AnalysisState
from voicestress.models.frames import RecordedTake
from voicestress.models.interfaces import BaselineStore, FrameFeatureSource, StressReasoningService
from voicestress.models.results import AnalysisRequest, AnalysisResult, RawStressResult


logger = logging.getLogger(__name__)


class AnalysisSession:
    """Owns the state of the current analysis.

    Attributes:
        state: Current AnalysisState
        last_error: Error that put the session into ERROR, if any
        latest_result: Most recent completed result (cached)
    """

    def __init__(
        self,
        extractor: FrameFeatureSource,
        aggregator: FeatureAggregator,
        store: BaselineStore,
        service: StressReasoningService,
        builder: AnalysisRequestBuilder = None,
        normalizer: BiomarkerNormalizer = None
    ):
        self.extractor = extractor
        self.aggregator = aggregator
        self.store = store
        self.service = service
        self.builder = builder or AnalysisRequestBuilder()
        self.normalizer = normalizer or BiomarkerNormalizer()

        self.state = AnalysisState.IDLE
        self.last_error: Optional[VoiceStressError] = None
        self.latest_result: Optional[AnalysisResult] = None
        self._run_id = 0

    def start_recording(self) -> None:
        """Begin recording a take; allowed from any state except ANALYZING."""
        if self.state == AnalysisState.ANALYZING:
            raise AnalysisStateError("An analysis is already in progress")
        self.state = AnalysisState.RECORDING
        self.last_error = None

    def abandon(self) -> None:
        """Stop waiting for the current analysis and return to IDLE.

        The in-flight service call is not aborted; its response is dropped.
        """
        if self.state == AnalysisState.ANALYZING:
            logger.info(f"Abandoning analysis run {self._run_id}")
        self._run_id += 1
        self.state = AnalysisState.IDLE

    def _on_service_done(self, run_id: int, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        # Retrieve the outcome so a late failure is not reported as unhandled
        error = task.exception()
        if run_id != self._run_id:
            outcome = f"error: {error}" if error else "result"
            logger.warning(f"Discarding late reasoning-service {outcome} for abandoned run {run_id}")

    async def _submit(self, request: AnalysisRequest, run_id: int) -> RawStressResult:
        task = asyncio.ensure_future(self.service.submit(request))
        task.add_done_callback(functools.partial(self._on_service_done, run_id))
        return await asyncio.shield(task)

    async def analyze(self, take: RecordedTake) -> Optional[AnalysisResult]:
        """Analyze a recorded take.

        Args:
            take: The captured recording

        Returns:
            AnalysisResult, or None if the run was abandoned before it finished

        Raises:
            AnalysisStateError: If another analysis is in progress
            InsufficientSignalError: If too little voiced speech was captured
            AudioDecodeError: If the take cannot be decoded
            ServiceUnavailableError: If the reasoning service call fails
            ServiceSchemaViolationError: If the service response is malformed
            BaselineStoreError: If the stored baseline cannot be read
        """
        if self.state == AnalysisState.ANALYZING:
            raise AnalysisStateError("An analysis is already in progress")

        self._run_id += 1
        run_id = self._run_id
        self.state = AnalysisState.ANALYZING
        self.last_error = None
        logger.info(f"Analysis run {run_id} started ({take.size} bytes)")

        try:
            frames = await self.extractor.extract_take(take)
            aggregate = self.aggregator.aggregate(self.aggregator.filter_silence(frames))

            baseline = await self.store.get()
            request = self.builder.build(aggregate, baseline)
            logger.debug(f"Analysis request: {self.builder.to_payload(request)}")

            raw = await self._submit(request, run_id)
            biomarkers = self.normalizer.normalize(raw)
        except VoiceStressError as e:
            if run_id != self._run_id:
                logger.info(f"Analysis run {run_id} failed after being abandoned, error dropped: {e}")
                return None
            self.state = AnalysisState.ERROR
            self.last_error = e
            logger.warning(f"Analysis run {run_id} failed: {e}")
            raise
        except asyncio.CancelledError:
            if run_id == self._run_id:
                self.abandon()
            raise

        if run_id != self._run_id:
            logger.info(f"Analysis run {run_id} finished after being abandoned, result dropped")
            return None

        result = AnalysisResult(
            stress_level=raw.stress_level,
            stress_tier=classify_stress(raw.stress_level),
            biomarkers=biomarkers,
            confidence=raw.confidence,
            snr=raw.snr,
            ai_summary=raw.ai_summary,
            has_baseline=request.has_baseline,
            timestamp=time.time(),
        )

        self.latest_result = result
        self.state = AnalysisState.COMPLETE
        logger.info(f"Analysis run {run_id} complete: stress_level={result.stress_level:.0f} "
                    f"({result.stress_tier.value}), "
                    f"baseline={'yes' if result.has_baseline else 'no'}")
        return result

    def get_latest_result(self) -> Optional[AnalysisResult]:
        """Get the most recent completed analysis result"""
        return self.latest_result
