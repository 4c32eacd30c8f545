"""Calibration Session

State machine for recording the calm-voice baseline:

    IDLE -> RECORDING -> (ACCEPTED | REJECTED) -> IDLE     repeated until 3 takes
    IDLE -> PROCESSING -> (SAVED | FAILED -> IDLE)

A take is accepted only if the captured blob is larger than the minimum size;
otherwise it is discarded without counting. Processing extracts every accepted
take sequentially, pools the voiced frames of all takes, and aggregates once.
On failure the session returns to IDLE with the error kept in ``last_error``
and the accepted takes preserved, so the user can retry without re-recording.
On success the baseline overwrites the store and is emitted exactly once.

ACCEPTED, REJECTED and FAILED are transient: the session passes through them
and settles in IDLE within the same call. Every transition, transient ones
included, is reported to the optional ``on_state_change`` callback.
"""

import logging
from typing import Callable, List, Optional

from voicestress.analysis.aggregator import FeatureAggregator
from voicestress.errors import (
    CalibrationStateError,
    InvalidTakeError,
    VoiceStressError,
)
from voicestress.models.enums import CalibrationState
from voicestress.models.features import CalibrationBaseline
from voicestress.models.frames import FrameFeatures, RecordedTake
from voicestress.models.interfaces import BaselineStore, FrameFeatureSource
from voicestress.config.config_loader import config


logger = logging.getLogger(__name__)

REQUIRED_TAKES = 3
MIN_TAKE_BYTES = 2000


class CalibrationSession:
    """Owns the in-progress calibration: accepted takes, counter and state.

    Attributes:
        state: Current CalibrationState
        last_error: Error surfaced by the last failed processing, if any
        required_takes: Accepted takes needed before processing
        min_take_bytes: Takes of this size or smaller are rejected
        on_state_change: Optional callback receiving every new state
    """

    def __init__(
        self,
        extractor: FrameFeatureSource,
        aggregator: FeatureAggregator,
        store: BaselineStore,
        on_complete: Optional[Callable[[str], None]] = None,
        on_state_change: Optional[Callable[[CalibrationState], None]] = None,
        required_takes: int = None,
        min_take_bytes: int = None
    ):
        self.extractor = extractor
        self.aggregator = aggregator
        self.store = store
        self.on_complete = on_complete
        self.on_state_change = on_state_change
        self.required_takes = required_takes or config.get('calibration.required_takes', REQUIRED_TAKES)
        self.min_take_bytes = min_take_bytes if min_take_bytes is not None else \
            config.get('calibration.min_take_bytes', MIN_TAKE_BYTES)

        self.state = CalibrationState.IDLE
        self.last_error: Optional[VoiceStressError] = None
        self._accepted: List[RecordedTake] = []

    def _set_state(self, state: CalibrationState) -> None:
        self.state = state
        logger.debug(f"Calibration state: {state.value}")
        if self.on_state_change is not None:
            self.on_state_change(state)

    @property
    def takes_accepted(self) -> int:
        return len(self._accepted)

    @property
    def is_ready(self) -> bool:
        """Whether enough takes are accepted to process"""
        return self.takes_accepted >= self.required_takes

    def start_take(self) -> None:
        """Begin recording a take.

        Raises:
            CalibrationStateError: If not idle or all takes are already recorded
        """
        if self.state != CalibrationState.IDLE:
            raise CalibrationStateError(f"Cannot start a take while {self.state.value}")
        if self.is_ready:
            raise CalibrationStateError(f"All {self.required_takes} calibration takes are recorded")

        self.last_error = None
        self._set_state(CalibrationState.RECORDING)
        logger.info(f"Recording calibration take {self.takes_accepted + 1}/{self.required_takes}")

    def finish_take(self, take: RecordedTake) -> bool:
        """Finish the current take, accepting or rejecting it by size.

        Args:
            take: The captured recording

        Returns:
            True if the take was accepted and counted

        Raises:
            CalibrationStateError: If no take is being recorded
        """
        if self.state != CalibrationState.RECORDING:
            raise CalibrationStateError(f"No take is being recorded (state={self.state.value})")

        if take.size > self.min_take_bytes:
            self._accepted.append(take)
            self._set_state(CalibrationState.ACCEPTED)
            logger.info(f"Calibration take accepted ({take.size} bytes), "
                        f"{self.takes_accepted}/{self.required_takes}")
        else:
            self._set_state(CalibrationState.REJECTED)
            logger.warning(str(InvalidTakeError(take.size, self.min_take_bytes)))

        accepted = self.state == CalibrationState.ACCEPTED
        self._set_state(CalibrationState.IDLE)
        return accepted

    async def process(self) -> str:
        """Aggregate all accepted takes into a new baseline and save it.

        Takes are decoded and analyzed one after another, never concurrently,
        so the pooled frame order is deterministic.

        Returns:
            The serialized baseline JSON (also passed to ``on_complete``)

        Raises:
            CalibrationStateError: If not idle or too few takes are accepted
            InsufficientSignalError: If the pooled voiced frames are too few
            AudioDecodeError: If an accepted take cannot be decoded
            BaselineStoreError: If the baseline cannot be persisted
        """
        if self.state != CalibrationState.IDLE:
            raise CalibrationStateError(f"Cannot process while {self.state.value}")
        if not self.is_ready:
            raise CalibrationStateError(f"Please record {self.required_takes} samples.")

        self._set_state(CalibrationState.PROCESSING)
        logger.info(f"Processing {self.takes_accepted} calibration takes")

        try:
            takes_frames: List[List[FrameFeatures]] = []
            for take in self._accepted:
                takes_frames.append(await self.extractor.extract_take(take))

            aggregate = self.aggregator.aggregate_takes(takes_frames)
        except VoiceStressError as e:
            logger.warning(f"Calibration failed: {e}")
            self._fail(e)
            raise

        baseline = CalibrationBaseline.from_aggregate(aggregate)
        try:
            await self.store.put(baseline)
        except VoiceStressError as e:
            logger.error(f"Failed to persist calibration baseline: {e}")
            self._fail(e)
            raise
        self._set_state(CalibrationState.SAVED)

        baseline_json = baseline.to_json()
        logger.info(f"Calibration baseline saved from {aggregate.frame_count} voiced frames")

        if self.on_complete is not None:
            self.on_complete(baseline_json)

        return baseline_json

    def _fail(self, error: VoiceStressError) -> None:
        # Accepted takes are kept so the user can retry processing
        self.last_error = error
        self._set_state(CalibrationState.FAILED)
        self._set_state(CalibrationState.IDLE)

    def reset(self) -> None:
        """Discard accepted takes and start over"""
        self._accepted.clear()
        self.last_error = None
        self._set_state(CalibrationState.IDLE)
        logger.info("Calibration session reset")
