"""Feature Aggregator

This module reduces per-frame acoustic features into one stable per-session
summary. Near-silent frames (breath noise, gaps between words) are dropped
first so the means describe voiced speech only.

The aggregation is a pure function of its input: scalar fields are unweighted
arithmetic means, the MFCC vector is averaged element-wise, and every frame
weighs the same regardless of which take it came from. Sums are accumulated
left to right so repeated calls are bit-identical.
"""

import logging
from typing import Iterable, List, Sequence

from voicestress.errors import InsufficientSignalError, FeatureContractError
from voicestress.models.frames import FrameFeatures
from voicestress.models.features import AggregateFeatures
from voicestress.config.config_loader import config


logger = logging.getLogger(__name__)

ENERGY_FLOOR = 0.001
MIN_FRAMES = 20


class FeatureAggregator:
    """Filters silent frames and averages the rest into AggregateFeatures.

    Attributes:
        energy_floor: Frames with rms at or below this value are silence
        min_frames: Minimum number of voiced frames for a valid aggregate
    """

    def __init__(self, energy_floor: float = None, min_frames: int = None):
        self.energy_floor = energy_floor if energy_floor is not None else \
            config.get('aggregation.energy_floor', ENERGY_FLOOR)
        self.min_frames = min_frames if min_frames is not None else \
            config.get('aggregation.min_frames', MIN_FRAMES)

    def keep(self, frame: FrameFeatures) -> bool:
        """Silence predicate: keep frames strictly above the energy floor"""
        return frame.rms > self.energy_floor

    def filter_silence(self, frames: Iterable[FrameFeatures]) -> List[FrameFeatures]:
        """Drop near-silent frames, preserving order"""
        return [frame for frame in frames if self.keep(frame)]

    def aggregate(self, frames: Sequence[FrameFeatures]) -> AggregateFeatures:
        """Average already-filtered frames into one feature vector.

        Args:
            frames: Voiced frames, possibly pooled from several takes

        Returns:
            AggregateFeatures with per-field means and frame_count

        Raises:
            InsufficientSignalError: If fewer than min_frames frames are given
            FeatureContractError: If MFCC vector lengths differ between frames
        """
        n = len(frames)
        if n < self.min_frames:
            logger.warning(f"Insufficient signal: {n} voiced frames, need {self.min_frames}")
            raise InsufficientSignalError(n, self.min_frames)

        num_mfcc = len(frames[0].mfcc)
        for index, frame in enumerate(frames):
            if len(frame.mfcc) != num_mfcc:
                raise FeatureContractError(
                    f"Frame {index} has {len(frame.mfcc)} MFCCs, expected {num_mfcc}"
                )

        mfcc_sums = [0.0] * num_mfcc
        for frame in frames:
            for i, coefficient in enumerate(frame.mfcc):
                mfcc_sums[i] += coefficient

        aggregate = AggregateFeatures(
            rms=sum(f.rms for f in frames) / n,
            zcr=sum(f.zcr for f in frames) / n,
            spectral_centroid=sum(f.spectral_centroid for f in frames) / n,
            spectral_flatness=sum(f.spectral_flatness for f in frames) / n,
            mfcc=tuple(total / n for total in mfcc_sums),
            frame_count=n,
        )

        logger.debug(f"Aggregated {n} frames: rms={aggregate.rms:.4f}, "
                     f"centroid={aggregate.spectral_centroid:.2f}")
        return aggregate

    def aggregate_takes(self, takes_frames: Iterable[Sequence[FrameFeatures]]) -> AggregateFeatures:
        """Filter each take, pool the voiced frames in take order, aggregate once.

        Args:
            takes_frames: Unfiltered frames of each take

        Returns:
            One AggregateFeatures over all voiced frames of all takes

        Raises:
            InsufficientSignalError: If the pooled voiced frames are too few
        """
        pooled: List[FrameFeatures] = []
        for take_index, frames in enumerate(takes_frames):
            voiced = self.filter_silence(frames)
            logger.debug(f"Take {take_index}: kept {len(voiced)} of {len(frames)} frames")
            pooled.extend(voiced)

        return self.aggregate(pooled)
