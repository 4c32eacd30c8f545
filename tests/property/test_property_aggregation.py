"""Property-based tests for silence filtering and aggregation

Properties:
    - Fewer than min_frames voiced frames never yields an aggregate
    - Aggregated fields are the per-field arithmetic means of the voiced frames
    - Aggregation is deterministic
    - Pooling takes is equivalent to aggregating their concatenated voiced frames
"""

import math

import pytest
from hypothesis import given, strategies as st

from voicestress.analysis.aggregator import FeatureAggregator
from voicestress.errors import InsufficientSignalError
from voicestress.models.frames import FrameFeatures


NUM_MFCC = 13


@st.composite
def frame_strategy(draw, voiced=None):
    """Generate random FrameFeatures.

    Args:
        voiced: True for frames above the energy floor, False for silent frames,
            None for either
    """
    if voiced is True:
        rms = draw(st.floats(min_value=0.0011, max_value=1.0))
    elif voiced is False:
        rms = draw(st.floats(min_value=0.0, max_value=0.001))
    else:
        rms = draw(st.floats(min_value=0.0, max_value=1.0))

    return FrameFeatures(
        rms=rms,
        zcr=draw(st.floats(min_value=0.0, max_value=0.5)),
        spectral_centroid=draw(st.floats(min_value=0.0, max_value=8000.0)),
        spectral_flatness=draw(st.floats(min_value=0.0, max_value=1.0)),
        mfcc=tuple(draw(st.lists(st.floats(min_value=-500.0, max_value=500.0),
                                 min_size=NUM_MFCC, max_size=NUM_MFCC))),
    )


aggregator = FeatureAggregator(energy_floor=0.001, min_frames=20)


@given(st.lists(frame_strategy(), min_size=0, max_size=80))
def test_property_minimum_frames(frames):
    """Aggregation succeeds iff at least 20 frames survive the silence filter"""
    voiced = aggregator.filter_silence(frames)

    if len(voiced) < 20:
        with pytest.raises(InsufficientSignalError):
            aggregator.aggregate(voiced)
    else:
        assert aggregator.aggregate(voiced).frame_count == len(voiced)


@given(st.lists(frame_strategy(voiced=True), min_size=20, max_size=60))
def test_property_per_field_means(frames):
    """Each field equals the unweighted mean over frames"""
    aggregate = aggregator.aggregate(frames)
    n = len(frames)

    assert math.isclose(aggregate.rms, sum(f.rms for f in frames) / n, rel_tol=1e-9, abs_tol=1e-12)
    assert math.isclose(aggregate.zcr, sum(f.zcr for f in frames) / n, rel_tol=1e-9, abs_tol=1e-12)
    assert math.isclose(aggregate.spectral_centroid,
                        sum(f.spectral_centroid for f in frames) / n, rel_tol=1e-9, abs_tol=1e-9)
    assert math.isclose(aggregate.spectral_flatness,
                        sum(f.spectral_flatness for f in frames) / n, rel_tol=1e-9, abs_tol=1e-12)

    assert len(aggregate.mfcc) == NUM_MFCC
    for i in range(NUM_MFCC):
        expected = sum(f.mfcc[i] for f in frames) / n
        assert math.isclose(aggregate.mfcc[i], expected, rel_tol=1e-9, abs_tol=1e-9)


@given(st.lists(frame_strategy(voiced=True), min_size=20, max_size=60))
def test_property_mean_within_bounds(frames):
    """A mean never leaves the range of its inputs"""
    aggregate = aggregator.aggregate(frames)

    assert min(f.rms for f in frames) - 1e-12 <= aggregate.rms <= max(f.rms for f in frames) + 1e-12
    assert 0.0 <= aggregate.spectral_flatness <= 1.0 + 1e-12


@given(st.lists(frame_strategy(voiced=True), min_size=20, max_size=60))
def test_property_deterministic(frames):
    """Identical input yields bit-identical output"""
    assert aggregator.aggregate(frames) == aggregator.aggregate(list(frames))


@given(st.lists(st.lists(frame_strategy(), min_size=0, max_size=40), min_size=1, max_size=4))
def test_property_pooling_equals_concatenation(takes):
    """Pooling takes equals aggregating the concatenation of their voiced frames"""
    concatenated = [f for take in takes for f in aggregator.filter_silence(take)]

    if len(concatenated) < 20:
        with pytest.raises(InsufficientSignalError):
            aggregator.aggregate_takes(takes)
    else:
        assert aggregator.aggregate_takes(takes) == aggregator.aggregate(concatenated)


@given(st.lists(frame_strategy(voiced=False), min_size=0, max_size=100))
def test_property_silence_never_counts(frames):
    """Frames at or below the energy floor are always dropped"""
    assert aggregator.filter_silence(frames) == []
