"""Unit tests for biomarker normalization"""

import pytest

from voicestress.analysis.biomarkers import (
    BiomarkerNormalizer,
    BIOMARKER_RULES,
    STRESS_TIER_LABELS,
    clamp_normalize,
    classify_stress,
    split_groups,
)
from voicestress.models.enums import StatusTier, StressTier, BiomarkerIcon


@pytest.fixture
def normalizer():
    return BiomarkerNormalizer()


def _by_name(biomarkers):
    return {b.name: b for b in biomarkers}


def test_eight_biomarkers_in_order(normalizer, make_raw_result):
    biomarkers = normalizer.normalize(make_raw_result())

    assert [b.name for b in biomarkers] == [
        "Pitch (F0)",
        "Pitch Range",
        "Jitter",
        "Shimmer",
        "Voice Quality (HNR)",
        "Formant F1",
        "Formant F2",
        "Speech Rate",
    ]
    assert [b.icon for b in biomarkers] == [
        BiomarkerIcon.SINE_WAVE,
        BiomarkerIcon.RANGE,
        BiomarkerIcon.WAVY_LINE,
        BiomarkerIcon.AMPLITUDE,
        BiomarkerIcon.SIGNAL,
        BiomarkerIcon.CURVE1,
        BiomarkerIcon.CURVE2,
        BiomarkerIcon.SPEEDOMETER,
    ]


def test_reference_example(normalizer, make_raw_result):
    biomarkers = _by_name(normalizer.normalize(
        make_raw_result(f0_mean=165.0, hnr=17.0, speech_rate=170.0)
    ))

    pitch = biomarkers["Pitch (F0)"]
    assert pitch.formatted_value == "165 Hz"
    assert pitch.status == StatusTier.ORANGE
    assert pitch.normalized_value == pytest.approx(0.70)

    hnr = biomarkers["Voice Quality (HNR)"]
    assert hnr.formatted_value == "17.0 dB"
    assert hnr.status == StatusTier.RED

    rate = biomarkers["Speech Rate"]
    assert rate.formatted_value == "170 WPM"
    assert rate.status == StatusTier.ORANGE


def test_value_formats(normalizer, make_raw_result):
    biomarkers = _by_name(normalizer.normalize(
        make_raw_result(f0_range=62.4, jitter=0.854, shimmer=3.1, f1=712.6, f2=1480.2)
    ))
    assert biomarkers["Pitch Range"].formatted_value == "62 Hz"
    assert biomarkers["Jitter"].formatted_value == "0.85%"
    assert biomarkers["Shimmer"].formatted_value == "3.10%"
    assert biomarkers["Formant F1"].formatted_value == "713 Hz"
    assert biomarkers["Formant F2"].formatted_value == "1480 Hz"


@pytest.mark.parametrize("field,name,value,expected", [
    ("f0_mean", "Pitch (F0)", 150.0, StatusTier.GREEN),
    ("f0_mean", "Pitch (F0)", 150.5, StatusTier.ORANGE),
    ("f0_range", "Pitch Range", 75.0, StatusTier.ORANGE),
    ("f0_range", "Pitch Range", 76.0, StatusTier.RED),
    ("jitter", "Jitter", 1.0, StatusTier.GREEN),
    ("jitter", "Jitter", 1.2, StatusTier.ORANGE),
    ("shimmer", "Shimmer", 3.5, StatusTier.GREEN),
    ("shimmer", "Shimmer", 3.6, StatusTier.ORANGE),
    ("hnr", "Voice Quality (HNR)", 17.9, StatusTier.RED),
    ("hnr", "Voice Quality (HNR)", 18.0, StatusTier.ORANGE),
    ("hnr", "Voice Quality (HNR)", 19.9, StatusTier.ORANGE),
    ("hnr", "Voice Quality (HNR)", 20.0, StatusTier.GREEN),
    ("f1", "Formant F1", 750.0, StatusTier.ORANGE),
    ("f1", "Formant F1", 751.0, StatusTier.RED),
    ("f2", "Formant F2", 1500.0, StatusTier.ORANGE),
    ("f2", "Formant F2", 1501.0, StatusTier.RED),
    ("speech_rate", "Speech Rate", 165.0, StatusTier.GREEN),
    ("speech_rate", "Speech Rate", 166.0, StatusTier.ORANGE),
])
def test_threshold_boundaries(normalizer, make_raw_result, field, name, value, expected):
    biomarkers = _by_name(normalizer.normalize(make_raw_result(**{field: value})))
    assert biomarkers[name].status == expected


def test_clamping_outside_reference_range(normalizer, make_raw_result):
    biomarkers = _by_name(normalizer.normalize(
        make_raw_result(f0_mean=1000.0, f0_range=-20.0, hnr=90.0, speech_rate=0.0)
    ))
    assert biomarkers["Pitch (F0)"].normalized_value == 1.0
    assert biomarkers["Pitch Range"].normalized_value == 0.0
    assert biomarkers["Voice Quality (HNR)"].normalized_value == 1.0
    assert biomarkers["Speech Rate"].normalized_value == 0.0


def test_clamp_normalize():
    assert clamp_normalize(0.0, 0.0, 2.0) == 0.0
    assert clamp_normalize(1.0, 0.0, 2.0) == 0.5
    assert clamp_normalize(3.0, 0.0, 2.0) == 1.0
    assert clamp_normalize(-1.0, 0.0, 2.0) == 0.0


def test_static_text(normalizer, make_raw_result):
    biomarkers = normalizer.normalize(make_raw_result())
    for biomarker, rule in zip(biomarkers, BIOMARKER_RULES):
        assert biomarker.delta_label == rule.delta_label
        assert biomarker.explanation
    assert _by_name(biomarkers)["Jitter"].delta_label == "vs. normal (<1.0%)"


def test_split_groups(normalizer, make_raw_result):
    acoustic, articulation = split_groups(normalizer.normalize(make_raw_result()))

    assert [b.name for b in acoustic] == [
        "Pitch (F0)", "Pitch Range", "Jitter", "Shimmer", "Voice Quality (HNR)"
    ]
    assert [b.name for b in articulation] == ["Formant F1", "Formant F2", "Speech Rate"]


@pytest.mark.parametrize("stress_level,expected", [
    (0.0, StressTier.LOW),
    (33.9, StressTier.LOW),
    (34.0, StressTier.MODERATE),
    (66.9, StressTier.MODERATE),
    (67.0, StressTier.HIGH),
    (100.0, StressTier.HIGH),
])
def test_classify_stress(stress_level, expected):
    assert classify_stress(stress_level) == expected


def test_stress_tier_labels():
    assert STRESS_TIER_LABELS[StressTier.LOW] == "Low Stress"
    assert STRESS_TIER_LABELS[StressTier.MODERATE] == "Moderate Stress"
    assert STRESS_TIER_LABELS[StressTier.HIGH] == "High Stress"
