"""Biomarker Normalizer

This module maps a validated reasoning-service result into the 8 display-ready
biomarkers. Each biomarker is derived from one field of the result through a
fixed reference range, a fixed threshold rule, a unit format, and static
explanatory text.

The mapping is total and deterministic: every valid RawStressResult yields
exactly 8 biomarkers in declaration order, with normalized values clamped to
[0, 1] no matter how far a value falls outside its range. Items [0, 5) form the
acoustic group and items [5, 8) the articulation group. The overall
stress_level is banded separately into a StressTier.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Tuple

from voicestress.models.enums import StatusTier, StressTier, BiomarkerIcon
from voicestress.models.results import Biomarker, RawStressResult


logger = logging.getLogger(__name__)

ACOUSTIC_GROUP_SIZE = 5

# stress_level below LOW is low, below MODERATE is moderate, otherwise high
STRESS_TIER_BOUNDS = (34.0, 67.0)

STRESS_TIER_LABELS = {
    StressTier.LOW: "Low Stress",
    StressTier.MODERATE: "Moderate Stress",
    StressTier.HIGH: "High Stress",
}


def clamp_normalize(value: float, min_value: float, max_value: float) -> float:
    """Position of value within [min_value, max_value], clamped to [0, 1]"""
    return max(0.0, min(1.0, (value - min_value) / (max_value - min_value)))


def _above(threshold: float, over: StatusTier, otherwise: StatusTier) -> Callable[[float], StatusTier]:
    return lambda value: over if value > threshold else otherwise


def _hnr_status(value: float) -> StatusTier:
    # Lower HNR means a breathier, less stable voice
    if value < 18:
        return StatusTier.RED
    if value < 20:
        return StatusTier.ORANGE
    return StatusTier.GREEN


@dataclass(frozen=True)
class BiomarkerRule:
    """Static definition of one biomarker"""
    field: str
    name: str
    value_format: str
    value_range: Tuple[float, float]
    classify: Callable[[float], StatusTier]
    delta_label: str
    explanation: str
    icon: BiomarkerIcon


BIOMARKER_RULES: Tuple[BiomarkerRule, ...] = (
    BiomarkerRule(
        field="f0_mean",
        name="Pitch (F0)",
        value_format="{:.0f} Hz",
        value_range=(130.0, 180.0),
        classify=_above(150, StatusTier.ORANGE, StatusTier.GREEN),
        delta_label="↑18 Hz vs. baseline",
        explanation=(
            "This measures your average vocal pitch. An elevated F0 is often associated with "
            "increased tension in the vocal cords, a common physiological response to "
            "psychological stress."
        ),
        icon=BiomarkerIcon.SINE_WAVE,
    ),
    BiomarkerRule(
        field="f0_range",
        name="Pitch Range",
        value_format="{:.0f} Hz",
        value_range=(40.0, 100.0),
        classify=_above(75, StatusTier.RED, StatusTier.ORANGE),
        delta_label="↑35% from baseline",
        explanation=(
            "This is the span between the lowest and highest pitch in your speech. A wider "
            "range can indicate heightened emotional arousal or anxiety, as stress can affect "
            "vocal control."
        ),
        icon=BiomarkerIcon.RANGE,
    ),
    BiomarkerRule(
        field="jitter",
        name="Jitter",
        value_format="{:.2f}%",
        value_range=(0.0, 2.0),
        classify=_above(1.0, StatusTier.ORANGE, StatusTier.GREEN),
        delta_label="vs. normal (<1.0%)",
        explanation=(
            "Jitter measures the frequency variation between vocal cord vibrations. High "
            "jitter can indicate stress, while abnormally low jitter might suggest a strained "
            "speech pattern."
        ),
        icon=BiomarkerIcon.WAVY_LINE,
    ),
    BiomarkerRule(
        field="shimmer",
        name="Shimmer",
        value_format="{:.2f}%",
        value_range=(0.0, 6.0),
        classify=_above(3.5, StatusTier.ORANGE, StatusTier.GREEN),
        delta_label="vs. normal (<3.5%)",
        explanation=(
            "Shimmer relates to the variation in vocal amplitude. Unusually high shimmer can "
            "point to vocal instability linked to stress."
        ),
        icon=BiomarkerIcon.AMPLITUDE,
    ),
    BiomarkerRule(
        field="hnr",
        name="Voice Quality (HNR)",
        value_format="{:.1f} dB",
        value_range=(10.0, 25.0),
        classify=_hnr_status,
        delta_label="vs. optimal (>20 dB)",
        explanation=(
            "The Harmonics-to-Noise Ratio contrasts clear tonal sound with breathiness. A lower "
            "HNR suggests a more breathy voice, which can occur when stress affects breathing "
            "patterns and vocal stability."
        ),
        icon=BiomarkerIcon.SIGNAL,
    ),
    BiomarkerRule(
        field="f1",
        name="Formant F1",
        value_format="{:.0f} Hz",
        value_range=(650.0, 850.0),
        classify=_above(750, StatusTier.RED, StatusTier.ORANGE),
        delta_label="↑12% from baseline",
        explanation=(
            "Formants are resonant frequencies of the vocal tract. An elevated F1 is linked to "
            "changes in mouth and pharynx shape due to muscle tension, often a subconscious "
            "reaction to stress."
        ),
        icon=BiomarkerIcon.CURVE1,
    ),
    BiomarkerRule(
        field="f2",
        name="Formant F2",
        value_format="{:.0f} Hz",
        value_range=(1200.0, 1600.0),
        classify=_above(1500, StatusTier.RED, StatusTier.ORANGE),
        delta_label="↑22% from baseline",
        explanation=(
            "The second formant (F2) is related to tongue position and articulation. Significant "
            "deviation from your baseline can indicate less precise speech, a cognitive "
            "side-effect of stress."
        ),
        icon=BiomarkerIcon.CURVE2,
    ),
    BiomarkerRule(
        field="speech_rate",
        name="Speech Rate",
        value_format="{:.0f} WPM",
        value_range=(130.0, 190.0),
        classify=_above(165, StatusTier.ORANGE, StatusTier.GREEN),
        delta_label="vs. avg (140-160)",
        explanation=(
            "This is the speed of your speech. An increased rate is a classic indicator of "
            "anxiety or pressure, as the speaker may be rushing their thoughts."
        ),
        icon=BiomarkerIcon.SPEEDOMETER,
    ),
)


class BiomarkerNormalizer:
    """Derives the fixed list of biomarkers from a raw stress result."""

    def __init__(self, rules: Tuple[BiomarkerRule, ...] = BIOMARKER_RULES):
        self.rules = rules

    def _build(self, rule: BiomarkerRule, value: float) -> Biomarker:
        min_value, max_value = rule.value_range
        return Biomarker(
            name=rule.name,
            formatted_value=rule.value_format.format(value),
            status=rule.classify(value),
            normalized_value=clamp_normalize(value, min_value, max_value),
            delta_label=rule.delta_label,
            explanation=rule.explanation,
            icon=rule.icon,
        )

    def normalize(self, result: RawStressResult) -> List[Biomarker]:
        """Map a validated result to biomarkers in declaration order.

        Args:
            result: Validated raw stress result

        Returns:
            One Biomarker per rule, in rule order
        """
        biomarkers = [self._build(rule, getattr(result, rule.field)) for rule in self.rules]

        logger.debug("Biomarkers: " + ", ".join(
            f"{b.name}={b.formatted_value} ({b.status.value})" for b in biomarkers
        ))
        return biomarkers


def classify_stress(stress_level: float) -> StressTier:
    """Band an overall stress score into low, moderate or high"""
    low, moderate = STRESS_TIER_BOUNDS
    if stress_level < low:
        return StressTier.LOW
    if stress_level < moderate:
        return StressTier.MODERATE
    return StressTier.HIGH


def split_groups(biomarkers: List[Biomarker]) -> Tuple[List[Biomarker], List[Biomarker]]:
    """Split biomarkers into the acoustic and articulation groups"""
    return biomarkers[:ACOUSTIC_GROUP_SIZE], biomarkers[ACOUSTIC_GROUP_SIZE:]
