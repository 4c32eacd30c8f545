"""Analysis Request Builder

Assembles the comparison payload sent to the reasoning service. No numeric
comparison happens here; the builder only renders the current aggregate and
the optional baseline as labeled values, and states explicitly when no
personal baseline exists.
"""

import logging
from typing import Optional

from voicestress.models.features import AggregateFeatures, CalibrationBaseline
from voicestress.models.results import AnalysisRequest
from voicestress.service.prompts import (
    ANALYSIS_PROMPT_TEMPLATE,
    BASELINE_INTRO,
    NO_BASELINE_INSTRUCTION,
)


logger = logging.getLogger(__name__)


def render_features(features: AggregateFeatures) -> str:
    """Render aggregate features as labeled key/value lines"""
    mfcc = ", ".join(f"{c:.2f}" for c in features.mfcc)
    return "\n".join([
        f"- RMS (energy/loudness): {features.rms:.4f}",
        f"- ZCR (noise/sibilance): {features.zcr:.4f}",
        f"- Spectral Centroid (brightness): {features.spectral_centroid:.2f}",
        f"- Spectral Flatness (tonality): {features.spectral_flatness:.4f}",
        f"- MFCCs (spectral shape): [{mfcc}]",
    ])


def render_baseline(baseline: Optional[CalibrationBaseline]) -> str:
    """Render the baseline section, or the general-population instruction"""
    if baseline is None:
        return NO_BASELINE_INSTRUCTION
    return f"{BASELINE_INTRO} {baseline.to_json(indent=2)}"


class AnalysisRequestBuilder:
    """Combines the current aggregate and the optional baseline into a request."""

    def build(
        self,
        current: AggregateFeatures,
        baseline: Optional[CalibrationBaseline] = None
    ) -> AnalysisRequest:
        """Build the comparison request for one analysis.

        Args:
            current: Aggregate of the take being analyzed
            baseline: Snapshot of the calibration baseline, if any

        Returns:
            AnalysisRequest carrying both aggregates and the rendered prompt
        """
        prompt = ANALYSIS_PROMPT_TEMPLATE.format(
            baseline_section=render_baseline(baseline),
            current_section=render_features(current),
        )

        logger.debug(f"Built analysis request (baseline={'yes' if baseline else 'no'}, "
                     f"{len(prompt)} chars)")
        return AnalysisRequest(current=current, baseline=baseline, prompt=prompt)

    def to_payload(self, request: AnalysisRequest) -> dict:
        """Structured form of a request, for logging and non-LLM services"""
        return {
            "has_baseline": request.has_baseline,
            "baseline": request.baseline.to_dict() if request.baseline else None,
            "current": request.current.to_dict(),
        }
