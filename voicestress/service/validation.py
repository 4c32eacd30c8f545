"""Validation of reasoning-service responses

The reasoning service is untrusted input. A response must carry exactly the
result schema: every numeric field present, a real number, and finite, with
stress_level and confidence inside [0, 100]. Anything else is a schema
violation; values are never clamped or defaulted.
"""

import json
import math
from typing import Any, Dict

from voicestress.errors import ServiceSchemaViolationError
from voicestress.models.results import RawStressResult, RESULT_FIELDS, RESULT_NUMERIC_FIELDS


PERCENT_FIELDS = ("stress_level", "confidence")


def validate_stress_result(payload: Any) -> RawStressResult:
    """Validate a decoded response object and build a RawStressResult.

    Args:
        payload: Decoded JSON response

    Returns:
        RawStressResult with float fields

    Raises:
        ServiceSchemaViolationError: If the payload does not match the schema
    """
    if not isinstance(payload, dict):
        raise ServiceSchemaViolationError(
            f"Response must be a JSON object, got {type(payload).__name__}"
        )

    missing = [key for key in RESULT_FIELDS if key not in payload]
    if missing:
        raise ServiceSchemaViolationError(f"Response is missing fields: {', '.join(missing)}")

    unexpected = sorted(set(payload) - set(RESULT_FIELDS))
    if unexpected:
        raise ServiceSchemaViolationError(f"Response has unexpected fields: {', '.join(unexpected)}")

    values: Dict[str, Any] = {}
    for key in RESULT_NUMERIC_FIELDS:
        value = payload[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ServiceSchemaViolationError(f"Field '{key}' must be a number, got {value!r}")
        if not math.isfinite(value):
            raise ServiceSchemaViolationError(f"Field '{key}' must be finite, got {value!r}")
        values[key] = float(value)

    for key in PERCENT_FIELDS:
        if not 0.0 <= values[key] <= 100.0:
            raise ServiceSchemaViolationError(f"Field '{key}' must be in [0, 100], got {values[key]}")

    summary = payload["ai_summary"]
    if not isinstance(summary, str):
        raise ServiceSchemaViolationError(f"Field 'ai_summary' must be a string, got {summary!r}")
    values["ai_summary"] = summary

    return RawStressResult(**values)


def parse_stress_result(text: str) -> RawStressResult:
    """Decode a JSON response body and validate it"""
    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ServiceSchemaViolationError(f"Response is not valid JSON: {e}")
    return validate_stress_result(payload)
