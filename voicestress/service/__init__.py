"""Reasoning-service adapter, prompts, and response validation"""

from voicestress.service.reasoning import OpenAIStressService, build_llm_client
from voicestress.service.validation import validate_stress_result, parse_stress_result

__all__ = [
    'OpenAIStressService',
    'build_llm_client',
    'validate_stress_result',
    'parse_stress_result',
]
