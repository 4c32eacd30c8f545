"""Stress Reasoning Service

Adapter for the external reasoning model that infers physiological voice
biomarkers and a stress score from the comparison prompt. The adapter is a
plain pipe: one request in, one validated result out. It does not retry;
retries are user-initiated at the flow boundary.
"""

import logging
import os
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from voicestress.errors import ServiceSchemaViolationError, ServiceUnavailableError
from voicestress.models.interfaces import StressReasoningService
from voicestress.models.results import AnalysisRequest, RawStressResult
from voicestress.service.prompts import SYSTEM_PROMPT_V1
from voicestress.service.validation import parse_stress_result
from voicestress.config.config_loader import config


logger = logging.getLogger(__name__)


def build_llm_client(api_key: Optional[str] = None, timeout: Optional[float] = None) -> AsyncOpenAI:
    """Create the OpenAI client from explicit arguments or configuration"""
    key_env = config.get('service.api_key_env', 'OPENAI_API_KEY')
    api_key = api_key or os.getenv(key_env)
    if not api_key:
        raise ServiceUnavailableError(f"No API key configured (set {key_env})")
    return AsyncOpenAI(
        api_key=api_key,
        timeout=timeout or config.get('service.timeout', 30.0),
        max_retries=0,
    )


class OpenAIStressService(StressReasoningService):
    """Reasoning service backed by an OpenAI chat model in JSON mode.

    Attributes:
        model: Model identifier
        client: Async OpenAI client (created lazily if not injected)
    """

    def __init__(self, client: Any = None, model: str = None):
        self.model = model or config.get('service.model', 'gpt-4o-mini')
        self.client = client

        logger.info(f"OpenAIStressService initialized with model: {self.model}")

    async def submit(self, request: AnalysisRequest) -> RawStressResult:
        """Send the comparison prompt and validate the JSON response.

        Args:
            request: Analysis request with the rendered prompt

        Returns:
            Validated RawStressResult

        Raises:
            ServiceUnavailableError: If the API call fails or times out
            ServiceSchemaViolationError: If the response breaks the result schema
        """
        if self.client is None:
            self.client = build_llm_client()

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT_V1},
                    {"role": "user", "content": request.prompt},
                ],
                response_format={"type": "json_object"},
            )
        except openai.APIError as e:
            logger.error(f"Reasoning service call failed: {e}")
            raise ServiceUnavailableError(f"Reasoning service unavailable: {e}")

        if not response.choices:
            raise ServiceSchemaViolationError("Response contained no choices")

        content = response.choices[0].message.content
        if not content:
            raise ServiceSchemaViolationError("Response contained no content")

        result = parse_stress_result(content)
        logger.info(f"Reasoning service result: stress_level={result.stress_level:.0f}, "
                    f"confidence={result.confidence:.0f}")
        return result
