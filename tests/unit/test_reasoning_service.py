"""Unit tests for the OpenAI-backed reasoning service"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from voicestress.errors import ServiceSchemaViolationError, ServiceUnavailableError
from voicestress.models.features import AggregateFeatures
from voicestress.models.results import AnalysisRequest
from voicestress.service.prompts import SYSTEM_PROMPT_V1
from voicestress.service.reasoning import OpenAIStressService, build_llm_client


RESPONSE = {
    "stress_level": 35,
    "f0_mean": 142,
    "f0_range": 55,
    "jitter": 0.7,
    "shimmer": 2.9,
    "hnr": 21.3,
    "f1": 705,
    "f2": 1410,
    "speech_rate": 148,
    "confidence": 82,
    "snr": 25.0,
    "ai_summary": "Your voice sounds relaxed.",
}


@pytest.fixture
def request_():
    current = AggregateFeatures(rms=0.05, zcr=0.08, spectral_centroid=1650.5,
                                spectral_flatness=0.12, mfcc=(1.0,))
    return AnalysisRequest(current=current, baseline=None, prompt="Analyze this voice.")


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _client(return_value=None, side_effect=None):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=return_value, side_effect=side_effect)
    return client


@pytest.mark.asyncio
async def test_submit_success(request_):
    client = _client(_completion(json.dumps(RESPONSE)))
    service = OpenAIStressService(client=client, model="test-model")

    result = await service.submit(request_)

    assert result.stress_level == 35.0
    assert result.ai_summary == "Your voice sounds relaxed."

    kwargs = client.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT_V1}
    assert kwargs["messages"][1] == {"role": "user", "content": "Analyze this voice."}


@pytest.mark.asyncio
async def test_submit_connection_error(request_):
    error = openai.APIConnectionError(
        request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    )
    service = OpenAIStressService(client=_client(side_effect=error))

    with pytest.raises(ServiceUnavailableError):
        await service.submit(request_)


@pytest.mark.asyncio
async def test_submit_timeout(request_):
    error = openai.APITimeoutError(
        request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    )
    service = OpenAIStressService(client=_client(side_effect=error))

    with pytest.raises(ServiceUnavailableError):
        await service.submit(request_)


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    SimpleNamespace(choices=[]),
    _completion(None),
    _completion("I think you sound stressed."),
    _completion(json.dumps({**RESPONSE, "stress_level": 140})),
])
async def test_submit_schema_violation(request_, response):
    service = OpenAIStressService(client=_client(response))

    with pytest.raises(ServiceSchemaViolationError):
        await service.submit(request_)


def test_build_llm_client_requires_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ServiceUnavailableError):
        build_llm_client()


def test_build_llm_client(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    client = build_llm_client(timeout=5.0)
    assert isinstance(client, openai.AsyncOpenAI)
    assert client.max_retries == 0
