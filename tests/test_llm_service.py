import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from medassist.config import settings
from medassist.dependencies import get_diagnosis_service
from medassist.main import app
from medassist.services.llm_service import LLMService, LLMResponse


def completion(content):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )


@pytest.fixture
def llm_service():
    """LLM service whose OpenAI client is replaced by a mock."""
    service = LLMService(api_key="test-key", model="test-model")
    service.client = MagicMock()
    service.client.chat.completions.create = AsyncMock(
        return_value=completion("Diagnosis: common cold")
    )
    return service


@pytest.mark.asyncio
async def test_process_prompt(llm_service):
    result = await llm_service.process_prompt(user_prompt="Patient has a runny nose")

    assert isinstance(result, LLMResponse)
    assert result.error is None
    assert result.content == "Diagnosis: common cold"

    kwargs = llm_service.client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["messages"] == [
        {"role": "user", "content": "Patient has a runny nose"}
    ]
    assert kwargs["temperature"] == settings.LLM_TEMPERATURE
    assert kwargs["top_p"] == settings.LLM_TOP_P
    assert kwargs["max_tokens"] == settings.LLM_MAX_TOKENS


@pytest.mark.asyncio
async def test_process_prompt_with_system_prompt(llm_service):
    await llm_service.process_prompt(
        user_prompt="note", system_prompt="You are terse.", temperature=0.0
    )

    kwargs = llm_service.client.chat.completions.create.call_args.kwargs
    assert kwargs["messages"][0] == {"role": "system", "content": "You are terse."}
    assert kwargs["temperature"] == 0.0


@pytest.mark.asyncio
async def test_process_prompt_with_error(llm_service):
    """Empty input is rejected without calling the API."""
    result = await llm_service.process_prompt(user_prompt="   ")

    assert result.error is not None, "Empty input should result in an error"
    llm_service.client.chat.completions.create.assert_not_called()


@pytest.mark.asyncio
async def test_api_failure_is_returned_as_error(llm_service):
    llm_service.client.chat.completions.create.side_effect = RuntimeError("quota exceeded")

    result = await llm_service.process_prompt(user_prompt="headache")

    assert result.content is None
    assert result.error == "quota exceeded"


@pytest.mark.asyncio
async def test_empty_reply_is_an_error(llm_service):
    llm_service.client.chat.completions.create.return_value = completion(None)

    result = await llm_service.process_prompt(user_prompt="headache")

    assert result.content is None
    assert result.error is not None


def test_missing_api_key(monkeypatch):
    monkeypatch.setattr(settings, "LLM_API_KEY", None)
    with pytest.raises(ValueError):
        LLMService()


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.skipif(not settings.is_llm_configured(), reason="LLM API key not configured")
async def test_process_prompt_live():
    """Test the LLM service with a real API call."""
    result = await LLMService().process_prompt(
        user_prompt="Reply with the single word: ready"
    )

    assert result.error is None, f"LLM service returned an error: {result.error}"
    assert isinstance(result.content, str)
    assert len(result.content) > 0


def test_app_shares_one_client_and_closes_it(monkeypatch):
    monkeypatch.setattr(settings, "LLM_API_KEY", "test-key")

    with TestClient(app):
        shared = app.state.llm_service
        assert isinstance(shared, LLMService)
        request = SimpleNamespace(app=app)
        first = asyncio.run(get_diagnosis_service(request))
        second = asyncio.run(get_diagnosis_service(request))
        assert first.llm_service is shared
        assert second.llm_service is shared

    assert shared.client.is_closed()


def test_app_without_key_has_no_client(monkeypatch):
    monkeypatch.setattr(settings, "LLM_API_KEY", None)

    with TestClient(app):
        assert app.state.llm_service is None
