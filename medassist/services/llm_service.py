from typing import Optional, Any
from openai import AsyncOpenAI
from pydantic import BaseModel
import logging

from medassist.config import settings

logger = logging.getLogger(__name__)


class LLMResponse(BaseModel):
    """Raw text reply from the model, or the error that prevented one."""

    content: Any
    error: Optional[str] = None


class LLMService:
    """Thin client for an OpenAI-compatible chat completion endpoint.

    Defaults to Gemini through Google's OpenAI-compatible API; point
    LLM_BASE_URL and LLM_MODEL elsewhere to use another provider.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
    ):
        api_key = api_key or settings.LLM_API_KEY
        if not api_key:
            raise ValueError(
                "LLM API key not configured. Please set LLM_API_KEY (or GEMINI_API_KEY) environment variable."
            )

        self.model = model or settings.LLM_MODEL
        self.client = AsyncOpenAI(
            api_key=api_key, base_url=base_url or settings.LLM_BASE_URL
        )

    async def process_prompt(
        self,
        user_prompt: str,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        """Send a prompt and return the reply text.

        Args:
            user_prompt: The user prompt to send
            system_prompt: Optional system prompt placed before the user prompt
            model: The model to use (default: LLM_MODEL)
            temperature: Sampling temperature (default: LLM_TEMPERATURE)

        Returns:
            LLMResponse with the reply text, or with ``error`` set on failure
        """
        if not user_prompt or not user_prompt.strip():
            return LLMResponse(content=None, error="Prompt text cannot be empty.")

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})

        completion_params = {
            "model": model or self.model,
            "messages": messages,
            "temperature": settings.LLM_TEMPERATURE if temperature is None else temperature,
            "top_p": settings.LLM_TOP_P,
            "max_tokens": settings.LLM_MAX_TOKENS,
        }

        try:
            response = await self.client.chat.completions.create(**completion_params)
            content = response.choices[0].message.content if response.choices else None
        except Exception as e:
            logger.error(f"LLM request failed: {str(e)}")
            return LLMResponse(content=None, error=str(e))

        if not content:
            return LLMResponse(content=None, error="Model returned an empty response.")
        return LLMResponse(content=content)

    async def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        await self.client.close()
