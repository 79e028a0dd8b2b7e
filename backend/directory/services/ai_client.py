# backend/directory/services/ai_client.py
"""
OpenAI completion adapter.

Wraps an injected AsyncOpenAI client behind two calls, JSON-object completion
and plain chat completion. Each call is a single attempt bounded by
``timeout_s``; every failure (timeout, API error, empty or malformed payload)
surfaces as AIServiceException so callers can fall back uniformly.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError

from ..core.config import settings
from ..core.exceptions import AIServiceException

logger = logging.getLogger(__name__)

ChatMessage = Dict[str, str]


class CompletionClient:
    """Interface consumed by the enhancer, recommendations and chat services."""

    async def complete_json(self, system_prompt: str, user_text: str) -> Dict[str, Any]:
        raise NotImplementedError

    async def complete_text(
        self, messages: List[ChatMessage], *, max_tokens: int = 500, temperature: float = 0.7
    ) -> str:
        raise NotImplementedError

    async def close(self) -> None:
        """Release network resources; a no-op for clients that hold none."""


class OpenAICompletionClient(CompletionClient):
    """
    CompletionClient backed by the OpenAI Chat Completions API.

    Usage:
        client = OpenAICompletionClient(AsyncOpenAI(api_key=..., max_retries=0))
        data = await client.complete_json(SYSTEM_PROMPT, "coffee near downtown")
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        *,
        enhancement_model: Optional[str] = None,
        chat_model: Optional[str] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self._client = client
        self.enhancement_model = enhancement_model or settings.openai_enhancement_model
        self.chat_model = chat_model or settings.openai_chat_model
        self.timeout_s = timeout_s if timeout_s is not None else settings.openai_timeout_s

    async def complete_json(self, system_prompt: str, user_text: str) -> Dict[str, Any]:
        content = await self._create(
            model=self.enhancement_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_text},
            ],
            response_format={"type": "json_object"},
            temperature=0.3,
            max_tokens=500,
        )
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            raise AIServiceException("AI response was not valid JSON", code="AI_MALFORMED") from e
        if not isinstance(payload, dict):
            raise AIServiceException("AI response was not a JSON object", code="AI_MALFORMED")
        return payload

    async def complete_text(
        self, messages: List[ChatMessage], *, max_tokens: int = 500, temperature: float = 0.7
    ) -> str:
        return await self._create(
            model=self.chat_model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    async def close(self) -> None:
        await self._client.close()

    async def _create(self, **request_kwargs: Any) -> str:
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(**request_kwargs),
                timeout=self.timeout_s,
            )
        except asyncio.TimeoutError as e:
            raise AIServiceException(
                f"AI completion timed out after {self.timeout_s:.1f}s", code="AI_TIMEOUT"
            ) from e
        except OpenAIError as e:
            raise AIServiceException(f"OpenAI API error: {e}", code="AI_UNAVAILABLE") from e

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content:
            raise AIServiceException("AI returned an empty completion", code="AI_EMPTY")
        return content


def build_openai_client() -> Optional[OpenAICompletionClient]:
    """
    Create a client from settings, or None when AI is not configured.

    Built once per application in the lifespan and closed on shutdown; the
    underlying AsyncOpenAI owns a connection pool.
    """
    if not settings.openai_configured:
        return None
    api_key = settings.openai_api_key.get_secret_value() if settings.openai_api_key else None
    return OpenAICompletionClient(
        AsyncOpenAI(api_key=api_key, timeout=settings.openai_timeout_s, max_retries=0)
    )
