"""Unit tests for QueryEnhancer fallback behaviour."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from directory.core.exceptions import AIServiceException
from directory.services.search.ai_enhancer import SYSTEM_PROMPT, QueryEnhancer


def _client(payload=None, error=None) -> MagicMock:
    client = MagicMock()
    client.complete_json = AsyncMock(return_value=payload, side_effect=error)
    return client


@pytest.mark.asyncio
async def test_valid_payload_is_parsed():
    client = _client(
        {
            "keywords": ["coffee", " Coffee ", "espresso"],
            "businessTypes": "Cafe",
            "services": None,
            "intent": "Find a coffee shop",
        }
    )

    enhancement = await QueryEnhancer(client, enabled=True).enhance("  coffee downtown ")

    assert enhancement.keywords == ["coffee", "espresso"]
    assert enhancement.business_types == ["Cafe"]
    assert enhancement.services == []
    assert enhancement.intent == "Find a coffee shop"
    client.complete_json.assert_awaited_once_with(SYSTEM_PROMPT, "coffee downtown")


@pytest.mark.asyncio
async def test_ai_error_returns_none():
    client = _client(error=AIServiceException("timed out", code="AI_TIMEOUT"))

    assert await QueryEnhancer(client, enabled=True).enhance("coffee") is None


@pytest.mark.asyncio
async def test_malformed_payload_returns_none():
    client = _client({"keywords": {"not": "a list"}, "intent": 42})

    assert await QueryEnhancer(client, enabled=True).enhance("coffee") is None


@pytest.mark.asyncio
async def test_disabled_or_unconfigured_never_calls_out():
    client = _client({"keywords": ["x"]})

    assert await QueryEnhancer(client, enabled=False).enhance("coffee") is None
    assert await QueryEnhancer(None, enabled=True).enhance("coffee") is None
    client.complete_json.assert_not_awaited()


@pytest.mark.asyncio
async def test_blank_text_is_not_enhanced():
    client = _client({"keywords": ["x"]})

    assert await QueryEnhancer(client, enabled=True).enhance("   ") is None
    client.complete_json.assert_not_awaited()
