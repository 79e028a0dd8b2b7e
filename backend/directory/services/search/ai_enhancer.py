# backend/directory/services/search/ai_enhancer.py
"""
AI query enhancement for directory search.
Falls back to raw-text search on any failure.
Single attempt with a strict timeout (no retries).
"""
from __future__ import annotations

import logging
import time
from typing import Optional

from pydantic import ValidationError

from ...core.config import settings
from ...core.exceptions import AIServiceException
from ...monitoring.prometheus_metrics import prometheus_metrics
from ..ai_client import CompletionClient
from .llm_schema import SearchEnhancement

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a search assistant for a Minnesota business directory.

Analyze the user's search query and return a JSON object with exactly these fields:
- keywords: list of relevant search terms, including close synonyms
- businessTypes: list of business category names that match the request
- services: list of specific services mentioned or implied
- intent: one short sentence describing what the user is looking for

Only include terms that are explicitly stated or clearly implied.
Respond with the JSON object only."""


class QueryEnhancer:
    """
    Turns free text into a SearchEnhancement.

    Usage:
        enhancer = QueryEnhancer(client)
        enhancement = await enhancer.enhance("AI consulting")  # None on failure
    """

    def __init__(self, client: Optional[CompletionClient], enabled: Optional[bool] = None) -> None:
        self._client = client
        self._enabled = settings.ai_enhancement_enabled if enabled is None else enabled

    @property
    def available(self) -> bool:
        return self._enabled and self._client is not None

    async def enhance(self, text: Optional[str]) -> Optional[SearchEnhancement]:
        """
        Enhance ``text``.

        Returns:
            SearchEnhancement, or None when AI is disabled, unconfigured or fails.
        """
        if not text or not text.strip():
            return None
        if not self.available:
            logger.info("AI enhancement unavailable, using raw-text search")
            return None

        start_time = time.perf_counter()
        try:
            payload = await self._client.complete_json(SYSTEM_PROMPT, text.strip())
            enhancement = SearchEnhancement.model_validate(payload)
        except AIServiceException as e:
            logger.warning(f"AI enhancement failed ({e.code}): {e.message}")
            prometheus_metrics.record_ai_fallback("search_enhancement", e.code or "AI_ERROR")
            return None
        except ValidationError as e:
            logger.warning(f"AI enhancement returned an unusable payload: {e.error_count()} errors")
            prometheus_metrics.record_ai_fallback("search_enhancement", "AI_MALFORMED")
            return None

        elapsed_ms = int((time.perf_counter() - start_time) * 1000)
        logger.debug(
            f"Enhanced query in {elapsed_ms}ms: {len(enhancement.keywords)} keywords, "
            f"{len(enhancement.business_types)} business types"
        )
        return enhancement
