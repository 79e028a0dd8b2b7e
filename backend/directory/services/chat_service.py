# backend/directory/services/chat_service.py
"""
Directory assistant chat.

One chat completion per request. When the reply recommends something, the
known business terms it mentions are matched against active listings and up
to three are attached as suggestions. Any failure yields an apology message
instead of an error response.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import AIServiceException, RepositoryException
from ..models.business import Business
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.business_repository import BusinessRepository
from ..schemas.chat import ChatRequest, ChatResponse, ChatSuggestion, SuggestedBusiness
from .ai_client import CompletionClient
from .base import BaseService

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an AI assistant for the Minnesota Business Directory, a platform focused on "
    "AI-powered businesses and services in Minnesota.\n"
    "You help users find businesses, events, and information about the local AI ecosystem.\n"
    "Be helpful, concise, and friendly. When suggesting businesses or events, provide specific "
    "recommendations with relevant details."
)

APOLOGY_MESSAGE = "I apologize, but I encountered an error processing your request. Please try again."

SUGGESTION_TRIGGERS = ("recommend", "suggest", "check out")
KNOWN_BUSINESS_TERMS = ("consultant", "agency", "software", "AI", "technology", "marketing", "data")
MAX_SUGGESTIONS = 3


def extract_search_terms(text: str) -> List[str]:
    """Known business terms mentioned in ``text``, case-insensitive, in list order."""
    lowered = text.lower()
    return [term for term in KNOWN_BUSINESS_TERMS if term.lower() in lowered]


def wants_suggestions(text: str) -> bool:
    lowered = text.lower()
    return any(trigger in lowered for trigger in SUGGESTION_TRIGGERS)


class ChatService(BaseService):
    def __init__(self, db: Session, client: Optional[CompletionClient] = None):
        super().__init__(db)
        self.client = client
        self.repository = BusinessRepository(db)

    def _system_prompt(self, business_id: Optional[str]) -> str:
        if not business_id:
            return SYSTEM_PROMPT
        business = self.repository.get_by_id(business_id)
        if business is None:
            return SYSTEM_PROMPT
        primary = business.primary_category
        kind = f"a {primary.name} business" if primary is not None else "a local business"
        return (
            f"{SYSTEM_PROMPT}\n\nYou are specifically helping with questions about {business.name}, "
            f"{kind}. Here's what you know about them: {business.description or 'No description provided.'}"
        )

    def _suggestions(self, reply: str) -> List[ChatSuggestion]:
        if not wants_suggestions(reply):
            return []
        terms = extract_search_terms(reply)
        if not terms:
            return []

        businesses: List[Business] = self.repository.find_active_matching_terms(terms, MAX_SUGGESTIONS)
        aggregates = self.repository.rating_aggregates(b.id for b in businesses)
        suggestions = []
        for business in businesses:
            average, count = aggregates.get(business.id, (0.0, 0))
            primary = business.primary_category
            suggestions.append(
                ChatSuggestion(
                    data=SuggestedBusiness(
                        id=business.id,
                        name=business.name,
                        slug=business.slug,
                        category=primary.name if primary is not None else None,
                        rating=round(average, 1) if count else None,
                    )
                )
            )
        return suggestions

    @BaseService.measure_operation("directory_chat")
    async def chat(self, request: ChatRequest) -> ChatResponse:
        if self.client is None:
            self.logger.warning("Directory chat requested but no AI client is configured")
            return ChatResponse(message=APOLOGY_MESSAGE, suggestions=[])

        try:
            business_id = request.context.business_id if request.context else None
            messages = [{"role": "system", "content": self._system_prompt(business_id)}]
            messages.extend({"role": m.role, "content": m.content} for m in request.messages)

            reply = await self.client.complete_text(messages, max_tokens=500, temperature=0.7)
            suggestions = self._suggestions(reply)
        except (AIServiceException, RepositoryException) as e:
            self.logger.error(f"Directory chat failed: {e}")
            if isinstance(e, AIServiceException):
                prometheus_metrics.record_ai_fallback("chat", e.code or "AI_ERROR")
            return ChatResponse(message=APOLOGY_MESSAGE, suggestions=[])

        return ChatResponse(message=reply, suggestions=suggestions)
