"""Directory assistant chat schemas."""
from typing import List, Literal, Optional

from pydantic import Field

from .base import StandardizedModel, StrictRequestModel


class ChatMessage(StrictRequestModel):
    role: Literal["user", "assistant"]
    content: str = Field(min_length=1, max_length=4000)


class ChatContext(StrictRequestModel):
    business_id: Optional[str] = Field(default=None, max_length=26)


class ChatRequest(StrictRequestModel):
    messages: List[ChatMessage] = Field(min_length=1, max_length=50)
    context: Optional[ChatContext] = None


class SuggestedBusiness(StandardizedModel):
    id: str
    name: str
    slug: str
    category: Optional[str] = None
    rating: Optional[float] = None


class ChatSuggestion(StandardizedModel):
    type: Literal["business"] = "business"
    data: SuggestedBusiness


class ChatResponse(StandardizedModel):
    message: str
    suggestions: List[ChatSuggestion] = Field(default_factory=list)
