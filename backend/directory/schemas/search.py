"""AI search and recommendation schemas."""
from typing import List, Optional

from pydantic import Field

from ..core.constants import MAX_AI_QUERY_LENGTH
from ..services.search.llm_schema import SearchEnhancement
from .base import StandardizedModel, StrictRequestModel
from .business import BusinessSummary


class UserContext(StrictRequestModel):
    industry: Optional[str] = Field(default=None, max_length=100)
    business_size: Optional[str] = Field(default=None, max_length=50)
    location: Optional[str] = Field(default=None, max_length=100)
    needs: List[str] = Field(default_factory=list)
    previous_interactions: List[str] = Field(default_factory=list)


class AISearchRequest(StrictRequestModel):
    query: str = Field(min_length=1, max_length=MAX_AI_QUERY_LENGTH)
    include_recommendations: bool = True
    limit: int = Field(default=10, ge=1, le=50)
    user_context: Optional[UserContext] = None


class AISearchResponse(StandardizedModel):
    results: List[BusinessSummary]
    search_enhancements: Optional[SearchEnhancement] = None
    recommendations: Optional[List[str]] = None
    total_results: int


class RecommendationRequest(StrictRequestModel):
    business_id: Optional[str] = Field(default=None, max_length=26)
    user_context: UserContext = Field(default_factory=UserContext)
    limit: int = Field(default=5, ge=1, le=20)


class RecommendedBusiness(BusinessSummary):
    reason: str


class RecommendationResponse(StandardizedModel):
    recommendations: List[RecommendedBusiness]
    context: UserContext
