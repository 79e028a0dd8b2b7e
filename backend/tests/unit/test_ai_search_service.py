"""AI search and rule-based recommendations."""

import pytest

from directory.core.exceptions import AIServiceException, BusinessNotFoundException
from directory.schemas.search import AISearchRequest, RecommendationRequest, UserContext
from directory.services.search.ai_enhancer import QueryEnhancer
from directory.services.search.ai_search_service import AISearchService


@pytest.fixture
def service(db, fake_ai):
    return AISearchService(db, QueryEnhancer(fake_ai, enabled=True), client=fake_ai)


@pytest.mark.asyncio
async def test_search_ranks_by_relevance_and_returns_recommendations(service, make_business, fake_ai):
    fake_ai.json_payload = {
        "keywords": ["marketing"],
        "businessTypes": [],
        "services": [],
        "intent": "Marketing help",
        "recommendations": ["Start with a brand audit", "  ", "Compare retainers"],
    }
    make_business("Loop Marketing", verified=True)
    make_business("North Shore Media", description="Marketing for small brands")
    make_business("Quiet Plumbing")

    response = await service.search(AISearchRequest(query="marketing", limit=10))

    assert [r.name for r in response.results] == ["Loop Marketing", "North Shore Media"]
    assert response.total_results == 2
    assert response.search_enhancements.intent == "Marketing help"
    assert response.recommendations == ["Start with a brand audit", "Compare retainers"]
    assert len(fake_ai.json_calls) == 2


@pytest.mark.asyncio
async def test_recommendation_failure_does_not_fail_search(service, make_business, fake_ai):
    fake_ai.error = AIServiceException("down", code="AI_UNAVAILABLE")
    make_business("Loop Marketing")

    response = await service.search(AISearchRequest(query="marketing"))

    assert [r.name for r in response.results] == ["Loop Marketing"]
    assert response.search_enhancements is None
    assert response.recommendations is None


@pytest.mark.asyncio
async def test_no_results_skips_recommendations(service, fake_ai):
    response = await service.search(AISearchRequest(query="snowmobile repair"))

    assert response.results == []
    assert response.recommendations is None


def test_recommend_similar_businesses(service, make_business, make_category, make_review, customer):
    coffee = make_category("Coffee")
    target = make_business("Mill City Cafe", categories=[coffee])
    similar = make_business("Spyhouse", categories=[coffee], verified=True)
    make_business("Other Coffee", categories=[coffee], city="Duluth")
    make_business("Hardware Hank")
    make_review(similar, customer, 5)

    response = service.recommend(
        RecommendationRequest(business_id=target.id, user_context=UserContext(location="Minneapolis"))
    )

    names = [r.name for r in response.recommendations]
    assert names == ["Spyhouse", "Other Coffee"]
    assert target.id not in [r.id for r in response.recommendations]
    assert "Verified business" in response.recommendations[0].reason
    assert "Located in Minneapolis" in response.recommendations[0].reason


def test_recommend_featured_without_business(service, make_business):
    make_business("Featured Florist", featured=True)
    make_business("Regular Florist")

    response = service.recommend(RecommendationRequest())

    assert [r.name for r in response.recommendations] == ["Featured Florist"]


def test_recommend_unknown_business(service):
    with pytest.raises(BusinessNotFoundException):
        service.recommend(RecommendationRequest(business_id="01HMISSING0000000000000000"))


def test_recommendation_score_caps_review_bonus(service, make_business):
    from directory.services.search.candidates import business_candidate

    business = make_business("Busy Bistro", verified=True, featured=True)
    candidate = business_candidate(business, (4.0, 50))

    score = service.recommendation_score(candidate, UserContext(location="minneapolis"))

    # 10 × 4.0 + 20 verified + 15 featured + capped 20 reviews + 25 location
    assert score == 120.0
