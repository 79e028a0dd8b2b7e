"""Directory assistant: prompt assembly, suggestions and failure handling."""

import pytest

from directory.core.exceptions import AIServiceException
from directory.schemas.chat import ChatRequest
from directory.services.chat_service import (
    APOLOGY_MESSAGE,
    SYSTEM_PROMPT,
    ChatService,
    extract_search_terms,
    wants_suggestions,
)


def _request(text: str, business_id=None) -> ChatRequest:
    payload = {"messages": [{"role": "user", "content": text}]}
    if business_id:
        payload["context"] = {"businessId": business_id}
    return ChatRequest.model_validate(payload)


class TestTermExtraction:
    def test_known_terms_in_list_order(self):
        assert extract_search_terms("Any marketing AGENCY or software consultant?") == [
            "consultant",
            "agency",
            "software",
            "marketing",
        ]

    def test_ai_matches_case_insensitively(self):
        assert extract_search_terms("I need help with ai") == ["AI"]

    @pytest.mark.parametrize(
        "text,expected",
        [("I recommend these", True), ("You could Check Out this firm", True), ("Hello there", False)],
    )
    def test_wants_suggestions(self, text, expected):
        assert wants_suggestions(text) is expected


@pytest.mark.asyncio
async def test_reply_with_suggestions(db, fake_ai, make_business, make_category, make_review, customer):
    agencies = make_category("Marketing Agencies")
    agency = make_business("Loop Marketing", categories=[agencies], verified=True)
    make_review(agency, customer, 4)
    make_business("Quiet Plumbing")
    fake_ai.text = "I recommend talking to a marketing agency in the North Loop."

    response = await ChatService(db, client=fake_ai).chat(_request("Who can help with ads?"))

    assert response.message == fake_ai.text
    assert len(response.suggestions) == 1
    suggestion = response.suggestions[0]
    assert suggestion.type == "business"
    assert suggestion.data.name == "Loop Marketing"
    assert suggestion.data.category == "Marketing Agencies"
    assert suggestion.data.rating == 4.0


@pytest.mark.asyncio
async def test_reply_without_trigger_has_no_suggestions(db, fake_ai, make_business):
    make_business("Loop Marketing")
    fake_ai.text = "Marketing budgets vary a lot."

    response = await ChatService(db, client=fake_ai).chat(_request("How much is marketing?"))

    assert response.suggestions == []


@pytest.mark.asyncio
async def test_business_context_specialises_prompt(db, fake_ai, make_business, make_category):
    bakery = make_category("Bakeries")
    business = make_business("Lake Street Bakery", categories=[bakery], description="Fresh bread daily")

    await ChatService(db, client=fake_ai).chat(_request("When do you open?", business_id=business.id))

    system = fake_ai.text_calls[0][0]
    assert system["role"] == "system"
    assert system["content"].startswith(SYSTEM_PROMPT)
    assert "Lake Street Bakery, a Bakeries business" in system["content"]
    assert "Fresh bread daily" in system["content"]
    assert fake_ai.text_calls[0][1] == {"role": "user", "content": "When do you open?"}


@pytest.mark.asyncio
async def test_unknown_business_context_uses_base_prompt(db, fake_ai):
    await ChatService(db, client=fake_ai).chat(_request("Hi", business_id="01HMISSING0000000000000000"))

    assert fake_ai.text_calls[0][0]["content"] == SYSTEM_PROMPT


@pytest.mark.asyncio
async def test_ai_failure_returns_apology(db, fake_ai):
    fake_ai.error = AIServiceException("down", code="AI_UNAVAILABLE")

    response = await ChatService(db, client=fake_ai).chat(_request("Hi"))

    assert response.message == APOLOGY_MESSAGE
    assert response.suggestions == []


@pytest.mark.asyncio
async def test_unconfigured_client_returns_apology(db):
    response = await ChatService(db, client=None).chat(_request("Hi"))

    assert response.message == APOLOGY_MESSAGE
