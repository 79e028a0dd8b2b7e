# backend/directory/routes/v1/directory_ai.py
"""
Directory assistant - API v1

POST /chat is public and never fails with a 5xx: AI or storage failures are
answered with an apology message and no suggestions.
"""

import logging

from fastapi import APIRouter, Body, Depends

from ...api.dependencies.services import get_chat_service
from ...schemas.chat import ChatRequest, ChatResponse
from ...services.chat_service import ChatService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["directory-ai-v1"])


@router.post("/chat", response_model=ChatResponse, response_model_by_alias=True)
async def directory_chat(
    payload: ChatRequest = Body(...),
    service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    return await service.chat(payload)
