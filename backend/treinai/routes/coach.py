from typing import List, Literal
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from treinai.core.context import AuthContext
from treinai.core.deps import get_auth_context
from treinai.services.coach import CoachError, CoachService
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1)


class ChatResponse(BaseModel):
    response: str


def get_coach_service() -> CoachService:
    return CoachService()


@router.post("/chat", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    ctx: AuthContext = Depends(get_auth_context),
    coach: CoachService = Depends(get_coach_service),
):
    try:
        reply = await coach.reply([m.model_dump() for m in payload.messages])
    except CoachError as e:
        logger.warning(f"AI coach failed for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    return ChatResponse(response=reply)
