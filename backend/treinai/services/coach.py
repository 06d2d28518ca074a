from typing import Dict, List, Optional
import logging

import httpx

from treinai.core.config import settings
from treinai.core.llm import LLMClient, llm_client

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I couldn't process your message."

COACH_SYSTEM_PROMPT = """You are TreinAI Coach, an assistant specialised in fitness and wellbeing.

Your responsibilities:
- Give exercise tips and correct technique
- Offer guidance on basic sports nutrition
- Motivate and encourage users in their fitness journey
- Suggest workouts based on the user's goals
- Answer questions about muscle recovery and rest

Rules:
- Always be encouraging and positive
- Recommend consulting health professionals for specific medical questions
- Keep answers concise and practical
- Use emojis occasionally to keep the conversation friendly"""


class CoachError(Exception):
    pass


class CoachService:
    def __init__(self, client: Optional[LLMClient] = None):
        self.client = client or llm_client

    async def reply(self, messages: List[Dict[str, str]]) -> str:
        if not self.client.configured:
            raise CoachError("AI coach API key not configured")

        payload = [{"role": "system", "content": COACH_SYSTEM_PROMPT}]
        payload.extend({"role": m["role"], "content": m["content"]} for m in messages)

        try:
            result = await self.client.chat_completion(
                messages=payload,
                temperature=settings.ai_temperature,
                max_tokens=settings.ai_max_tokens,
            )
        except httpx.HTTPStatusError as e:
            raise CoachError(f"AI API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise CoachError(f"AI API unreachable: {e}") from e

        choices = result.get("choices") or []
        content = (choices[0].get("message") or {}).get("content") if choices else None
        return content or FALLBACK_REPLY
