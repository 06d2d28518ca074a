import json

import httpx
import pytest

from treinai.core.llm import LLMClient
from treinai.services.coach import COACH_SYSTEM_PROMPT, FALLBACK_REPLY, CoachError, CoachService


def make_client(handler, api_key="test-key"):
    return LLMClient(
        base_url="https://ai.test/v1",
        api_key=api_key,
        model="test-model",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_reply_sends_system_prompt_and_history():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": "Drink water 💧"}}]})

    reply = await CoachService(make_client(handler)).reply([
        {"role": "user", "content": "How much water?"},
    ])

    assert reply == "Drink water 💧"
    assert seen["url"] == "https://ai.test/v1/chat/completions"
    assert seen["auth"] == "Bearer test-key"
    body = seen["body"]
    assert body["model"] == "test-model"
    assert body["max_tokens"] == 500
    assert body["messages"][0] == {"role": "system", "content": COACH_SYSTEM_PROMPT}
    assert body["messages"][1] == {"role": "user", "content": "How much water?"}


@pytest.mark.asyncio
async def test_empty_answer_falls_back():
    def handler(request):
        return httpx.Response(200, json={"choices": []})

    assert await CoachService(make_client(handler)).reply([{"role": "user", "content": "hi"}]) == FALLBACK_REPLY


@pytest.mark.asyncio
async def test_null_message_falls_back():
    def handler(request):
        return httpx.Response(200, json={"choices": [{"message": None, "finish_reason": "content_filter"}]})

    assert await CoachService(make_client(handler)).reply([{"role": "user", "content": "hi"}]) == FALLBACK_REPLY


@pytest.mark.asyncio
async def test_upstream_error_status():
    def handler(request):
        return httpx.Response(429, json={"error": "rate limited"})

    with pytest.raises(CoachError, match="429"):
        await CoachService(make_client(handler)).reply([{"role": "user", "content": "hi"}])


@pytest.mark.asyncio
async def test_upstream_unreachable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CoachError, match="unreachable"):
        await CoachService(make_client(handler)).reply([{"role": "user", "content": "hi"}])


@pytest.mark.asyncio
async def test_missing_api_key():
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(CoachError, match="not configured"):
        await CoachService(make_client(handler, api_key="")).reply([{"role": "user", "content": "hi"}])
