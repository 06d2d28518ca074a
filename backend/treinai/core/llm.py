import httpx
import logging
from typing import Dict, List, Any, Optional
from treinai.core.config import settings

logger = logging.getLogger(__name__)


class LLMClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.ai_base_url
        self.model = model or settings.ai_model
        self.api_key = api_key if api_key is not None else settings.ai_api_key
        self.timeout = timeout or settings.ai_timeout_s
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
            transport=self.transport,
        )

    async def chat_completion(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None
    ) -> Dict[str, Any]:
        """Send chat completion request to OpenAI-compatible endpoint"""

        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }

        if max_tokens:
            payload["max_tokens"] = max_tokens

        try:
            logger.info(f"Sending chat request to {self.base_url}")
            async with self._client() as client:
                response = await client.post("/chat/completions", json=payload)
                response.raise_for_status()
                result = response.json()
            logger.info("Chat completion successful")
            return result

        except httpx.HTTPStatusError as e:
            logger.error(f"AI API error {e.response.status_code}: {e.response.text}")
            raise
        except httpx.HTTPError as e:
            logger.error(f"HTTP error in chat completion: {e}")
            raise


# Global LLM client instance
llm_client = LLMClient()
