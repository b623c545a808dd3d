import logging

import aiohttp

from ...config import settings
from ...application.ports.ai_provider import AIProvider, AIProviderError

logger = logging.getLogger(__name__)


class GroqProvider(AIProvider):
    """OpenAI-compatible chat completions endpoint hosted by Groq."""

    name = "groq"

    def __init__(self, api_key: str = None, url: str = None, model_name: str = None, timeout: float = None) -> None:
        self.api_key = api_key or settings.GROQ_API_KEY
        self.url = url or settings.GROQ_API_URL
        self.model_name = model_name or settings.GROQ_MODEL
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.AI_TIMEOUT_SECONDS)

    async def complete(self, prompt: str, max_tokens: int, temperature: float) -> str:
        payload = {
            "model": self.model_name,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.url, json=payload, headers=headers) as response:
                    if response.status == 429:
                        raise AIProviderError(self.name, "rate limited", rate_limited=True)
                    if response.status == 401:
                        raise AIProviderError(self.name, "invalid API key")
                    if response.status != 200:
                        body = await response.text()
                        raise AIProviderError(self.name, f"HTTP {response.status}: {body[:200]}")
                    data = await response.json()
        except (aiohttp.ClientError, TimeoutError) as e:
            raise AIProviderError(self.name, f"request failed: {e}")

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise AIProviderError(self.name, "malformed response")
        text = (text or "").strip()
        if not text:
            raise AIProviderError(self.name, "empty response")
        return text
