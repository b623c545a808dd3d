import logging

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from ...config import settings
from ...application.ports.ai_provider import AIProvider, AIProviderError

logger = logging.getLogger(__name__)


class GeminiProvider(AIProvider):
    name = "gemini"

    def __init__(self, api_key: str = None, model_name: str = None) -> None:
        genai.configure(api_key=api_key or settings.GEMINI_API_KEY)
        self.model = genai.GenerativeModel(model_name or settings.GEMINI_MODEL)

    async def complete(self, prompt: str, max_tokens: int, temperature: float) -> str:
        try:
            result = await self.model.generate_content_async(
                prompt,
                generation_config={"max_output_tokens": max_tokens, "temperature": temperature},
            )
        except google_exceptions.ResourceExhausted as e:
            raise AIProviderError(self.name, f"rate limited: {e}", rate_limited=True)
        except google_exceptions.GoogleAPIError as e:
            raise AIProviderError(self.name, str(e))
        except Exception as e:
            # Transport failures surface from the grpc/http layers untyped
            raise AIProviderError(self.name, f"unexpected error: {e}")
        try:
            text = (result.text or "").strip()
        except ValueError as e:
            # Blocked or empty candidates
            raise AIProviderError(self.name, f"no usable response: {e}")
        if not text:
            raise AIProviderError(self.name, "empty response")
        return text
