from typing import Protocol


class AIProviderError(Exception):
    def __init__(self, provider: str, message: str, rate_limited: bool = False):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.rate_limited = rate_limited


class AIProvider(Protocol):
    name: str

    async def complete(self, prompt: str, max_tokens: int, temperature: float) -> str:
        """Return the model's text answer or raise AIProviderError."""
        ...
