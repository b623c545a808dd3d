from typing import Protocol


class ExchangeRateProvider(Protocol):
    async def usd_rate(self, currency: str) -> float:
        """Units of ``currency`` per 1 USD. Never raises; falls back to a fixed rate."""
        ...
