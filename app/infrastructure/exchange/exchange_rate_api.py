import logging

import aiohttp

from ...config import settings
from ...application.ports.exchange_rate import ExchangeRateProvider

logger = logging.getLogger(__name__)


class ExchangeRateApiProvider(ExchangeRateProvider):
    def __init__(self, url: str = None, fallback_rate: float = None, timeout: float = 10.0) -> None:
        self.url = url or settings.EXCHANGE_RATE_URL
        self.fallback_rate = fallback_rate if fallback_rate is not None else settings.FALLBACK_USD_RATE
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def usd_rate(self, currency: str) -> float:
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(self.url) as response:
                    if response.status != 200:
                        logger.warning(f"Exchange rate lookup returned HTTP {response.status}, using fallback")
                        return self.fallback_rate
                    data = await response.json()
            rate = float(data["rates"][currency])
            if rate <= 0:
                raise ValueError(f"non-positive rate {rate}")
            return rate
        except Exception as e:
            logger.warning(f"Exchange rate lookup failed ({e}), using fallback {self.fallback_rate}")
            return self.fallback_rate
