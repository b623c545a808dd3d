import logging
from typing import Any, Dict, Optional

import aiohttp

from ...config import settings
from ...application.ports.geocoder import Geocoder

logger = logging.getLogger(__name__)


def format_nominatim_address(address: Dict[str, Any]) -> str:
    area = (
        address.get("village")
        or address.get("suburb")
        or address.get("neighbourhood")
        or address.get("hamlet")
        or address.get("road")
        or "Unknown Area"
    )
    city = address.get("city") or address.get("town") or "Manila"
    province = address.get("state") or "Metro Manila"
    return f"{area}, {city}, {province}"


class NominatimGeocoder(Geocoder):
    name = "nominatim"

    def __init__(self, url: str = None, user_agent: str = None, timeout: float = None) -> None:
        self.url = url or settings.NOMINATIM_REVERSE_URL
        self.user_agent = user_agent or settings.GEOCODER_USER_AGENT
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.GEOCODER_TIMEOUT_SECONDS)

    async def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        params = {"format": "json", "lat": str(latitude), "lon": str(longitude), "addressdetails": "1"}
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.get(self.url, params=params, headers=headers) as response:
                response.raise_for_status()
                result = await response.json()
        if not result or not result.get("address"):
            return None
        return format_nominatim_address(result["address"])
