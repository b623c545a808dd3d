from typing import Any, Dict, Optional

import aiohttp

from ...config import settings
from ...application.ports.geocoder import Geocoder


def format_bigdatacloud_address(result: Dict[str, Any]) -> Optional[str]:
    administrative = (result.get("localityInfo") or {}).get("administrative") or []
    if not administrative:
        return None
    area = administrative[0].get("name")
    return f"{area}, {result.get('city') or 'Manila'}, {result.get('principalSubdivision') or 'Metro Manila'}"


class BigDataCloudGeocoder(Geocoder):
    name = "bigdatacloud"

    def __init__(self, url: str = None, timeout: float = None) -> None:
        self.url = url or settings.BIGDATACLOUD_REVERSE_URL
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.GEOCODER_TIMEOUT_SECONDS)

    async def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        params = {"latitude": str(latitude), "longitude": str(longitude), "localityLanguage": "en"}
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.get(self.url, params=params) as response:
                response.raise_for_status()
                result = await response.json()
        if not result:
            return None
        return format_bigdatacloud_address(result)
