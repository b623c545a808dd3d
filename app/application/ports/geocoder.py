from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class SelectedLocation:
    latitude: float
    longitude: float
    address: str


class Geocoder(Protocol):
    name: str

    async def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        """Human readable address for the point, or None when nothing was found."""
        ...
