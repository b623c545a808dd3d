from dataclasses import dataclass
from typing import List, Optional
import logging

from ..ports.geocoder import Geocoder, SelectedLocation
from ..ports.technician_repo import TechnicianRepository
from ..ports.user_repo import UserRepository
from . import notification_service as messages
from .notification_service import NotificationService
from ...exceptions import NotFoundError, PersistenceError, ValidationFailedError

logger = logging.getLogger(__name__)

CUSTOMER = "customer"
TECHNICIAN = "technician"


def coordinates_label(latitude: float, longitude: float) -> str:
    return f"Selected Location ({latitude:.6f}, {longitude:.6f})"


def validate_coordinates(latitude: float, longitude: float) -> None:
    if latitude is None or longitude is None:
        raise ValidationFailedError("Latitude and longitude are required")
    if not -90 <= latitude <= 90:
        raise ValidationFailedError("Latitude must be between -90 and 90")
    if not -180 <= longitude <= 180:
        raise ValidationFailedError("Longitude must be between -180 and 180")


@dataclass
class LocationService:
    user_repo: UserRepository
    technician_repo: TechnicianRepository
    geocoders: List[Geocoder]
    notifier: NotificationService

    def save_location(self, role: str, owner_id: str, location: SelectedLocation) -> SelectedLocation:
        validate_coordinates(location.latitude, location.longitude)
        if not (location.address or "").strip():
            raise ValidationFailedError("Address is required")

        repo = self._owner_repo(role, owner_id)
        try:
            repo.save_location(owner_id, location)
        except Exception as e:
            logger.error(f"Error saving location for {role} {owner_id}: {e}")
            raise PersistenceError("Saving location")

        self.notifier.emit(owner_id, "location", messages.location_set(location.address))
        return repo.get_location(owner_id)

    def get_location(self, role: str, owner_id: str) -> Optional[SelectedLocation]:
        return self._owner_repo(role, owner_id).get_location(owner_id)

    async def reverse_geocode(self, latitude: float, longitude: float) -> str:
        validate_coordinates(latitude, longitude)
        for geocoder in self.geocoders:
            try:
                address = await geocoder.reverse(latitude, longitude)
            except Exception as e:
                logger.warning(f"Geocoder {geocoder.name} failed for ({latitude}, {longitude}): {e}")
                continue
            if address:
                return address
            logger.info(f"Geocoder {geocoder.name} found nothing for ({latitude}, {longitude})")
        return coordinates_label(latitude, longitude)

    def onboard_customer(self, user_id: str) -> None:
        if not self.user_repo.get_by_id(user_id):
            raise NotFoundError("User not found")
        self.notifier.emit_once(user_id, "welcome", messages.customer_welcome())
        if self.user_repo.get_location(user_id) is None:
            self.notifier.emit_once(user_id, "location", messages.location_reminder())

    def _owner_repo(self, role: str, owner_id: str):
        if role == CUSTOMER:
            repo, exists = self.user_repo, self.user_repo.get_by_id(owner_id)
            missing = "User not found"
        elif role == TECHNICIAN:
            repo, exists = self.technician_repo, self.technician_repo.get_by_id(owner_id)
            missing = "Technician not found"
        else:
            raise ValidationFailedError(f"Locations are stored for customers and technicians, not {role}")
        if not exists:
            raise NotFoundError(missing)
        return repo
