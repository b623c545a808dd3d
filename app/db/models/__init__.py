# Models package (re-export feature modules for stable imports)
from .users.user import User
from .marketplace.technician import Technician
from .marketplace.appointment import Appointment
from .marketplace.notification import Notification
from .marketplace.diagnosis import Diagnosis
from .marketplace.rating import Rating

__all__ = [
    "User",
    "Technician",
    "Appointment",
    "Notification",
    "Diagnosis",
    "Rating",
]
