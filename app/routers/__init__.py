# Routers package
from . import appointments_router
from . import diagnosis_router
from . import technicians_router
from . import users_router
from . import locations_router
from . import uploads_router
from . import notifications_router

__all__ = [
    "appointments_router",
    "diagnosis_router",
    "technicians_router",
    "users_router",
    "locations_router",
    "uploads_router",
    "notifications_router",
]
