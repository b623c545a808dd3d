import logging
from dataclasses import dataclass
from typing import List

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from .config import settings
from .database import get_session
from .utils import decode_jwt_token
from .application.ports.ai_provider import AIProvider
from .application.ports.image_host import ImageHost
from .application.ports.rate_limiter import RateLimiter
from .application.services.appointments_service import AppointmentsService
from .application.services.estimator_service import EstimatorService
from .application.services.image_service import ImageService
from .application.services.location_service import LocationService
from .application.services.notification_service import NotificationService
from .application.services.technicians_service import TechniciansService
from .infrastructure.ai.gemini_provider import GeminiProvider
from .infrastructure.ai.groq_provider import GroqProvider
from .infrastructure.exchange.exchange_rate_api import ExchangeRateApiProvider
from .infrastructure.geocoding.bigdatacloud import BigDataCloudGeocoder
from .infrastructure.geocoding.nominatim import NominatimGeocoder
from .infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository
from .infrastructure.persistence.sqlalchemy.repositories.diagnosis_repository_sql import SqlDiagnosisRepository
from .infrastructure.persistence.sqlalchemy.repositories.notification_repository_sql import SqlNotificationRepository
from .infrastructure.persistence.sqlalchemy.repositories.rating_repository_sql import SqlRatingRepository
from .infrastructure.persistence.sqlalchemy.repositories.technician_repository_sql import SqlTechnicianRepository
from .infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository
from .infrastructure.rate_limit.ai_throttle import AICallThrottle
from .infrastructure.rate_limit.memory_rate_limiter import InMemoryRateLimiter
from .infrastructure.storage.cloudinary_host import CloudinaryImageHost
from .infrastructure.storage.local_storage import LocalImageHost

logger = logging.getLogger(__name__)

CUSTOMER = "customer"
TECHNICIAN = "technician"
ADMIN = "admin"
ROLES = (CUSTOMER, TECHNICIAN, ADMIN)

oauth2_scheme = HTTPBearer()


@dataclass(frozen=True)
class CurrentActor:
    id: str
    role: str


# =========================
# Authentication
# =========================
def get_current_actor(credentials: HTTPAuthorizationCredentials = Depends(oauth2_scheme)) -> CurrentActor:
    payload = decode_jwt_token(credentials.credentials)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    actor_id = payload.get("sub")
    if not actor_id:
        raise HTTPException(status_code=401, detail="Invalid token: missing user ID")
    role = payload.get("role", CUSTOMER)
    if role not in ROLES:
        raise HTTPException(status_code=401, detail="Invalid token: unknown role")
    return CurrentActor(id=str(actor_id), role=role)


def _require(role: str):
    def checker(actor: CurrentActor = Depends(get_current_actor)) -> CurrentActor:
        if actor.role != role:
            raise HTTPException(status_code=403, detail=f"This action is only available to {role}s")
        return actor
    return checker


require_customer = _require(CUSTOMER)
require_technician = _require(TECHNICIAN)
require_admin = _require(ADMIN)


# =========================
# Process-wide singletons
# =========================
_throttle = AICallThrottle(
    min_interval=settings.AI_CALL_DELAY_SECONDS,
    max_rate_limit_hits=settings.AI_MAX_RATE_LIMIT_HITS,
    cooldown_seconds=settings.AI_COOLDOWN_SECONDS,
)
_providers: List[AIProvider] = []
_providers_ready = False
_rate_limiter: RateLimiter = None


def get_ai_throttle() -> AICallThrottle:
    return _throttle


def get_ai_providers() -> List[AIProvider]:
    """Gemini first, then Groq; providers without an API key are left out."""
    global _providers_ready
    if not _providers_ready:
        if settings.GEMINI_API_KEY:
            _providers.append(GeminiProvider())
        if settings.GROQ_API_KEY:
            _providers.append(GroqProvider())
        if not _providers:
            logger.warning("No AI provider configured, custom issues will use heuristic estimates")
        _providers_ready = True
    return _providers


def get_rate_limiter() -> RateLimiter:
    global _rate_limiter
    if _rate_limiter is None:
        if settings.REDIS_URL:
            from .infrastructure.rate_limit.redis_rate_limiter import RedisRateLimiter
            _rate_limiter = RedisRateLimiter(settings.REDIS_URL)
            logger.info("Using Redis rate limiter")
        else:
            _rate_limiter = InMemoryRateLimiter()
    return _rate_limiter


def get_image_host() -> ImageHost:
    if settings.cloudinary_enabled:
        return CloudinaryImageHost()
    return LocalImageHost()


# =========================
# Service factories
# =========================
def get_notification_service(session: Session = Depends(get_session)) -> NotificationService:
    return NotificationService(repo=SqlNotificationRepository(session))


def get_appointments_service(
    session: Session = Depends(get_session),
    notifier: NotificationService = Depends(get_notification_service),
) -> AppointmentsService:
    return AppointmentsService(
        repo=SqlAppointmentsRepository(session),
        technician_repo=SqlTechnicianRepository(session),
        user_repo=SqlUserRepository(session),
        rating_repo=SqlRatingRepository(session),
        notifier=notifier,
    )


def get_technicians_service(
    session: Session = Depends(get_session),
    notifier: NotificationService = Depends(get_notification_service),
) -> TechniciansService:
    return TechniciansService(
        technician_repo=SqlTechnicianRepository(session),
        appointments_repo=SqlAppointmentsRepository(session),
        notifier=notifier,
    )


def get_estimator_service(
    session: Session = Depends(get_session),
    notifier: NotificationService = Depends(get_notification_service),
) -> EstimatorService:
    return EstimatorService(
        providers=get_ai_providers(),
        exchange_rates=ExchangeRateApiProvider(),
        throttle=get_ai_throttle(),
        diagnosis_repo=SqlDiagnosisRepository(session),
        notifier=notifier,
        currency=settings.LOCAL_CURRENCY,
    )


def get_location_service(
    session: Session = Depends(get_session),
    notifier: NotificationService = Depends(get_notification_service),
) -> LocationService:
    return LocationService(
        user_repo=SqlUserRepository(session),
        technician_repo=SqlTechnicianRepository(session),
        geocoders=[NominatimGeocoder(), BigDataCloudGeocoder()],
        notifier=notifier,
    )


def get_image_service(session: Session = Depends(get_session)) -> ImageService:
    return ImageService(
        image_host=get_image_host(),
        user_repo=SqlUserRepository(session),
        technician_repo=SqlTechnicianRepository(session),
    )
