from fastapi import APIRouter, Depends, HTTPException
import logging

from ..application.ports.geocoder import SelectedLocation
from ..application.services.location_service import LocationService
from ..application.services.technicians_service import TechniciansService
from ..dependencies import (
    CurrentActor,
    TECHNICIAN,
    get_location_service,
    get_technicians_service,
    require_admin,
    require_technician,
)
from ..schemas import (
    AvailabilityRequest,
    LocationBody,
    MessageResponse,
    RegistrationReviewRequest,
    TechnicianResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/technicians", tags=["Technicians"])


@router.get("/me", response_model=TechnicianResponse)
def get_me(
    actor: CurrentActor = Depends(require_technician),
    service: TechniciansService = Depends(get_technicians_service),
):
    return TechnicianResponse.from_dto(service.get(actor.id))


@router.post("/me/onboarding", response_model=MessageResponse)
def onboard(
    actor: CurrentActor = Depends(require_technician),
    service: TechniciansService = Depends(get_technicians_service),
):
    try:
        service.onboard(actor.id)
        return MessageResponse(message="Onboarding notifications checked")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error onboarding technician {actor.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to run onboarding")


@router.put("/me/availability", response_model=TechnicianResponse)
def set_availability(
    payload: AvailabilityRequest,
    actor: CurrentActor = Depends(require_technician),
    service: TechniciansService = Depends(get_technicians_service),
):
    try:
        return TechnicianResponse.from_dto(service.set_availability(actor.id, payload.available))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating availability for {actor.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update availability")


@router.put("/me/location", response_model=LocationBody)
def save_location(
    payload: LocationBody,
    actor: CurrentActor = Depends(require_technician),
    service: LocationService = Depends(get_location_service),
):
    try:
        saved = service.save_location(TECHNICIAN, actor.id, SelectedLocation(payload.latitude, payload.longitude, payload.address))
        return LocationBody(latitude=saved.latitude, longitude=saved.longitude, address=saved.address)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error saving technician location for {actor.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save location")


@router.get("/me/location", response_model=LocationBody)
def get_location(
    actor: CurrentActor = Depends(require_technician),
    service: LocationService = Depends(get_location_service),
):
    location = service.get_location(TECHNICIAN, actor.id)
    if not location:
        raise HTTPException(status_code=404, detail="No location saved yet")
    return LocationBody(latitude=location.latitude, longitude=location.longitude, address=location.address)


@router.put("/{technician_id}/registration", response_model=TechnicianResponse)
def review_registration(
    technician_id: str,
    payload: RegistrationReviewRequest,
    actor: CurrentActor = Depends(require_admin),
    service: TechniciansService = Depends(get_technicians_service),
):
    try:
        technician = service.review_registration(technician_id, payload.approved, payload.reason)
        logger.info(f"Admin {actor.id} reviewed registration of {technician_id}")
        return TechnicianResponse.from_dto(technician)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error reviewing registration for {technician_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to review registration")
