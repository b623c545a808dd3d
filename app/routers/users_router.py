from fastapi import APIRouter, Depends, HTTPException
import logging

from ..application.ports.geocoder import SelectedLocation
from ..application.services.location_service import CUSTOMER, LocationService
from ..dependencies import CurrentActor, get_location_service, require_customer
from ..schemas import LocationBody, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/me/onboarding", response_model=MessageResponse)
def onboard(
    actor: CurrentActor = Depends(require_customer),
    service: LocationService = Depends(get_location_service),
):
    try:
        service.onboard_customer(actor.id)
        return MessageResponse(message="Onboarding notifications checked")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error onboarding customer {actor.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to run onboarding")


@router.put("/me/location", response_model=LocationBody)
def save_location(
    payload: LocationBody,
    actor: CurrentActor = Depends(require_customer),
    service: LocationService = Depends(get_location_service),
):
    try:
        saved = service.save_location(CUSTOMER, actor.id, SelectedLocation(payload.latitude, payload.longitude, payload.address))
        return LocationBody(latitude=saved.latitude, longitude=saved.longitude, address=saved.address)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error saving customer location for {actor.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save location")


@router.get("/me/location", response_model=LocationBody)
def get_location(
    actor: CurrentActor = Depends(require_customer),
    service: LocationService = Depends(get_location_service),
):
    location = service.get_location(CUSTOMER, actor.id)
    if not location:
        raise HTTPException(status_code=404, detail="No location saved yet")
    return LocationBody(latitude=location.latitude, longitude=location.longitude, address=location.address)
