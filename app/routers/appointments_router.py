from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
import logging

from ..application.ports.appointments_repo import BookingRequest
from ..application.services.appointments_service import AppointmentsService
from ..dependencies import (
    CurrentActor,
    TECHNICIAN,
    get_appointments_service,
    get_current_actor,
    require_customer,
    require_technician,
)
from ..schemas import (
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentResponse,
    RatingRequest,
    ReasonRequest,
    StartRepairRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.post("", response_model=AppointmentResponse, status_code=201)
def book_appointment(
    payload: AppointmentCreate,
    actor: CurrentActor = Depends(require_customer),
    service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        appt = service.book(actor.id, BookingRequest(**payload.model_dump()))
        return AppointmentResponse.from_dto(appt)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error booking appointment: {e}")
        raise HTTPException(status_code=500, detail="Failed to book appointment")


@router.get("", response_model=AppointmentListResponse)
def list_appointments(
    status: Optional[List[str]] = Query(None, description="Technicians only: filter by status"),
    actor: CurrentActor = Depends(get_current_actor),
    service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        if actor.role == TECHNICIAN:
            appointments = service.list_for_technician(actor.id, status)
        else:
            appointments = service.list_for_customer(actor.id)
        items = [AppointmentResponse.from_dto(a) for a in appointments]
        return AppointmentListResponse(items=items, total=len(items))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing appointments: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve appointments")


@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: str,
    actor: CurrentActor = Depends(get_current_actor),
    service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        return AppointmentResponse.from_dto(service.get_for_actor(actor.id, actor.role, appointment_id))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving appointment {appointment_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve appointment")


@router.put("/{appointment_id}/cancel", response_model=AppointmentResponse)
def cancel_appointment(
    appointment_id: str,
    payload: ReasonRequest,
    actor: CurrentActor = Depends(require_customer),
    service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        appt = service.cancel(actor.id, appointment_id, payload.reason, payload.custom_reason)
        return AppointmentResponse.from_dto(appt)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error cancelling appointment {appointment_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to cancel appointment")


@router.post("/{appointment_id}/rating", response_model=AppointmentResponse)
def rate_appointment(
    appointment_id: str,
    payload: RatingRequest,
    actor: CurrentActor = Depends(require_customer),
    service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        appt = service.rate(actor.id, appointment_id, payload.rating, payload.comment)
        return AppointmentResponse.from_dto(appt)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error rating appointment {appointment_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to submit rating")


@router.put("/{appointment_id}/accept", response_model=AppointmentResponse)
def accept_appointment(
    appointment_id: str,
    actor: CurrentActor = Depends(require_technician),
    service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        return AppointmentResponse.from_dto(service.accept(actor.id, appointment_id))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error accepting appointment {appointment_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to accept appointment")


@router.put("/{appointment_id}/reject", response_model=AppointmentResponse)
def reject_appointment(
    appointment_id: str,
    payload: ReasonRequest,
    actor: CurrentActor = Depends(require_technician),
    service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        appt = service.reject(actor.id, appointment_id, payload.reason, payload.custom_reason)
        return AppointmentResponse.from_dto(appt)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error rejecting appointment {appointment_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to reject appointment")


@router.put("/{appointment_id}/arrived", response_model=AppointmentResponse)
def mark_arrived(
    appointment_id: str,
    actor: CurrentActor = Depends(require_technician),
    service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        return AppointmentResponse.from_dto(service.mark_arrived(actor.id, appointment_id))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error marking arrival for appointment {appointment_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to mark arrival")


@router.put("/{appointment_id}/start-repair", response_model=AppointmentResponse)
def start_repair(
    appointment_id: str,
    payload: StartRepairRequest,
    actor: CurrentActor = Depends(require_technician),
    service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        appt = service.start_repair(actor.id, appointment_id, payload.estimated_completion)
        return AppointmentResponse.from_dto(appt)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error starting repair for appointment {appointment_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to start repair")


@router.put("/{appointment_id}/start-testing", response_model=AppointmentResponse)
def start_testing(
    appointment_id: str,
    actor: CurrentActor = Depends(require_technician),
    service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        return AppointmentResponse.from_dto(service.start_testing(actor.id, appointment_id))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error starting testing for appointment {appointment_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to start testing")


@router.put("/{appointment_id}/complete", response_model=AppointmentResponse)
def complete_appointment(
    appointment_id: str,
    actor: CurrentActor = Depends(require_technician),
    service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        return AppointmentResponse.from_dto(service.complete(actor.id, appointment_id))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error completing appointment {appointment_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to complete appointment")
