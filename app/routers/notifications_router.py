from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
import logging

from ..application.services.notification_service import NotificationService
from ..dependencies import CurrentActor, get_current_actor, get_notification_service
from ..schemas import CountResponse, MessageResponse, NotificationListResponse, NotificationResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def _to_response(n) -> NotificationResponse:
    return NotificationResponse(id=n.id, type=n.type, message=n.message, read=n.read, created_at=n.created_at)


@router.get("", response_model=NotificationListResponse)
def get_notifications(
    type: Optional[str] = Query(None),
    read: Optional[bool] = Query(None),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    actor: CurrentActor = Depends(get_current_actor),
    service: NotificationService = Depends(get_notification_service),
):
    try:
        items = service.list_for_user(actor.id, type=type, read=read, limit=limit, offset=offset)
        return NotificationListResponse(items=[_to_response(n) for n in items], unread_count=service.unread_count(actor.id))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving notifications: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve notifications")


@router.get("/unread-count", response_model=CountResponse)
def get_unread_count(
    actor: CurrentActor = Depends(get_current_actor),
    service: NotificationService = Depends(get_notification_service),
):
    try:
        return CountResponse(count=service.unread_count(actor.id))
    except Exception as e:
        logger.error(f"Error counting notifications: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to count notifications")


@router.put("/read-all", response_model=CountResponse)
def mark_all_read(
    actor: CurrentActor = Depends(get_current_actor),
    service: NotificationService = Depends(get_notification_service),
):
    try:
        return CountResponse(count=service.mark_all_read(actor.id))
    except Exception as e:
        logger.error(f"Error marking notifications read: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to update notifications")


@router.put("/{notification_id}/read", response_model=MessageResponse)
def mark_read(
    notification_id: str,
    actor: CurrentActor = Depends(get_current_actor),
    service: NotificationService = Depends(get_notification_service),
):
    try:
        if not service.mark_read(actor.id, notification_id):
            raise HTTPException(status_code=404, detail="Notification not found")
        return MessageResponse(message="Notification marked as read")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error marking notification {notification_id} read: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to update notification")


@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(
    notification_id: str,
    actor: CurrentActor = Depends(get_current_actor),
    service: NotificationService = Depends(get_notification_service),
):
    try:
        if not service.delete(actor.id, notification_id):
            raise HTTPException(status_code=404, detail="Notification not found")
        return MessageResponse(message="Notification deleted")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting notification {notification_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to delete notification")
