from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
import logging

from ..ports.notification_repo import NotificationRepository, NotificationDto, NOTIFICATION_TYPES

logger = logging.getLogger(__name__)


def _format_date(value: datetime) -> str:
    return value.strftime("%B %d, %Y %I:%M %p")


def _peso(amount: int) -> str:
    return f"₱{amount:,}"


# Message builders
def customer_welcome() -> str:
    return "Welcome to I-Repair! We're excited to help you with all your appliance repair needs. Get started by creating your first diagnosis!"

def technician_welcome() -> str:
    return "Welcome to I-Repair Technician Portal! We're excited to have you join our network of skilled professionals."

def registration_reminder() -> str:
    return "Complete your registration to start receiving repair requests! Choose to register as a freelance technician or shop owner in your profile settings."

def location_reminder() -> str:
    return "Please set your location to help us find the best technicians near you. Tap the location button to get started!"

def location_set(address: str) -> str:
    return f"Location successfully set to: {address}. You can now find nearby technicians!"

def appointment_confirmation(technician_name: str, scheduled: datetime) -> str:
    return f"Your appointment with {technician_name} has been successfully booked for {_format_date(scheduled)}. We'll send you a reminder closer to the date!"

def appointment_request(customer_name: str, service_type: str, scheduled: datetime) -> str:
    return f"New repair request from {customer_name} for {service_type} on {_format_date(scheduled)}. Check your appointments to accept or decline."

def appointment_accepted(technician_name: str) -> str:
    return f"{technician_name} accepted your appointment! You will be notified when the repair starts."

def appointment_rejected(technician_name: str, scheduled: datetime, reason: Optional[str]) -> str:
    message = f"Appointment rejected by {technician_name} for {_format_date(scheduled)}. The technician has declined your repair request."
    return message + (f"\n\nReason: {reason}" if reason else "")

def appointment_cancelled(customer_name: str, scheduled: datetime, reason: Optional[str]) -> str:
    message = f"Appointment cancelled by {customer_name} for {_format_date(scheduled)}. The customer has cancelled their repair request."
    return message + (f"\n\nReason: {reason}" if reason else "")

def technician_arrived(technician_name: str) -> str:
    return f"🎉 {technician_name} has arrived at your location! Please be ready for the repair to begin."

def repair_started(estimated_completion: Optional[str] = None) -> str:
    message = "Your repair has started! The technician is now working on your device."
    return message + (f" Estimated completion: {estimated_completion}." if estimated_completion else "")

def testing_started() -> str:
    return "Your appliance is now being tested for quality assurance."

def repair_completed(category: str) -> str:
    return f"✅ Great news! Your {category} repair has been completed successfully. Don't forget to rate your technician!"

def diagnosis_complete(category: str, estimated_price: int) -> str:
    if estimated_price > 0:
        price_message = f"Estimated repair cost: {_peso(estimated_price)}. Ready to book a technician?"
    else:
        price_message = "Ready to get a price estimate and book a technician?"
    return f"Your {category} diagnosis is complete! {price_message}"

def rating_received(rating: int, customer_name: str) -> str:
    stars = "⭐" * rating
    return f"You received a {rating}-star rating {stars} from {customer_name}! Great work on providing excellent service."

def registration_approved() -> str:
    return "Congratulations! Your technician registration has been approved. You can now start receiving and accepting repair requests from customers."

def registration_rejected(reason: str) -> str:
    return f"Your technician registration was not approved. Reason: {reason}. Please update your information and resubmit your application."


@dataclass
class NotificationService:
    """Records in-app notifications. Sending never fails the caller."""

    repo: NotificationRepository

    def emit(self, user_id: str, type: str, message: str) -> Optional[NotificationDto]:
        if not user_id:
            logger.error("No user ID provided for notification")
            return None
        if type not in NOTIFICATION_TYPES:
            logger.warning(f"Unknown notification type '{type}', storing as system")
            type = "system"
        try:
            notification = self.repo.add(user_id, type, message)
            logger.info(f"Notification sent: {type} -> {user_id}")
            return notification
        except Exception as e:
            logger.error(f"Error sending {type} notification to {user_id}: {e}")
            return None

    def emit_once(self, user_id: str, type: str, message: str) -> bool:
        dedupe_key = f"{user_id}:{type}"
        try:
            inserted = self.repo.add_if_absent(user_id, type, message, dedupe_key)
            if not inserted:
                logger.info(f"Notification {dedupe_key} already sent, skipping")
            return inserted
        except Exception as e:
            logger.error(f"Error sending one-time notification {dedupe_key}: {e}")
            return False

    def list_for_user(self, user_id: str, type: Optional[str] = None, read: Optional[bool] = None, limit: int = 50, offset: int = 0) -> List[NotificationDto]:
        return self.repo.list_for_user(user_id, type=type, read=read, limit=limit, offset=offset)

    def mark_read(self, user_id: str, notification_id: str) -> bool:
        return self.repo.mark_read(notification_id, user_id)

    def mark_all_read(self, user_id: str) -> int:
        return self.repo.mark_all_read(user_id)

    def delete(self, user_id: str, notification_id: str) -> bool:
        return self.repo.delete(notification_id, user_id)

    def unread_count(self, user_id: str) -> int:
        return self.repo.unread_count(user_id)
