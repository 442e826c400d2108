from fastapi import APIRouter, Depends
from planit.core.dependencies import get_current_user
from planit.database.supabase_client import get_service_supabase
from planit.modules.invites.schemas import (
    InviteSendRequest, InviteSendResult, ReminderRequest, ReminderResult
)
from planit.modules.invites.service import InviteService
from planit.modules.notifications.email import EmailService, get_email_service
from supabase import Client
from typing import Dict

router = APIRouter(tags=["invites"])


def get_invite_service(
    supabase: Client = Depends(get_service_supabase),
    email_service: EmailService = Depends(get_email_service)
) -> InviteService:
    return InviteService(supabase, email_service)


# Batch routes are sync so FastAPI runs them in its threadpool; SMTP sends block
@router.post("/invites/send", response_model=InviteSendResult)
def send_invites(
    body: InviteSendRequest,
    current_user: Dict = Depends(get_current_user),
    service: InviteService = Depends(get_invite_service)
):
    """Invite a list of emails to a trip (organizer only). Partial failures are counted, not raised."""
    return service.send_invites(body.trip_id, body.emails, current_user["id"])


@router.post("/admin/trips/{trip_id}/remind", response_model=ReminderResult)
def send_reminders(
    trip_id: str,
    body: ReminderRequest,
    current_user: Dict = Depends(get_current_user),
    service: InviteService = Depends(get_invite_service)
):
    """Email RSVP or deposit reminders to the guests selected by filter"""
    return service.send_reminders(trip_id, body.filter, body.reminder_type, current_user["id"])
