from pydantic import BaseModel
from typing import List, Literal, Optional

ReminderFilter = Literal["needs_rsvp", "needs_deposit"]


class InviteSendRequest(BaseModel):
    trip_id: str
    emails: List[str]


class InviteSendResult(BaseModel):
    sent: int = 0
    failed: int = 0
    email_configured: bool


class ReminderRequest(BaseModel):
    # Anything other than needs_rsvp / needs_deposit reminds every invited or accepted guest
    filter: Optional[str] = None
    reminder_type: Literal["rsvp", "deposit"]


class ReminderResult(BaseModel):
    sent: int = 0
    failed: int = 0
