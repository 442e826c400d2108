from pydantic import BaseModel
from typing import Literal, Optional

PaymentStatus = Literal["verified", "reported", "not_reported"]


class RosterRow(BaseModel):
    id: str
    invited_email: str
    user_email: Optional[str] = None
    status: str
    rsvp_status: Optional[str] = None
    payment_status: PaymentStatus = "not_reported"
    payment_id: Optional[str] = None
    payment_amount: Optional[int] = None
