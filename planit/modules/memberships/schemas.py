from pydantic import BaseModel, field_validator
from typing import Literal, Optional
from datetime import datetime

MembershipStatus = Literal["invited", "accepted", "declined"]


class MembershipResponse(BaseModel):
    id: str
    trip_id: str
    invited_email: str
    user_id: Optional[str] = None
    status: MembershipStatus
    role: Optional[str] = "guest"
    invite_token: str
    invited_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ClaimRequest(BaseModel):
    token: str

    @field_validator("token")
    @classmethod
    def token_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("token is required")
        return value


class ClaimResult(BaseModel):
    status: MembershipStatus
    trip_id: str
    trip_slug: str
    redirect_to: str
    already_accepted: bool = False
