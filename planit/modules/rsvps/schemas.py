from pydantic import BaseModel, model_validator
from typing import Literal, Optional
from datetime import datetime

RSVPStatus = Literal["yes", "no", "maybe"]
WalkingPref = Literal["walk", "ride", "either"]


class RSVPUpsert(BaseModel):
    trip_id: str
    status: RSVPStatus
    arrival_at: Optional[datetime] = None
    departure_at: Optional[datetime] = None
    walking_pref: Optional[WalkingPref] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def departure_after_arrival(self):
        if self.arrival_at and self.departure_at and self.departure_at < self.arrival_at:
            raise ValueError("departure_at cannot be before arrival_at")
        return self


class RSVPResponse(BaseModel):
    id: str
    trip_id: str
    user_id: str
    status: RSVPStatus
    arrival_at: Optional[datetime] = None
    departure_at: Optional[datetime] = None
    walking_pref: Optional[WalkingPref] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
