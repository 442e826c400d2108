from pydantic import BaseModel, Field, StrictInt
from typing import Literal, Optional
from datetime import datetime

PaymentMethod = Literal["venmo", "zelle", "cashapp", "other"]


class PaymentUpsert(BaseModel):
    trip_id: str
    type: str = Field(default="deposit", min_length=1)
    amount_cents: StrictInt = Field(gt=0)
    method: PaymentMethod
    identifier: Optional[str] = None
    memo: Optional[str] = None


class PaymentVerifyRequest(BaseModel):
    payment_id: str


class PaymentResponse(BaseModel):
    id: str
    trip_id: str
    user_id: str
    type: str
    amount_cents: int
    method: PaymentMethod
    identifier: Optional[str] = None
    memo: Optional[str] = None
    verified_at: Optional[datetime] = None
    verified_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_verified(self) -> bool:
        return self.verified_at is not None

    class Config:
        from_attributes = True
