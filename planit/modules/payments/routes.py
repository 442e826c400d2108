from fastapi import APIRouter, Depends
from planit.core.dependencies import get_current_user
from planit.database.supabase_client import get_service_supabase
from planit.modules.payments.schemas import PaymentUpsert, PaymentResponse, PaymentVerifyRequest
from planit.modules.payments.service import PaymentService
from supabase import Client
from typing import Dict, Optional

router = APIRouter(tags=["payments"])


def get_payment_service(supabase: Client = Depends(get_service_supabase)) -> PaymentService:
    return PaymentService(supabase)


@router.post("/payments", response_model=PaymentResponse)
async def report_payment(
    payment_data: PaymentUpsert,
    current_user: Dict = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service)
):
    """Report (or correct) the caller's payment for a trip"""
    return service.upsert_payment(payment_data, current_user["id"])


@router.get("/payments", response_model=Optional[PaymentResponse])
async def get_my_payment(
    trip_id: str,
    type: str = "deposit",
    current_user: Dict = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service)
):
    return service.get_payment(trip_id, current_user["id"], type)


@router.patch("/admin/payments/verify", response_model=PaymentResponse)
async def verify_payment(
    body: PaymentVerifyRequest,
    current_user: Dict = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service)
):
    """Mark a payment as received (trip organizer only)"""
    return service.verify_payment(body.payment_id, current_user["id"])
