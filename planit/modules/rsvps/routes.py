from fastapi import APIRouter, Depends
from planit.core.dependencies import get_current_user
from planit.database.supabase_client import get_service_supabase
from planit.modules.rsvps.schemas import RSVPUpsert, RSVPResponse
from planit.modules.rsvps.service import RSVPService
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/rsvps", tags=["rsvps"])


def get_rsvp_service(supabase: Client = Depends(get_service_supabase)) -> RSVPService:
    return RSVPService(supabase)


@router.post("", response_model=RSVPResponse)
async def submit_rsvp(
    rsvp_data: RSVPUpsert,
    current_user: Dict = Depends(get_current_user),
    service: RSVPService = Depends(get_rsvp_service)
):
    """Create or replace the caller's RSVP for a trip"""
    return service.upsert_rsvp(rsvp_data, current_user["id"])


@router.get("", response_model=Optional[RSVPResponse])
async def get_my_rsvp(
    trip_id: str,
    current_user: Dict = Depends(get_current_user),
    service: RSVPService = Depends(get_rsvp_service)
):
    return service.get_rsvp(trip_id, current_user["id"])
