from fastapi import APIRouter, Depends
from planit.core.dependencies import get_current_user
from planit.database.supabase_client import get_service_supabase
from planit.modules.memberships.schemas import MembershipResponse, ClaimRequest, ClaimResult
from planit.modules.memberships.service import MembershipService
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/invites", tags=["invites"])


def get_membership_service(supabase: Client = Depends(get_service_supabase)) -> MembershipService:
    return MembershipService(supabase)


@router.get("", response_model=List[MembershipResponse])
async def list_memberships(
    trip_id: str,
    current_user: Dict = Depends(get_current_user),
    service: MembershipService = Depends(get_membership_service)
):
    """List everyone invited to a trip (organizer only), newest first"""
    return service.list_memberships(trip_id, current_user["id"])


@router.post("/claim", response_model=ClaimResult)
async def claim_invite(
    body: ClaimRequest,
    current_user: Dict = Depends(get_current_user),
    service: MembershipService = Depends(get_membership_service)
):
    """Accept an invite as the signed-in account; returns where to send the guest next"""
    return service.claim(body.token, current_user)
