from fastapi import APIRouter, Depends
from planit.core.dependencies import get_current_user
from planit.database.supabase_client import get_service_supabase
from planit.modules.roster.schemas import RosterRow
from planit.modules.roster.service import RosterService
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/admin/roster", tags=["roster"])


def get_roster_service(supabase: Client = Depends(get_service_supabase)) -> RosterService:
    return RosterService(supabase)


@router.get("", response_model=List[RosterRow])
async def get_roster(
    trip_id: str,
    current_user: Dict = Depends(get_current_user),
    service: RosterService = Depends(get_roster_service)
):
    """Membership, RSVP and deposit status per guest (organizer only)"""
    return service.build_roster(trip_id, current_user["id"])
