from fastapi import APIRouter, Depends
from planit.core.dependencies import get_current_user
from planit.database.supabase_client import get_service_supabase
from planit.modules.trips.schemas import TripCreate, TripUpdate, TripResponse, MemberTripSummary
from planit.modules.trips.service import TripService
from supabase import Client
from typing import List, Dict

router = APIRouter(tags=["trips"])


def get_trip_service(supabase: Client = Depends(get_service_supabase)) -> TripService:
    return TripService(supabase)


@router.post("/admin/trips", response_model=TripResponse, status_code=201)
async def create_trip(
    trip_data: TripCreate,
    current_user: Dict = Depends(get_current_user),
    service: TripService = Depends(get_trip_service)
):
    """Create a trip; the caller becomes its organizer"""
    return service.create_trip(trip_data, current_user["id"])


@router.get("/admin/trips", response_model=List[TripResponse])
async def list_owned_trips(
    current_user: Dict = Depends(get_current_user),
    service: TripService = Depends(get_trip_service)
):
    """List trips the caller organizes"""
    return service.list_owned_trips(current_user["id"])


@router.get("/admin/trips/{trip_id}", response_model=TripResponse)
async def get_owned_trip(
    trip_id: str,
    current_user: Dict = Depends(get_current_user),
    service: TripService = Depends(get_trip_service)
):
    return service.get_owned_trip(trip_id, current_user["id"])


@router.patch("/admin/trips/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_id: str,
    trip_data: TripUpdate,
    current_user: Dict = Depends(get_current_user),
    service: TripService = Depends(get_trip_service)
):
    """Update a trip (organizer only)"""
    return service.update_trip(trip_id, trip_data, current_user["id"])


@router.get("/trips", response_model=List[MemberTripSummary])
async def list_my_trips(
    current_user: Dict = Depends(get_current_user),
    service: TripService = Depends(get_trip_service)
):
    """Trips the caller has been invited to or joined"""
    return service.list_member_trips(current_user["id"])


@router.get("/trips/{slug}", response_model=TripResponse)
async def get_trip(
    slug: str,
    current_user: Dict = Depends(get_current_user),
    service: TripService = Depends(get_trip_service)
):
    return service.get_trip_for_member(slug, current_user["id"])
