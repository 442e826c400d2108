from supabase import Client
from postgrest.exceptions import APIError
from planit.core.errors import PlanitError, NotFoundError, translate_api_error
from planit.database.rows import first_row, all_rows
from planit.modules.trips.schemas import TripCreate, TripUpdate, TripResponse, MemberTripSummary
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

ACTIVE_MEMBERSHIP_STATUSES = ["invited", "accepted"]


def payment_status_of(payment: Optional[Dict[str, Any]]) -> str:
    """verified > reported > not_reported"""
    if not payment:
        return "not_reported"
    return "verified" if payment.get("verified_at") else "reported"


class TripService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_trip(self, trip_data: TripCreate, user_id: str) -> TripResponse:
        """Create a trip owned by user_id. A taken slug surfaces as ConstraintViolation."""
        try:
            payload = trip_data.model_dump(mode="json")
            payload["created_by"] = user_id
            result = self.supabase.table("trips").insert(payload).execute()
            row = first_row(result)
            if not row:
                raise PlanitError("Failed to create trip")
            logger.info(f"Trip {row['id']} ({row['slug']}) created by {user_id}")
            return TripResponse(**row)
        except PlanitError:
            raise
        except APIError as e:
            raise translate_api_error(e)

    def get_owned_trip(self, trip_id: str, user_id: str) -> TripResponse:
        """Trip by id if user_id created it. Absent and not-owned are both NotFound."""
        try:
            result = self.supabase.table("trips")\
                .select("*")\
                .eq("id", trip_id)\
                .eq("created_by", user_id)\
                .limit(1)\
                .execute()
            row = first_row(result)
            if not row:
                raise NotFoundError(f"Trip {trip_id} not found for organizer {user_id}")
            return TripResponse(**row)
        except PlanitError:
            raise
        except APIError as e:
            raise translate_api_error(e)

    def update_trip(self, trip_id: str, trip_data: TripUpdate, user_id: str) -> TripResponse:
        """Replace the editable fields of a trip the user created"""
        try:
            self.get_owned_trip(trip_id, user_id)
            payload = trip_data.model_dump(mode="json")
            payload["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("trips")\
                .update(payload)\
                .eq("id", trip_id)\
                .eq("created_by", user_id)\
                .execute()
            row = first_row(result)
            if not row:
                raise NotFoundError(f"Trip {trip_id} not found for organizer {user_id}")
            return TripResponse(**row)
        except PlanitError:
            raise
        except APIError as e:
            raise translate_api_error(e)

    def list_owned_trips(self, user_id: str) -> List[TripResponse]:
        try:
            result = self.supabase.table("trips")\
                .select("*")\
                .eq("created_by", user_id)\
                .order("created_at", desc=True)\
                .execute()
            return [TripResponse(**row) for row in all_rows(result)]
        except APIError as e:
            raise translate_api_error(e)

    def _get_bound_membership(self, trip_id: str, user_id: str, statuses: List[str]) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("memberships")\
            .select("id, status")\
            .eq("trip_id", trip_id)\
            .eq("user_id", user_id)\
            .in_("status", statuses)\
            .limit(1)\
            .execute()
        return first_row(result)

    def get_trip_for_member(self, slug: str, user_id: str) -> TripResponse:
        """Trip by slug for its creator or anyone whose account is bound to an active membership"""
        try:
            result = self.supabase.table("trips")\
                .select("*")\
                .eq("slug", slug)\
                .limit(1)\
                .execute()
            row = first_row(result)
            if not row:
                raise NotFoundError(f"Trip {slug} not found")
            if row.get("created_by") != user_id and not self._get_bound_membership(
                row["id"], user_id, ACTIVE_MEMBERSHIP_STATUSES
            ):
                raise NotFoundError(f"Trip {slug} not visible to {user_id}")
            return TripResponse(**row)
        except PlanitError:
            raise
        except APIError as e:
            raise translate_api_error(e)

    def get_trip_for_participant(self, trip_id: str, user_id: str) -> TripResponse:
        """Trip by id for its creator or a guest who has accepted an invite to it"""
        try:
            result = self.supabase.table("trips")\
                .select("*")\
                .eq("id", trip_id)\
                .limit(1)\
                .execute()
            row = first_row(result)
            if not row:
                raise NotFoundError(f"Trip {trip_id} not found")
            if row.get("created_by") != user_id and not self._get_bound_membership(
                trip_id, user_id, ["accepted"]
            ):
                raise NotFoundError(f"Trip {trip_id} not visible to {user_id}")
            return TripResponse(**row)
        except PlanitError:
            raise
        except APIError as e:
            raise translate_api_error(e)

    def list_member_trips(self, user_id: str) -> List[MemberTripSummary]:
        """Trips the user belongs to, each with their own RSVP and deposit status"""
        try:
            memberships = all_rows(
                self.supabase.table("memberships")
                .select("trip_id, status")
                .eq("user_id", user_id)
                .in_("status", ACTIVE_MEMBERSHIP_STATUSES)
                .execute()
            )
            if not memberships:
                return []
            trip_ids = [m["trip_id"] for m in memberships]

            trips = {
                t["id"]: t for t in all_rows(
                    self.supabase.table("trips")
                    .select("id, slug, title, location_name, start_date, end_date, deposit_due_date")
                    .in_("id", trip_ids)
                    .execute()
                )
            }
            rsvps = {
                r["trip_id"]: r for r in all_rows(
                    self.supabase.table("rsvps")
                    .select("trip_id, status")
                    .eq("user_id", user_id)
                    .in_("trip_id", trip_ids)
                    .execute()
                )
            }
            payments = {
                p["trip_id"]: p for p in all_rows(
                    self.supabase.table("payments")
                    .select("trip_id, verified_at")
                    .eq("user_id", user_id)
                    .eq("type", "deposit")
                    .in_("trip_id", trip_ids)
                    .execute()
                )
            }

            summaries = []
            for membership in memberships:
                trip = trips.get(membership["trip_id"])
                if not trip:
                    continue
                rsvp = rsvps.get(trip["id"])
                summaries.append(MemberTripSummary(
                    id=trip["id"],
                    slug=trip["slug"],
                    title=trip["title"],
                    location_name=trip.get("location_name"),
                    start_date=trip.get("start_date"),
                    end_date=trip.get("end_date"),
                    deposit_due_date=trip.get("deposit_due_date"),
                    membership_status=membership["status"],
                    rsvp_status=rsvp["status"] if rsvp else None,
                    payment_status=payment_status_of(payments.get(trip["id"])),
                ))
            return summaries
        except APIError as e:
            raise translate_api_error(e)
