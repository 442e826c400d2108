from supabase import Client
from postgrest.exceptions import APIError
from planit.core.errors import PlanitError, translate_api_error
from planit.database.rows import first_row
from planit.modules.rsvps.schemas import RSVPUpsert, RSVPResponse
from planit.modules.trips.service import TripService
from typing import Optional
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class RSVPService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def upsert_rsvp(self, rsvp_data: RSVPUpsert, user_id: str) -> RSVPResponse:
        """Record the user's attendance decision; a second write replaces the first"""
        try:
            TripService(self.supabase).get_trip_for_participant(rsvp_data.trip_id, user_id)
            payload = rsvp_data.model_dump(mode="json")
            payload["user_id"] = user_id
            payload["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("rsvps")\
                .upsert(payload, on_conflict="trip_id,user_id")\
                .execute()
            row = first_row(result)
            if not row:
                raise PlanitError("Failed to save RSVP")
            logger.info(f"RSVP {row['status']} saved for {user_id} on trip {rsvp_data.trip_id}")
            return RSVPResponse(**row)
        except PlanitError:
            raise
        except APIError as e:
            raise translate_api_error(e)

    def get_rsvp(self, trip_id: str, user_id: str) -> Optional[RSVPResponse]:
        """The user's RSVP for a trip, or None if they have not responded"""
        try:
            TripService(self.supabase).get_trip_for_participant(trip_id, user_id)
            result = self.supabase.table("rsvps")\
                .select("*")\
                .eq("trip_id", trip_id)\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
            row = first_row(result)
            return RSVPResponse(**row) if row else None
        except PlanitError:
            raise
        except APIError as e:
            raise translate_api_error(e)
