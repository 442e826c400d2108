from supabase import Client
from postgrest.exceptions import APIError
from planit.core.errors import translate_api_error
from planit.database.rows import all_rows
from planit.modules.roster.schemas import RosterRow
from planit.modules.trips.service import TripService, payment_status_of
from typing import Dict, List
import logging

logger = logging.getLogger(__name__)


class RosterService:
    """Organizer dashboard view: one row per membership with its RSVP and deposit state."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _user_emails(self, user_ids: List[str]) -> Dict[str, str]:
        if not user_ids:
            return {}
        rows = all_rows(
            self.supabase.table("users").select("id, email").in_("id", user_ids).execute()
        )
        return {r["id"]: r.get("email") for r in rows}

    def build_roster(self, trip_id: str, organizer_id: str) -> List[RosterRow]:
        trip = TripService(self.supabase).get_owned_trip(trip_id, organizer_id)
        try:
            memberships = all_rows(
                self.supabase.table("memberships")
                .select("id, invited_email, status, invited_at, accepted_at, user_id")
                .eq("trip_id", trip.id)
                .execute()
            )
            if not memberships:
                return []

            rsvps = {
                r["user_id"]: r for r in all_rows(
                    self.supabase.table("rsvps")
                    .select("user_id, status")
                    .eq("trip_id", trip.id)
                    .execute()
                )
            }
            payments = {
                p["user_id"]: p for p in all_rows(
                    self.supabase.table("payments")
                    .select("id, user_id, amount_cents, verified_at")
                    .eq("trip_id", trip.id)
                    .eq("type", "deposit")
                    .execute()
                )
            }
            bound_ids = sorted({m["user_id"] for m in memberships if m.get("user_id")})
            emails = self._user_emails(bound_ids)
        except APIError as e:
            raise translate_api_error(e)

        roster = []
        for membership in memberships:
            user_id = membership.get("user_id")
            rsvp = rsvps.get(user_id) if user_id else None
            payment = payments.get(user_id) if user_id else None
            roster.append(RosterRow(
                id=membership["id"],
                invited_email=membership["invited_email"],
                user_email=emails.get(user_id) if user_id else None,
                status=membership["status"],
                rsvp_status=rsvp["status"] if rsvp else None,
                payment_status=payment_status_of(payment),
                payment_id=payment["id"] if payment else None,
                payment_amount=payment["amount_cents"] if payment else None,
            ))
        logger.debug(f"Roster for trip {trip.id}: {len(roster)} member(s)")
        return roster
