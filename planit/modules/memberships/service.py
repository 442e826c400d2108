from supabase import Client
from postgrest.exceptions import APIError
from planit.core.errors import (
    PlanitError, NotFoundError, EmailMismatchError, ConstraintViolation, ErrorCode, translate_api_error
)
from planit.database.rows import first_row, all_rows
from planit.modules.memberships.schemas import MembershipResponse, ClaimResult
from planit.modules.trips.service import TripService
from typing import Dict, List, Optional
from datetime import datetime, timezone
import secrets
import logging

logger = logging.getLogger(__name__)

INVITE_TOKEN_BYTES = 32


def generate_invite_token() -> str:
    return secrets.token_hex(INVITE_TOKEN_BYTES)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class MembershipService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _find(self, trip_id: str, email: str) -> Optional[Dict]:
        result = self.supabase.table("memberships")\
            .select("id")\
            .eq("trip_id", trip_id)\
            .eq("invited_email", email)\
            .limit(1)\
            .execute()
        return first_row(result)

    def _reissue(self, membership_id: str, token: str) -> None:
        self.supabase.table("memberships")\
            .update({"invite_token": token, "status": "invited"})\
            .eq("id", membership_id)\
            .execute()

    def invite(self, trip_id: str, email: str) -> str:
        """Create or reissue the membership for (trip, email) and return its new invite token.

        Does not send anything. A resend replaces the token, so earlier links stop working.
        """
        email = normalize_email(email)
        token = generate_invite_token()
        try:
            existing = self._find(trip_id, email)
            if existing:
                self._reissue(existing["id"], token)
                logger.info(f"Reissued invite for {email} on trip {trip_id}")
                return token
            try:
                self.supabase.table("memberships").insert({
                    "trip_id": trip_id,
                    "invited_email": email,
                    "invite_token": token,
                    "status": "invited",
                    "role": "guest",
                }).execute()
            except APIError as e:
                error = translate_api_error(e)
                if not isinstance(error, ConstraintViolation):
                    raise error
                # Another request inserted (trip, email) first
                existing = self._find(trip_id, email)
                if not existing:
                    raise error
                self._reissue(existing["id"], token)
            logger.info(f"Invited {email} to trip {trip_id}")
            return token
        except PlanitError:
            raise
        except APIError as e:
            raise translate_api_error(e)

    def get_by_token(self, token: str) -> Optional[MembershipResponse]:
        try:
            result = self.supabase.table("memberships")\
                .select("*")\
                .eq("invite_token", token)\
                .limit(1)\
                .execute()
            row = first_row(result)
            return MembershipResponse(**row) if row else None
        except APIError as e:
            raise translate_api_error(e, not_found_code=ErrorCode.INVITE_NOT_FOUND)

    def _trip_slug(self, trip_id: str) -> str:
        row = first_row(
            self.supabase.table("trips").select("slug").eq("id", trip_id).limit(1).execute()
        )
        if not row:
            raise NotFoundError(f"Trip {trip_id} for invite is missing", code=ErrorCode.INVITE_NOT_FOUND)
        return row["slug"]

    def claim(self, token: str, user: Dict) -> ClaimResult:
        """Bind the membership behind token to user and mark it accepted.

        The user's email must match the invited address (case-insensitive); a mismatch
        never rebinds. Claiming an invite already accepted by the same account is a no-op.
        """
        try:
            membership = self.get_by_token(token)
            if membership is None:
                raise NotFoundError("Invite token not found", code=ErrorCode.INVITE_NOT_FOUND)

            if normalize_email(membership.invited_email) != normalize_email(user.get("email")):
                raise EmailMismatchError(
                    f"Invite {membership.id} is for {membership.invited_email}, "
                    f"claimed by {user.get('email')}"
                )

            slug = self._trip_slug(membership.trip_id)
            if membership.status == "accepted" and membership.user_id == user["id"]:
                return ClaimResult(
                    status="accepted",
                    trip_id=membership.trip_id,
                    trip_slug=slug,
                    redirect_to=f"/trips/{slug}",
                    already_accepted=True,
                )

            self.supabase.table("memberships")\
                .update({
                    "user_id": user["id"],
                    "status": "accepted",
                    "accepted_at": datetime.now(timezone.utc).isoformat(),
                })\
                .eq("id", membership.id)\
                .execute()
            logger.info(f"Membership {membership.id} accepted by {user['id']}")
            return ClaimResult(
                status="accepted",
                trip_id=membership.trip_id,
                trip_slug=slug,
                redirect_to=f"/trips/{slug}",
            )
        except PlanitError:
            raise
        except APIError as e:
            raise translate_api_error(e, not_found_code=ErrorCode.INVITE_NOT_FOUND)

    def list_memberships(self, trip_id: str, user_id: str) -> List[MembershipResponse]:
        """All memberships of a trip the caller organizes, newest invite first"""
        TripService(self.supabase).get_owned_trip(trip_id, user_id)
        try:
            result = self.supabase.table("memberships")\
                .select("*")\
                .eq("trip_id", trip_id)\
                .order("invited_at", desc=True)\
                .execute()
            return [MembershipResponse(**row) for row in all_rows(result)]
        except APIError as e:
            raise translate_api_error(e)

    def list_active(self, trip_id: str) -> List[MembershipResponse]:
        """Memberships still in play (invited or accepted) for a trip"""
        try:
            result = self.supabase.table("memberships")\
                .select("*")\
                .eq("trip_id", trip_id)\
                .in_("status", ["invited", "accepted"])\
                .execute()
            return [MembershipResponse(**row) for row in all_rows(result)]
        except APIError as e:
            raise translate_api_error(e)
