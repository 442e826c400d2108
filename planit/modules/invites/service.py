from supabase import Client
from postgrest.exceptions import APIError
from planit.core.errors import ValidationError, translate_api_error
from planit.database.rows import all_rows
from planit.modules.invites.schemas import InviteSendResult, ReminderResult
from planit.modules.memberships.service import MembershipService, normalize_email
from planit.modules.memberships.schemas import MembershipResponse
from planit.modules.notifications.email import EmailService
from planit.modules.trips.schemas import TripResponse
from planit.modules.trips.service import TripService
from typing import Dict, Iterable, List, Optional, Set
from datetime import date
import logging

logger = logging.getLogger(__name__)


def normalize_emails(emails: Iterable[str]) -> List[str]:
    """Lower-case, trim, drop anything without an "@", and de-duplicate keeping first-seen order."""
    seen: Set[str] = set()
    processed = []
    for email in emails:
        email = normalize_email(email)
        if not email or "@" not in email or email in seen:
            continue
        seen.add(email)
        processed.append(email)
    return processed


def format_due_date(due: Optional[date]) -> str:
    if not due:
        return "soon"
    return f"{due:%B} {due.day}, {due.year}"


class InviteService:
    """Sends invite and reminder batches for a trip.

    One recipient's failure is logged and counted, never raised; the batch always
    runs to the end. A skipped send (email unconfigured) still counts as sent,
    because the invite link can be shared by hand.
    """

    def __init__(self, supabase: Client, email_service: EmailService):
        self.supabase = supabase
        self.email_service = email_service
        self.trips = TripService(supabase)
        self.memberships = MembershipService(supabase)

    @staticmethod
    def _trip_payload(trip: TripResponse) -> Dict:
        return {"id": trip.id, "title": trip.title, "slug": trip.slug}

    def send_invites(self, trip_id: str, emails: List[str], organizer_id: str) -> InviteSendResult:
        trip = self.trips.get_owned_trip(trip_id, organizer_id)
        if not emails:
            raise ValidationError("emails array required")
        processed = normalize_emails(emails)
        if not processed:
            raise ValidationError("No valid emails provided")

        result = InviteSendResult(email_configured=self.email_service.is_configured)
        for email in processed:
            try:
                token = self.memberships.invite(trip.id, email)
                self.email_service.send_invite(token, self._trip_payload(trip), email)
                result.sent += 1
            except Exception as e:
                logger.error(f"Failed to invite {email} to trip {trip.id}: {e}")
                result.failed += 1

        logger.info(f"Invite batch for trip {trip.id}: {result.sent} sent, {result.failed} failed")
        return result

    def _rsvp_user_ids(self, trip_id: str) -> Set[str]:
        rows = all_rows(
            self.supabase.table("rsvps").select("user_id").eq("trip_id", trip_id).execute()
        )
        return {r["user_id"] for r in rows if r.get("user_id")}

    def _verified_deposit_user_ids(self, trip_id: str) -> Set[str]:
        rows = all_rows(
            self.supabase.table("payments")
            .select("user_id, verified_at")
            .eq("trip_id", trip_id)
            .eq("type", "deposit")
            .execute()
        )
        return {r["user_id"] for r in rows if r.get("user_id") and r.get("verified_at")}

    def select_recipients(self, trip_id: str, reminder_filter: Optional[str]) -> List[MembershipResponse]:
        """Invited/accepted members still owing what the filter asks about.

        needs_rsvp drops anyone with an RSVP row, whatever its status. needs_deposit drops
        only members whose deposit has been verified; a reported payment is not enough.
        """
        try:
            members = self.memberships.list_active(trip_id)
            if reminder_filter == "needs_rsvp":
                responded = self._rsvp_user_ids(trip_id)
                members = [m for m in members if not (m.user_id and m.user_id in responded)]
            elif reminder_filter == "needs_deposit":
                paid = self._verified_deposit_user_ids(trip_id)
                members = [m for m in members if not (m.user_id and m.user_id in paid)]
            return members
        except APIError as e:
            raise translate_api_error(e)

    def send_reminders(
        self,
        trip_id: str,
        reminder_filter: Optional[str],
        reminder_type: str,
        organizer_id: str,
    ) -> ReminderResult:
        trip = self.trips.get_owned_trip(trip_id, organizer_id)
        recipients = self.select_recipients(trip.id, reminder_filter)
        payload = self._trip_payload(trip)
        due_text = format_due_date(trip.deposit_due_date)

        result = ReminderResult()
        for member in recipients:
            try:
                if reminder_type == "deposit":
                    self.email_service.send_deposit_reminder(payload, member.invited_email, due_text)
                else:
                    self.email_service.send_rsvp_reminder(payload, member.invited_email)
                result.sent += 1
            except Exception as e:
                logger.error(f"Failed to send {reminder_type} reminder to {member.invited_email}: {e}")
                result.failed += 1

        logger.info(
            f"{reminder_type} reminders for trip {trip.id} (filter={reminder_filter}): "
            f"{result.sent} sent, {result.failed} failed"
        )
        return result
