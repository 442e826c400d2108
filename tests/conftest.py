"""Shared test fixtures for the trip planner backend."""

from unittest.mock import MagicMock

import pytest

from planit.modules.notifications.email import EmailService
from planit.modules.trips.schemas import TripCreate
from planit.modules.trips.service import TripService
from tests.fakes import FakeSupabase

ORGANIZER = {"id": "org-1", "email": "host@example.com"}
OTHER_ORGANIZER = {"id": "org-2", "email": "rival@example.com"}
GUEST = {"id": "guest-1", "email": "alice@example.com"}


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def organizer():
    return dict(ORGANIZER)


@pytest.fixture
def guest():
    return dict(GUEST)


@pytest.fixture
def email_service():
    """Unconfigured email delivery: every send is skipped."""
    service = MagicMock(spec=EmailService)
    service.is_configured = False
    service.send_invite.return_value = {"skipped": True}
    service.send_rsvp_reminder.return_value = {"skipped": True}
    service.send_deposit_reminder.return_value = {"skipped": True}
    return service


def make_trip(supabase, owner_id: str, slug: str = "pebble-beach-2027", **overrides):
    data = {
        "title": "Pebble Beach Weekend",
        "slug": slug,
        "location_name": "Pebble Beach, CA",
        "start_date": "2027-05-14",
        "end_date": "2027-05-17",
        "deposit_amount_cents": 50000,
        "deposit_due_date": "2027-03-01",
        "venmo_handle": "host-golf",
    }
    data.update(overrides)
    return TripService(supabase).create_trip(TripCreate(**data), owner_id)


@pytest.fixture
def trip(supabase, organizer):
    return make_trip(supabase, organizer["id"])


def add_accepted_member(supabase, trip_id: str, user: dict) -> dict:
    """Insert a membership already claimed by user, bypassing the invite flow."""
    row = {
        "id": f"m-{user['id']}-{trip_id}",
        "trip_id": trip_id,
        "invited_email": user["email"],
        "invite_token": f"token-{user['id']}-{trip_id}",
        "status": "accepted",
        "user_id": user["id"],
        "invited_at": supabase.now(),
        "accepted_at": supabase.now(),
    }
    supabase.table("memberships").insert(row).execute()
    supabase.tables.setdefault("users", [])
    if not any(u["id"] == user["id"] for u in supabase.tables["users"]):
        supabase.tables["users"].append({"id": user["id"], "email": user["email"]})
    return row
