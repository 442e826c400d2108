import pydantic
import pytest

from planit.core.errors import ConstraintViolation, NotFoundError
from planit.modules.trips.schemas import Game, ItineraryDay, TripCreate, TripResponse, TripUpdate
from planit.modules.trips.service import TripService
from tests.conftest import OTHER_ORGANIZER, add_accepted_member, make_trip

BASE = {"title": "Bandon Dunes", "slug": "bandon-2027", "deposit_amount_cents": 25000}


def test_slug_must_be_url_safe():
    with pytest.raises(pydantic.ValidationError):
        TripCreate(**{**BASE, "slug": "Bandon Dunes!"})


def test_deposit_rejects_floats_and_negatives():
    with pytest.raises(pydantic.ValidationError):
        TripCreate(**{**BASE, "deposit_amount_cents": 250.5})
    with pytest.raises(pydantic.ValidationError):
        TripCreate(**{**BASE, "deposit_amount_cents": -1})


def test_end_date_before_start_date_rejected():
    with pytest.raises(pydantic.ValidationError):
        TripCreate(**{**BASE, "start_date": "2027-05-10", "end_date": "2027-05-01"})


def test_empty_qr_url_becomes_none_and_handle_loses_at():
    trip = TripCreate(**{**BASE, "venmo_qr_url": "", "venmo_handle": "@host"})
    assert trip.venmo_qr_url is None
    assert trip.venmo_handle == "host"


def test_itinerary_is_tagged_and_untagged_items_read_as_days():
    trip = TripCreate(**{**BASE, "itinerary": [
        {"day": "Friday", "title": "Arrive", "details": "Check in"},
        {"kind": "game", "title": "Skins", "prize_fund_cents": 20000},
        {"kind": "game", "title": "Closest to pin", "prize_fund_cents": 5000},
    ]})
    assert isinstance(trip.itinerary[0], ItineraryDay)
    assert isinstance(trip.itinerary[1], Game)


def test_prize_fund_is_sum_of_games():
    response = TripResponse(
        id="t1", slug="s", title="T", created_by="org-1",
        itinerary=[
            {"day": "Sat", "title": "Round 1"},
            {"kind": "game", "title": "Skins", "prize_fund_cents": 20000},
            {"kind": "game", "title": "Long drive", "prize_fund_cents": 5000},
        ],
    )
    assert response.prize_fund_cents == 25000


def test_untagged_games_from_older_rows_are_read_as_games():
    response = TripResponse(
        id="t1", slug="s", title="T", created_by="org-1",
        itinerary=[
            {"day": "Fri", "title": "Arrive"},
            {"details": "Skins on 18", "prize_fund_cents": 20000},
            {"details": "Long drive", "prize_fund_cents": None},
        ],
    )
    day, skins, long_drive = response.itinerary
    assert isinstance(day, ItineraryDay)
    assert isinstance(skins, Game) and skins.title == "Skins on 18"
    assert long_drive.prize_fund_cents == 0
    assert response.prize_fund_cents == 20000


def test_owned_trip_with_untagged_games_loads(supabase, trip, organizer):
    supabase.rows("trips")[0]["itinerary"] = [
        {"details": "Skins on 18", "prize_fund_cents": 20000},
        {"details": "Long drive", "prize_fund_cents": None},
    ]
    loaded = TripService(supabase).get_owned_trip(trip.id, organizer["id"])
    assert loaded.prize_fund_cents == 20000


def test_title_with_line_break_rejected():
    with pytest.raises(pydantic.ValidationError):
        TripCreate(**{**BASE, "title": "Bandon\r\nBcc: everyone@example.com"})
    with pytest.raises(pydantic.ValidationError):
        TripCreate(**{**BASE, "title": "Bandon\x00"})


def test_create_trip_records_creator(supabase, organizer):
    trip = make_trip(supabase, organizer["id"])
    assert trip.created_by == organizer["id"]
    assert supabase.rows("trips")[0]["deposit_amount_cents"] == 50000


def test_duplicate_slug_is_constraint_violation(supabase, organizer):
    make_trip(supabase, organizer["id"], slug="same-slug")
    with pytest.raises(ConstraintViolation):
        make_trip(supabase, OTHER_ORGANIZER["id"], slug="same-slug")


def test_only_creator_can_update(supabase, trip, organizer):
    service = TripService(supabase)
    update = TripUpdate(**{**BASE, "slug": trip.slug, "title": "Renamed"})
    with pytest.raises(NotFoundError):
        service.update_trip(trip.id, update, OTHER_ORGANIZER["id"])
    updated = service.update_trip(trip.id, update, organizer["id"])
    assert updated.title == "Renamed"


def test_get_owned_trip_conflates_missing_and_not_owned(supabase, trip):
    service = TripService(supabase)
    with pytest.raises(NotFoundError) as not_owned:
        service.get_owned_trip(trip.id, OTHER_ORGANIZER["id"])
    with pytest.raises(NotFoundError) as missing:
        service.get_owned_trip("missing", OTHER_ORGANIZER["id"])
    assert not_owned.value.user_message == missing.value.user_message


def test_trip_visible_to_members_only(supabase, trip, guest):
    service = TripService(supabase)
    with pytest.raises(NotFoundError):
        service.get_trip_for_member(trip.slug, guest["id"])
    add_accepted_member(supabase, trip.id, guest)
    assert service.get_trip_for_member(trip.slug, guest["id"]).id == trip.id


def test_list_member_trips_includes_own_status(supabase, trip, guest):
    add_accepted_member(supabase, trip.id, guest)
    supabase.table("rsvps").insert({"trip_id": trip.id, "user_id": guest["id"], "status": "maybe"}).execute()
    supabase.table("payments").insert({
        "trip_id": trip.id, "user_id": guest["id"], "type": "deposit",
        "amount_cents": 50000, "method": "zelle",
    }).execute()

    [summary] = TripService(supabase).list_member_trips(guest["id"])
    assert summary.slug == trip.slug
    assert summary.membership_status == "accepted"
    assert summary.rsvp_status == "maybe"
    assert summary.payment_status == "reported"


def test_list_member_trips_empty(supabase, guest):
    assert TripService(supabase).list_member_trips(guest["id"]) == []
