from unittest.mock import MagicMock

import pytest

from planit.core.errors import ConstraintViolation, EmailMismatchError, ErrorCode, NotFoundError
from planit.modules.memberships.service import MembershipService, generate_invite_token
from tests.conftest import OTHER_ORGANIZER


def test_invite_token_has_256_bits_of_hex():
    token = generate_invite_token()
    assert len(token) == 64
    int(token, 16)
    assert token != generate_invite_token()


def test_invite_creates_invited_membership_with_case_folded_email(supabase, trip):
    token = MembershipService(supabase).invite(trip.id, "  Alice@Example.COM ")
    [row] = supabase.rows("memberships")
    assert row["invited_email"] == "alice@example.com"
    assert row["status"] == "invited"
    assert row["invite_token"] == token
    assert row["user_id"] is None


def test_reinvite_reissues_token_without_duplicating(supabase, trip):
    service = MembershipService(supabase)
    first = service.invite(trip.id, "alice@example.com")
    second = service.invite(trip.id, "ALICE@example.com")

    rows = supabase.rows("memberships")
    assert len(rows) == 1
    assert first != second
    assert rows[0]["invite_token"] == second
    assert service.get_by_token(first) is None


def test_reinvite_resets_status_to_invited(supabase, trip, guest):
    service = MembershipService(supabase)
    token = service.invite(trip.id, guest["email"])
    service.claim(token, guest)
    service.invite(trip.id, guest["email"])
    assert supabase.rows("memberships")[0]["status"] == "invited"


def test_same_email_on_two_trips_gets_two_memberships(supabase, trip, organizer):
    from tests.conftest import make_trip
    other = make_trip(supabase, organizer["id"], slug="second-trip")
    service = MembershipService(supabase)
    service.invite(trip.id, "alice@example.com")
    service.invite(other.id, "alice@example.com")
    assert len(supabase.rows("memberships")) == 2


def test_claim_binds_account_and_accepts(supabase, trip, guest):
    service = MembershipService(supabase)
    token = service.invite(trip.id, guest["email"])

    result = service.claim(token, guest)

    assert result.status == "accepted"
    assert result.redirect_to == f"/trips/{trip.slug}"
    assert result.already_accepted is False
    row = supabase.rows("memberships")[0]
    assert row["user_id"] == guest["id"]
    assert row["accepted_at"] is not None


def test_claim_is_idempotent(supabase, trip, guest):
    service = MembershipService(supabase)
    token = service.invite(trip.id, guest["email"])
    first = service.claim(token, guest)
    accepted_at = supabase.rows("memberships")[0]["accepted_at"]

    second = service.claim(token, guest)

    assert first.status == second.status == "accepted"
    assert second.already_accepted is True
    assert supabase.rows("memberships")[0]["accepted_at"] == accepted_at


def test_claim_email_match_is_case_insensitive(supabase, trip, guest):
    service = MembershipService(supabase)
    token = service.invite(trip.id, "ALICE@example.com")
    result = service.claim(token, {**guest, "email": "Alice@Example.com"})
    assert result.status == "accepted"


def test_claim_with_wrong_email_leaves_membership_untouched(supabase, trip, guest):
    service = MembershipService(supabase)
    token = service.invite(trip.id, "bob@example.com")

    with pytest.raises(EmailMismatchError):
        service.claim(token, guest)

    row = supabase.rows("memberships")[0]
    assert row["status"] == "invited"
    assert row["user_id"] is None


def test_claim_unknown_token_is_not_found(supabase, trip, guest):
    with pytest.raises(NotFoundError) as exc:
        MembershipService(supabase).claim("nope", guest)
    assert exc.value.code == ErrorCode.INVITE_NOT_FOUND


def test_list_memberships_newest_first(supabase, trip, organizer):
    service = MembershipService(supabase)
    for email in ["a@example.com", "b@example.com", "c@example.com"]:
        service.invite(trip.id, email)

    listed = service.list_memberships(trip.id, organizer["id"])

    assert [m.invited_email for m in listed] == ["c@example.com", "b@example.com", "a@example.com"]


def test_list_memberships_requires_ownership(supabase, trip):
    MembershipService(supabase).invite(trip.id, "a@example.com")
    with pytest.raises(NotFoundError):
        MembershipService(supabase).list_memberships(trip.id, OTHER_ORGANIZER["id"])


def test_invite_reissues_when_concurrent_insert_wins(supabase, trip):
    service = MembershipService(supabase)
    first = service.invite(trip.id, "alice@example.com")
    existing = service._find(trip.id, "alice@example.com")
    # lookup misses, then the insert collides with the row the other request wrote
    service._find = MagicMock(side_effect=[None, existing])

    token = service.invite(trip.id, "alice@example.com")

    [row] = supabase.rows("memberships")
    assert row["invite_token"] == token != first
    assert row["status"] == "invited"
    assert service._find.call_count == 2


def test_invite_collision_without_visible_row_is_constraint_violation(supabase, trip):
    service = MembershipService(supabase)
    service.invite(trip.id, "alice@example.com")
    service._find = MagicMock(return_value=None)

    with pytest.raises(ConstraintViolation):
        service.invite(trip.id, "alice@example.com")
    assert len(supabase.rows("memberships")) == 1
