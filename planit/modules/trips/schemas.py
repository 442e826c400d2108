import re
from datetime import date, datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, StrictInt, computed_field, field_validator, model_validator

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
# Titles end up in email Subject headers
CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


class ItineraryDay(BaseModel):
    kind: Literal["day"] = "day"
    day: str
    title: str
    details: Optional[str] = None


class Game(BaseModel):
    kind: Literal["game"] = "game"
    title: Optional[str] = None
    day: Optional[str] = None
    details: Optional[str] = None
    prize_fund_cents: StrictInt = Field(default=0, ge=0)

    @field_validator("prize_fund_cents", mode="before")
    @classmethod
    def unset_fund_is_zero(cls, value):
        return 0 if value is None else value

    @model_validator(mode="after")
    def title_or_details(self):
        if not self.title:
            self.title = self.details or "Game"
        return self


ItineraryItem = Annotated[Union[ItineraryDay, Game], Field(discriminator="kind")]


def _legacy_kind(item: dict) -> str:
    # Older rows store games as bare {details, prize_fund_cents}
    if "prize_fund_cents" in item and "day" not in item:
        return "game"
    return "day"


def _tag_legacy_items(items):
    if not isinstance(items, list):
        return items
    tagged = []
    for item in items:
        if isinstance(item, dict) and "kind" not in item:
            item = {**item, "kind": _legacy_kind(item)}
        tagged.append(item)
    return tagged


class TripBase(BaseModel):
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    location_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    overview: Optional[str] = None
    itinerary: Optional[List[ItineraryItem]] = None
    deposit_amount_cents: StrictInt = Field(default=0, ge=0)
    deposit_due_date: Optional[date] = None
    venmo_handle: Optional[str] = None
    venmo_qr_url: Optional[str] = None
    zelle_recipient: Optional[str] = None
    required_memo_template: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        if CONTROL_CHARS.search(value):
            raise ValueError("Title cannot contain line breaks or control characters")
        return value.strip()

    @field_validator("slug")
    @classmethod
    def slug_is_url_safe(cls, value: str) -> str:
        value = value.strip()
        if not SLUG_PATTERN.match(value):
            raise ValueError("Slug must be lower-case letters, digits and single hyphens")
        return value

    @field_validator("venmo_qr_url")
    @classmethod
    def qr_url_is_http(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value == "":
            return None
        if not value.startswith(("http://", "https://")):
            raise ValueError("venmo_qr_url must be an http(s) URL")
        return value

    @field_validator("venmo_handle")
    @classmethod
    def strip_at(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip().lstrip("@") or None

    @field_validator("itinerary", mode="before")
    @classmethod
    def tag_itinerary(cls, value):
        return _tag_legacy_items(value)

    @model_validator(mode="after")
    def dates_in_order(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class TripCreate(TripBase):
    pass


class TripUpdate(TripBase):
    """Full replacement of the editable trip fields."""
    pass


class TripResponse(BaseModel):
    id: str
    slug: str
    title: str
    location_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    overview: Optional[str] = None
    itinerary: Optional[List[ItineraryItem]] = None
    deposit_amount_cents: int = 0
    deposit_due_date: Optional[date] = None
    venmo_handle: Optional[str] = None
    venmo_qr_url: Optional[str] = None
    zelle_recipient: Optional[str] = None
    required_memo_template: Optional[str] = None
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("itinerary", mode="before")
    @classmethod
    def tag_itinerary(cls, value):
        return _tag_legacy_items(value)

    @computed_field
    @property
    def prize_fund_cents(self) -> int:
        return sum(item.prize_fund_cents for item in (self.itinerary or []) if isinstance(item, Game))

    class Config:
        from_attributes = True


class MemberTripSummary(BaseModel):
    id: str
    slug: str
    title: str
    location_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    deposit_due_date: Optional[date] = None
    membership_status: str
    rsvp_status: Optional[str] = None
    payment_status: str = "not_reported"
