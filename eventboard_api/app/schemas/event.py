"""
Pydantic models for event data.

``EventCreate`` validates a new event, ``EventUpdate`` a partial
change of an existing one (every provided field obeys the same rules),
and ``EventRead`` is what the API returns, with the organizer and
attendees populated and the derived ``attendeeCount`` and
``spotsRemaining`` values.
"""

import re
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import Field, computed_field, field_validator

from . import APIModel
from .user import UserSummary


CATEGORIES = (
    "Conference",
    "Workshop",
    "Seminar",
    "Networking",
    "Social",
    "Sports",
    "Cultural",
    "Other",
)
STATUSES = ("upcoming", "ongoing", "completed", "cancelled")
TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
MAX_TAG_LENGTH = 30


def _bounded_text(value: str, low: int, high: int, message: str) -> str:
    value = value.strip()
    if not low <= len(value) <= high:
        raise ValueError(message)
    return value


def _future_date(value: datetime) -> datetime:
    # Naive datetimes are taken to be UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    if value <= datetime.now(timezone.utc):
        raise ValueError("Event date must be in the future")
    return value


def _time_of_day(value: str) -> str:
    if not TIME_PATTERN.match(value):
        raise ValueError("Please enter a valid time in HH:MM format")
    return value


def _category(value: str) -> str:
    if value not in CATEGORIES:
        raise ValueError("Please select a valid category")
    return value


def _status(value: str) -> str:
    if value not in STATUSES:
        raise ValueError("Status must be one of: " + ", ".join(STATUSES))
    return value


def _max_attendees(value: int) -> int:
    if not 1 <= value <= 10000:
        raise ValueError("Maximum attendees must be between 1 and 10,000")
    return value


def _price(value: float) -> float:
    if value < 0:
        raise ValueError("Price cannot be negative")
    return value


def _tags(value: List[str]) -> List[str]:
    cleaned = []
    for tag in value:
        tag = tag.strip()
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError(f"Tag cannot exceed {MAX_TAG_LENGTH} characters")
        if tag:
            cleaned.append(tag)
    return cleaned


class EventCreate(APIModel):
    """Schema for creating an event.  The organizer comes from the token."""

    title: str = Field(..., examples=["PyCon Meetup"])
    description: str = Field(..., examples=["An evening of lightning talks"])
    date: datetime = Field(..., examples=["2030-09-01T18:00:00Z"])
    time: str = Field(..., examples=["18:00"])
    location: str = Field(..., examples=["Main Hall"])
    category: str = Field(..., examples=["Networking"])
    max_attendees: Optional[int] = Field(None, examples=[50])
    price: float = Field(0, examples=[0])
    status: str = Field("upcoming", examples=["upcoming"])
    tags: List[str] = Field(default_factory=list, examples=[["python", "talks"]])

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _bounded_text(v, 3, 100, "Title must be between 3 and 100 characters")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return _bounded_text(v, 10, 1000, "Description must be between 10 and 1000 characters")

    @field_validator("location")
    @classmethod
    def validate_location(cls, v: str) -> str:
        return _bounded_text(v, 3, 200, "Location must be between 3 and 200 characters")

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: datetime) -> datetime:
        return _future_date(v)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _time_of_day(v)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return _category(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return _status(v)

    @field_validator("max_attendees")
    @classmethod
    def validate_max_attendees(cls, v: Optional[int]) -> Optional[int]:
        return v if v is None else _max_attendees(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        return _price(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        return _tags(v)


class EventUpdate(APIModel):
    """Schema for updating an event.

    All fields are optional; only provided, non‑null fields are
    updated.  The organizer and attendees cannot be changed here.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    time: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    max_attendees: Optional[int] = None
    price: Optional[float] = None
    status: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _bounded_text(v, 3, 100, "Title must be between 3 and 100 characters")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _bounded_text(v, 10, 1000, "Description must be between 10 and 1000 characters")

    @field_validator("location")
    @classmethod
    def validate_location(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _bounded_text(v, 3, 200, "Location must be between 3 and 200 characters")

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return v if v is None else _future_date(v)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _time_of_day(v)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _category(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _status(v)

    @field_validator("max_attendees")
    @classmethod
    def validate_max_attendees(cls, v: Optional[int]) -> Optional[int]:
        return v if v is None else _max_attendees(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: Optional[float]) -> Optional[float]:
        return v if v is None else _price(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return v if v is None else _tags(v)


class EventRead(APIModel):
    """Schema for reading an event from the API."""

    id: int
    title: str
    description: str
    date: datetime
    time: str
    location: str
    category: str
    max_attendees: Optional[int] = None
    price: float = 0
    status: str = "upcoming"
    tags: List[str] = Field(default_factory=list)
    organizer: UserSummary
    attendees: List[UserSummary] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field(alias="attendeeCount")
    @property
    def attendee_count(self) -> int:
        return len(self.attendees)

    @computed_field(alias="spotsRemaining")
    @property
    def spots_remaining(self) -> Optional[int]:
        if not self.max_attendees:
            return None
        return self.max_attendees - len(self.attendees)


class Pagination(APIModel):
    current: int
    pages: int
    total: int


class EventListResponse(APIModel):
    success: bool = True
    events: List[EventRead]
    pagination: Pagination


class EventsResponse(APIModel):
    success: bool = True
    events: List[EventRead]


class EventResponse(APIModel):
    success: bool = True
    event: EventRead


class EventMessageResponse(APIModel):
    success: bool = True
    message: str
    event: EventRead


class MessageResponse(APIModel):
    success: bool = True
    message: str
