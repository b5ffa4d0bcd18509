"""
Event endpoints.

Listing and reading events is public.  Creating events, reading your
own events and attending require a bearer token; updating and deleting
additionally require being the event's organizer.
"""

import math
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from eventboard_api.app.core.security import get_current_user
from eventboard_api.app.schemas.event import (
    EventCreate,
    EventListResponse,
    EventMessageResponse,
    EventResponse,
    EventsResponse,
    EventUpdate,
    MessageResponse,
    Pagination,
)
from eventboard_api.app.services.event_service import MAX_PAGE, EventConflict, EventService


router = APIRouter()


def _not_found(e: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _forbidden(e: PermissionError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))


@router.get("", response_model=EventListResponse)
async def list_events(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=100),
) -> EventListResponse:
    """List events with optional search, category filter and pagination.

    - **search** matches any word in the title, description or location.
    - **category** filters by category; ``All`` means no filter.
    - **page**, **limit** select the page (``limit`` at most 100).
    """
    search = search.strip() if search else None
    category = category.strip() if category else None
    events, total = await EventService.list_events(
        search=search,
        category=category,
        page=page,
        limit=limit,
    )
    return EventListResponse(
        events=events,
        pagination=Pagination(current=page, pages=math.ceil(total / limit), total=total),
    )


@router.get("/user/my-events", response_model=EventsResponse)
async def list_my_events(current_user: Dict[str, Any] = Depends(get_current_user)) -> EventsResponse:
    """List every event organized by the authenticated user, soonest first."""
    events = await EventService.list_user_events(current_user["user_id"])
    return EventsResponse(events=events)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str) -> EventResponse:
    """Retrieve a single event with its organizer and attendees.

    Unknown or malformed ids both yield HTTP 404.
    """
    try:
        event = await EventService.get_event(event_id)
    except ValueError as e:
        raise _not_found(e) from e
    return EventResponse(event=event)


@router.post("", response_model=EventMessageResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event: EventCreate,
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> EventMessageResponse:
    """Create a new event organized by the authenticated user."""
    created = await EventService.create_event(event, current_user)
    return EventMessageResponse(message="Event created successfully", event=created)


@router.put("/{event_id}", response_model=EventMessageResponse)
async def update_event(
    event_id: str,
    updates: EventUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> EventMessageResponse:
    """Update an event (organizer only).

    Partial updates are supported; unspecified or null fields stay
    unchanged.
    """
    update_dict = updates.model_dump(exclude_unset=True, exclude_none=True)
    try:
        event = await EventService.update_event(event_id, update_dict, current_user)
    except ValueError as e:
        raise _not_found(e) from e
    except PermissionError as e:
        raise _forbidden(e) from e
    return EventMessageResponse(message="Event updated successfully", event=event)


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> MessageResponse:
    """Delete an event (organizer only)."""
    try:
        await EventService.delete_event(event_id, current_user)
    except ValueError as e:
        raise _not_found(e) from e
    except PermissionError as e:
        raise _forbidden(e) from e
    return MessageResponse(message="Event deleted successfully")


@router.post("/{event_id}/attend", response_model=EventMessageResponse)
async def attend_event(
    event_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> EventMessageResponse:
    """Join the event's attendee list."""
    try:
        event = await EventService.attend_event(event_id, current_user)
    except ValueError as e:
        raise _not_found(e) from e
    except EventConflict as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return EventMessageResponse(message="You are now attending this event", event=event)


@router.delete("/{event_id}/attend", response_model=EventMessageResponse)
async def leave_event(
    event_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> EventMessageResponse:
    """Leave the event's attendee list."""
    try:
        event = await EventService.leave_event(event_id, current_user)
    except ValueError as e:
        raise _not_found(e) from e
    except EventConflict as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return EventMessageResponse(message="You are no longer attending this event", event=event)
