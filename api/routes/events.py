"""
api/routes/events.py -- Event routes.

Routes:
  GET    /events            -- public; upcoming events, soonest first (?business_id= filter)
  POST   /events            -- create (event owner or business owner)
  GET    /events/{id}       -- public detail
  PUT    /events/{id}       -- update (event manager, must own it)
  DELETE /events/{id}       -- delete with its bookings (event manager, must own it)
  GET    /my-events         -- caller's events, past ones included

Linking: a business owner may attach an event to one of their own
businesses. An event owner has no businesses, so any business_id they send
is dropped.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from api.context import AppContext
from api.models import EventCreate, EventResponse, EventUpdate, MessageResponse
from auth.dependencies import require_event_manager
from auth.models import Identity, Role
from core.errors import NotFoundError
from directory.models import Event

router = APIRouter()


@router.get("/events", response_model=list[EventResponse])
def list_events(request: Request, business_id: Optional[int] = None) -> list[EventResponse]:
    ctx: AppContext = request.app.state.ctx
    return [EventResponse.from_domain(e) for e in ctx.directory.list_upcoming_events(business_id=business_id)]


@router.post("/events", response_model=EventResponse, status_code=201)
def create_event(
    request: Request,
    body: EventCreate,
    identity: Identity = Depends(require_event_manager),
) -> EventResponse:
    ctx: AppContext = request.app.state.ctx
    fields = body.model_dump()
    if identity.role is not Role.BUSINESS_OWNER:
        fields["business_id"] = None
    event_id = ctx.directory.create_event(Event(owner_id=identity.user_id, **fields))
    ev = ctx.directory.get_event(event_id)
    ctx.activity.log_event(
        "event_created",
        f"Event '{ev.title}' created",
        {"event_id": event_id, "owner_id": identity.user_id, "business_id": ev.business_id},
    )
    return EventResponse.from_domain(ev)


@router.get("/events/{event_id}", response_model=EventResponse)
def get_event(request: Request, event_id: int) -> EventResponse:
    ctx: AppContext = request.app.state.ctx
    ev = ctx.directory.get_event(event_id)
    if ev is None:
        raise NotFoundError("Event not found.")
    return EventResponse.from_domain(ev)


@router.put("/events/{event_id}", response_model=EventResponse)
def update_event(
    request: Request,
    event_id: int,
    body: EventUpdate,
    identity: Identity = Depends(require_event_manager),
) -> EventResponse:
    ctx: AppContext = request.app.state.ctx
    ev = ctx.directory.update_event(event_id, identity.user_id, **body.model_dump(exclude_none=True))
    ctx.activity.log_event(
        "event_updated",
        f"Event '{ev.title}' updated",
        {"event_id": event_id, "owner_id": identity.user_id},
    )
    return EventResponse.from_domain(ev)


@router.delete("/events/{event_id}", response_model=MessageResponse)
def delete_event(
    request: Request,
    event_id: int,
    identity: Identity = Depends(require_event_manager),
) -> MessageResponse:
    ctx: AppContext = request.app.state.ctx
    ctx.directory.delete_event(event_id, identity.user_id)
    ctx.activity.log_event(
        "event_deleted",
        f"Event {event_id} deleted",
        {"event_id": event_id, "owner_id": identity.user_id},
    )
    return MessageResponse(message="Event deleted successfully.")


@router.get("/my-events", response_model=list[EventResponse])
def my_events(request: Request, identity: Identity = Depends(require_event_manager)) -> list[EventResponse]:
    ctx: AppContext = request.app.state.ctx
    return [EventResponse.from_domain(e) for e in ctx.directory.list_events_by_owner(identity.user_id)]
