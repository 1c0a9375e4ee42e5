"""
api/routes/bookings.py -- Event booking routes.

Routes:
  POST   /bookings          -- public; book tickets for an event
  GET    /bookings          -- bookings on the caller's events (session)
  PUT    /bookings/{id}     -- change status (owner of the booked event)
  DELETE /bookings/{id}     -- remove (owner of the booked event)

Any signed-in role may call the owner-side routes; a caller who owns no events
simply sees an empty list and gets 403 on other people's bookings.
"""

from fastapi import APIRouter, Depends, Request

from api.context import AppContext
from api.models import (
    BookingCreate,
    BookingCreatedResponse,
    BookingResponse,
    BookingStatusUpdate,
    MessageResponse,
)
from auth.dependencies import require_session
from auth.models import Identity
from directory.models import Booking

router = APIRouter()


@router.post("/bookings", response_model=BookingCreatedResponse, status_code=201)
def create_booking(request: Request, body: BookingCreate) -> BookingCreatedResponse:
    ctx: AppContext = request.app.state.ctx
    booking_id = ctx.directory.create_booking(Booking(**body.model_dump()))
    booking = ctx.directory.get_booking(booking_id)
    ctx.activity.log_event(
        "booking_created",
        f"{booking.tickets} ticket(s) booked for event {booking.event_id}",
        {"booking_id": booking_id, "event_id": booking.event_id, "tickets": booking.tickets},
    )
    return BookingCreatedResponse(
        booking=BookingResponse.from_domain(booking),
        message="Booking created successfully.",
    )


@router.get("/bookings", response_model=list[BookingResponse])
def list_bookings(request: Request, identity: Identity = Depends(require_session)) -> list[BookingResponse]:
    ctx: AppContext = request.app.state.ctx
    return [BookingResponse.from_domain(b) for b in ctx.directory.list_bookings_for_owner(identity.user_id)]


@router.put("/bookings/{booking_id}", response_model=MessageResponse)
def update_booking(
    request: Request,
    booking_id: int,
    body: BookingStatusUpdate,
    identity: Identity = Depends(require_session),
) -> MessageResponse:
    ctx: AppContext = request.app.state.ctx
    ctx.directory.update_booking_status(booking_id, identity.user_id, body.status)
    return MessageResponse(message="Booking updated successfully.")


@router.delete("/bookings/{booking_id}", response_model=MessageResponse)
def delete_booking(
    request: Request,
    booking_id: int,
    identity: Identity = Depends(require_session),
) -> MessageResponse:
    ctx: AppContext = request.app.state.ctx
    ctx.directory.delete_booking(booking_id, identity.user_id)
    return MessageResponse(message="Booking deleted successfully.")
