"""
api/routes/system.py -- Process statistics and the recent-activity feed.

Both endpoints are public and read only from the in-process ActivityMonitor;
neither touches a database.
"""

from fastapi import APIRouter, Request

from api.models import StatsResponse, SystemEventResponse

router = APIRouter()


@router.get("/stats", response_model=StatsResponse)
def stats(request: Request) -> StatsResponse:
    """Return total requests served, uptime and start time."""
    return StatsResponse(**request.app.state.ctx.activity.snapshot())


@router.get("/system-events", response_model=list[SystemEventResponse])
def system_events(request: Request) -> list[SystemEventResponse]:
    """Return the most recent activity entries, oldest first."""
    return [SystemEventResponse.from_domain(e) for e in request.app.state.ctx.activity.recent_events()]
