"""
api/routes/businesses.py -- Business listing routes.

Routes:
  GET    /businesses           -- public list, newest first
  POST   /businesses           -- create (business owner)
  GET    /businesses/{id}      -- public detail; records a view
  PUT    /businesses/{id}      -- update (business owner, must own it)
  DELETE /businesses/{id}      -- delete (business owner, must own it)
  GET    /my-businesses        -- caller's businesses (business owner)
  GET    /my-business-stats    -- view counts and rating (business owner)

Ownership: the role gate only admits business owners; whether the caller owns
THIS business is decided by DirectoryStore in the same statement that
performs the write.
"""

from fastapi import APIRouter, Depends, Request

from api.context import AppContext
from api.models import (
    BusinessCreate,
    BusinessResponse,
    BusinessStatsResponse,
    BusinessUpdate,
    MessageResponse,
)
from auth.dependencies import require_business_owner
from auth.models import Identity
from core.errors import NotFoundError
from directory.models import Business

router = APIRouter()


@router.get("/businesses", response_model=list[BusinessResponse])
def list_businesses(request: Request) -> list[BusinessResponse]:
    ctx: AppContext = request.app.state.ctx
    return [BusinessResponse.from_domain(b) for b in ctx.directory.list_businesses()]


@router.post("/businesses", response_model=BusinessResponse, status_code=201)
def create_business(
    request: Request,
    body: BusinessCreate,
    identity: Identity = Depends(require_business_owner),
) -> BusinessResponse:
    ctx: AppContext = request.app.state.ctx
    business_id = ctx.directory.create_business(Business(owner_id=identity.user_id, **body.model_dump()))
    business = ctx.directory.get_business(business_id)
    ctx.activity.log_event(
        "business_created",
        f"Business '{business.name}' created",
        {"business_id": business_id, "owner_id": identity.user_id},
    )
    return BusinessResponse.from_domain(business)


@router.get("/businesses/{business_id}", response_model=BusinessResponse)
def get_business(request: Request, business_id: int) -> BusinessResponse:
    """Return one business and count the fetch toward the owner's view statistics."""
    ctx: AppContext = request.app.state.ctx
    business = ctx.directory.get_business(business_id)
    if business is None:
        raise NotFoundError("Business not found.")
    ctx.directory.record_view(
        business_id,
        request.client.host if request.client else None,
        request.headers.get("User-Agent"),
    )
    return BusinessResponse.from_domain(business)


@router.put("/businesses/{business_id}", response_model=BusinessResponse)
def update_business(
    request: Request,
    business_id: int,
    body: BusinessUpdate,
    identity: Identity = Depends(require_business_owner),
) -> BusinessResponse:
    ctx: AppContext = request.app.state.ctx
    business = ctx.directory.update_business(business_id, identity.user_id, **body.model_dump(exclude_none=True))
    ctx.activity.log_event(
        "business_updated",
        f"Business '{business.name}' updated",
        {"business_id": business_id, "owner_id": identity.user_id},
    )
    return BusinessResponse.from_domain(business)


@router.delete("/businesses/{business_id}", response_model=MessageResponse)
def delete_business(
    request: Request,
    business_id: int,
    identity: Identity = Depends(require_business_owner),
) -> MessageResponse:
    ctx: AppContext = request.app.state.ctx
    ctx.directory.delete_business(business_id, identity.user_id)
    ctx.activity.log_event(
        "business_deleted",
        f"Business {business_id} deleted",
        {"business_id": business_id, "owner_id": identity.user_id},
    )
    return MessageResponse(message="Business deleted successfully.")


@router.get("/my-businesses", response_model=list[BusinessResponse])
def my_businesses(request: Request, identity: Identity = Depends(require_business_owner)) -> list[BusinessResponse]:
    ctx: AppContext = request.app.state.ctx
    return [BusinessResponse.from_domain(b) for b in ctx.directory.list_businesses(owner_id=identity.user_id)]


@router.get("/my-business-stats", response_model=BusinessStatsResponse)
def my_business_stats(
    request: Request,
    identity: Identity = Depends(require_business_owner),
) -> BusinessStatsResponse:
    ctx: AppContext = request.app.state.ctx
    return BusinessStatsResponse(**ctx.directory.owner_stats(identity.user_id))
