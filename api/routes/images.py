"""
api/routes/images.py -- Image references for businesses and events.

Routes:
  GET    /images?entity_type=&entity_id=   -- public; primary first
  POST   /images                           -- attach by URL (owner of the entity)
  PUT    /images/{id}                      -- caption / order / primary (uploader)
  DELETE /images/{id}                      -- remove (uploader)

Images are stored as URLs only; there is no upload endpoint and no file
storage behind these routes.
"""

from fastapi import APIRouter, Depends, Request

from api.context import AppContext
from api.models import EntityType, ImageCreate, ImageResponse, ImageUpdate, MessageResponse
from auth.dependencies import require_session
from auth.models import Identity
from directory.models import Image

router = APIRouter()


@router.get("/images", response_model=list[ImageResponse])
def list_images(request: Request, entity_type: EntityType, entity_id: int) -> list[ImageResponse]:
    ctx: AppContext = request.app.state.ctx
    return [ImageResponse.from_domain(i) for i in ctx.directory.list_images(entity_type, entity_id)]


@router.post("/images", response_model=ImageResponse, status_code=201)
def add_image(
    request: Request,
    body: ImageCreate,
    identity: Identity = Depends(require_session),
) -> ImageResponse:
    ctx: AppContext = request.app.state.ctx
    image_id = ctx.directory.add_image(Image(uploaded_by=identity.user_id, **body.model_dump()))
    return ImageResponse.from_domain(ctx.directory.get_image(image_id))


@router.put("/images/{image_id}", response_model=ImageResponse)
def update_image(
    request: Request,
    image_id: int,
    body: ImageUpdate,
    identity: Identity = Depends(require_session),
) -> ImageResponse:
    ctx: AppContext = request.app.state.ctx
    image = ctx.directory.update_image(image_id, identity.user_id, **body.model_dump(exclude_none=True))
    return ImageResponse.from_domain(image)


@router.delete("/images/{image_id}", response_model=MessageResponse)
def delete_image(
    request: Request,
    image_id: int,
    identity: Identity = Depends(require_session),
) -> MessageResponse:
    ctx: AppContext = request.app.state.ctx
    ctx.directory.delete_image(image_id, identity.user_id)
    return MessageResponse(message="Image deleted successfully.")
