"""
API request and response models for the bizdir REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
directory/models.py, which own the internal domain representation. The
from_domain() factories keep the mapping next to the output model instead of
scattering it across route handlers.

Separation of concerns: auth/ and directory/ models = domain truth;
api/ models = API contract.
"""

from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import Role, User
from core.activity import SystemEvent
from directory.models import Booking, Business, Event, Image

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Deliberately loose: one "@", something on each side, a dot in the domain.
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

BookingStatus = Literal["pending", "confirmed", "cancelled"]
EntityType = Literal["business", "event"]


def _normalize_email(value: str) -> str:
    return value.strip().lower() if isinstance(value, str) else value


def _naive_utc(value: datetime) -> datetime:
    """Aware datetimes are converted to UTC; naive ones are taken as UTC already."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health. components maps each store to "ok" or "error"."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
    components: dict[str, str] = Field(default_factory=dict)


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /register.

    role is required and must be one of the closed Role values. company and
    phone fill the owner profile and are ignored for members.
    """

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=EMAIL_PATTERN)
    # Not stripped: whitespace is part of the password.
    password: str = Field(min_length=6, max_length=128)
    role: Role
    company: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("name", "company", "phone", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)


class UserResponse(BaseModel):
    """Public view of a user. Never carries the password digest."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    email: str
    role: Role
    company: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            company=user.company,
            phone=user.phone,
            created_at=user.created_at,
        )


class AuthResponse(BaseModel):
    """Returned by /register and /login. token is the bearer credential."""

    user: UserResponse
    token: str
    expires_at: int
    message: Optional[str] = None


# ---------------------------------------------------------------------------
# Observability
# ---------------------------------------------------------------------------


class StatsResponse(BaseModel):
    total_requests: int
    uptime_seconds: float
    start_time: str


class SystemEventResponse(BaseModel):
    type: str
    message: str
    data: Optional[dict[str, Any]] = None
    timestamp: str

    @classmethod
    def from_domain(cls, event: SystemEvent) -> "SystemEventResponse":
        return cls(type=event.type, message=event.message, data=event.data, timestamp=event.timestamp)


# ---------------------------------------------------------------------------
# Businesses
# ---------------------------------------------------------------------------


class BusinessCreate(BaseModel):
    """Request body for POST /businesses."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    category: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = None
    rating: float = Field(default=0.0, ge=0, le=5)


class BusinessUpdate(BaseModel):
    """Request body for PUT /businesses/{id}. Omitted fields are left unchanged."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)


class BusinessResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    category: str
    description: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    rating: float
    owner_id: int
    created_at: str
    image_url: Optional[str] = None

    @classmethod
    def from_domain(cls, business: Business) -> "BusinessResponse":
        return cls(
            id=business.id,
            name=business.name,
            category=business.category,
            description=business.description,
            phone=business.phone,
            email=business.email,
            address=business.address,
            rating=business.rating,
            owner_id=business.owner_id,
            created_at=business.created_at,
            image_url=business.image_url,
        )


class BusinessViewCount(BaseModel):
    id: int
    name: str
    view_count: int


class BusinessStatsResponse(BaseModel):
    """Response for GET /my-business-stats."""

    business_count: int
    total_views: int
    average_rating: float
    business_views: list[BusinessViewCount] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class EventCreate(BaseModel):
    """Request body for POST /events.

    business_id is honoured only for business owners, and only for a business
    they own. Event owners' events are never linked to a business.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    event_date: datetime
    description: Optional[str] = None
    location: Optional[str] = Field(default=None, max_length=255)
    price: float = Field(default=0.0, ge=0)
    category: Optional[str] = Field(default=None, max_length=100)
    business_id: Optional[int] = None

    @field_validator("event_date")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        return _naive_utc(value)


class EventUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    event_date: Optional[datetime] = None
    description: Optional[str] = None
    location: Optional[str] = Field(default=None, max_length=255)
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, max_length=100)

    @field_validator("event_date")
    @classmethod
    def to_naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive_utc(value) if value is not None else None


class EventResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    owner_id: int
    business_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    event_date: datetime
    location: Optional[str] = None
    price: float
    category: Optional[str] = None
    created_at: str
    image_url: Optional[str] = None

    @classmethod
    def from_domain(cls, ev: Event) -> "EventResponse":
        return cls(
            id=ev.id,
            owner_id=ev.owner_id,
            business_id=ev.business_id,
            title=ev.title,
            description=ev.description,
            event_date=ev.event_date,
            location=ev.location,
            price=ev.price,
            category=ev.category,
            created_at=ev.created_at,
            image_url=ev.image_url,
        )


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    """Request body for POST /bookings. Public: no account needed to book."""

    model_config = ConfigDict(str_strip_whitespace=True)

    event_id: int
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(default=None, max_length=50)
    tickets: int = Field(default=1, ge=1)
    notes: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    event_id: int
    name: str
    email: str
    phone: Optional[str] = None
    tickets: int
    notes: Optional[str] = None
    status: str
    created_at: str

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            event_id=booking.event_id,
            name=booking.name,
            email=booking.email,
            phone=booking.phone,
            tickets=booking.tickets,
            notes=booking.notes,
            status=booking.status,
            created_at=booking.created_at,
        )


class BookingCreatedResponse(BaseModel):
    booking: BookingResponse
    message: str


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


class ImageCreate(BaseModel):
    """Request body for POST /images. Images are referenced by URL only."""

    model_config = ConfigDict(str_strip_whitespace=True)

    entity_type: EntityType
    entity_id: int
    image_url: str = Field(min_length=1, max_length=500)
    caption: Optional[str] = Field(default=None, max_length=255)
    is_primary: bool = False


class ImageUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    caption: Optional[str] = Field(default=None, max_length=255)
    display_order: Optional[int] = Field(default=None, ge=0)
    is_primary: Optional[bool] = None


class ImageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    entity_type: str
    entity_id: int
    image_url: str
    caption: Optional[str] = None
    display_order: int
    is_primary: bool
    uploaded_by: Optional[int] = None
    created_at: str

    @classmethod
    def from_domain(cls, image: Image) -> "ImageResponse":
        return cls(
            id=image.id,
            entity_type=image.entity_type,
            entity_id=image.entity_id,
            image_url=image.image_url,
            caption=image.caption,
            display_order=image.display_order,
            is_primary=image.is_primary,
            uploaded_by=image.uploaded_by,
            created_at=image.created_at,
        )
