"""
directory/models.py -- Domain dataclasses for the business directory.

Pure data containers. Ownership rules and queries live in directory/store.py.
Neither these dataclasses nor the store know anything about sessions or
tokens: routes hand the store a plain owner/user id taken from the Identity.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

BOOKING_STATUSES = ("pending", "confirmed", "cancelled")
IMAGE_ENTITY_TYPES = ("business", "event")


@dataclass
class Business:
    """A listed business.

    image_url is derived on read: the entity's primary image, if any.
    id is None before the record is written to the database.
    """

    name: str
    category: str
    owner_id: int
    description: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    rating: float = 0.0
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    image_url: Optional[str] = None


@dataclass
class BusinessView:
    """One public fetch of a business detail page."""

    business_id: int
    user_ip: Optional[str] = None
    user_agent: Optional[str] = None
    id: Optional[int] = None
    viewed_at: str = ""


@dataclass
class Event:
    """A dated event, optionally attached to a business.

    event_date is naive UTC.
    """

    owner_id: int
    title: str
    event_date: datetime
    business_id: Optional[int] = None
    description: Optional[str] = None
    location: Optional[str] = None
    price: float = 0.0
    category: Optional[str] = None
    id: Optional[int] = None
    created_at: str = ""
    image_url: Optional[str] = None


@dataclass
class Booking:
    event_id: int
    name: str
    email: str
    tickets: int = 1
    phone: Optional[str] = None
    notes: Optional[str] = None
    status: str = "pending"  # "pending" | "confirmed" | "cancelled"
    id: Optional[int] = None
    created_at: str = ""


@dataclass
class Image:
    """An image attached to a business or event by URL.

    At most one image per (entity_type, entity_id) has is_primary set.
    """

    entity_type: str  # "business" | "event"
    entity_id: int
    image_url: str
    caption: Optional[str] = None
    display_order: int = 0
    is_primary: bool = False
    uploaded_by: Optional[int] = None
    id: Optional[int] = None
    created_at: str = ""
